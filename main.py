import argparse
import logging
from pubfs import ManagerConfig
from pubfs.logger import setup_logging
from pubfs_server import ServerConfig, run_server

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def main():
	parser = argparse.ArgumentParser(description="pubfs - browse and manage a folder over HTTP")
	parser.add_argument("--root", "-r", default=None, help="Public root directory (default: ./public)")
	parser.add_argument("--config", "-c", default=None, help="JSON config file (public_root, cache_ttl, hide_dotfiles)")
	parser.add_argument("--host", default=DEFAULT_HOST, help="Server host")
	parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Server port")
	parser.add_argument("--cache-ttl", type=float, default=None, help="Seconds a tree snapshot is reused")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging")

	args = parser.parse_args()

	setup_logging(level=logging.DEBUG if args.debug else logging.INFO)

	manager_config = ManagerConfig.load(args.config) if args.config else ManagerConfig()
	if args.root:
		manager_config.public_root = args.root
	if args.cache_ttl is not None:
		manager_config.cache_ttl = args.cache_ttl

	if not manager_config.validate():
		logging.critical("Invalid configuration, aborting")
		return 1

	try:
		config = ServerConfig.from_manager_config(
			manager_config,
			host=args.host,
			port=args.port,
			debug=args.debug
		)
		logging.info(f"Public root: {config.public_root}, cache TTL: {config.cache_ttl}s")
		logging.info("Press Ctrl+C to stop")
		run_server(config)
	except KeyboardInterrupt:
		logging.info("Shutting down...")
	except Exception as e:
		logging.critical(f"Fatal error: {e}", exc_info=True)
		return 1
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
