import logging, sys

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def setup_logging(level = logging.INFO, quiet_werkzeug: bool = True):
	"""Log to stdout. Safe to call more than once; only one handler is installed."""
	root_logger = logging.getLogger()
	root_logger.setLevel(level)

	if not any(getattr(h, "_pubfs", False) for h in root_logger.handlers):
		handler = logging.StreamHandler(sys.stdout)
		handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
		handler._pubfs = True
		root_logger.addHandler(handler)

	# Per-request lines from the dev server drown out mutation logs
	werkzeug_level = logging.WARNING if quiet_werkzeug and level > logging.DEBUG else level
	logging.getLogger("werkzeug").setLevel(werkzeug_level)
