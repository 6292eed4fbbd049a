import logging
from typing import Optional
from flask import Flask, jsonify

from pubfs import FileManager
from .config import ServerConfig

logger = logging.getLogger(__name__)


def create_app(config: Optional[ServerConfig] = None, manager: Optional[FileManager] = None) -> Flask:
	"""Create and configure the Flask application."""
	if config is None:
		config = ServerConfig()

	if manager is None:
		manager = FileManager.from_config(config.manager_config())

	app = Flask(__name__)

	# Configure app
	app.config["SECRET_KEY"] = config.secret_key
	app.config["MAX_CONTENT_LENGTH"] = config.max_upload_size
	app.config["PUBFS_CONFIG"] = config
	app.config["FILE_MANAGER"] = manager

	# Register blueprints
	from .routes.api import api_bp
	from .routes.content import content_bp

	app.register_blueprint(api_bp, url_prefix="/api")
	app.register_blueprint(content_bp)

	@app.errorhandler(413)
	def upload_too_large(e):
		return jsonify({"error": "File too large"}), 413

	logger.info(f"pubfs server initialized (public root: {manager.root})")

	return app


def run_server(config: Optional[ServerConfig] = None):
	"""Run the pubfs web server."""
	if config is None:
		config = ServerConfig()

	app = create_app(config)

	logger.info(f"Starting pubfs server on http://{config.host}:{config.port}")

	app.run(
		host=config.host,
		port=config.port,
		debug=config.debug,
		threaded=True
	)
