import logging
from flask import Blueprint, jsonify, current_app, send_file

from pubfs import FileManagerError

logger = logging.getLogger(__name__)

content_bp = Blueprint("content", __name__)


@content_bp.route("/content/<path:file_path>", methods=["GET"])
def get_content(file_path: str):
	"""Serve a file from the public root by its relative path."""
	manager = current_app.config["FILE_MANAGER"]

	try:
		target = manager.resolve_content_path(file_path)
	except FileManagerError as e:
		return jsonify({"error": e.message}), e.http_status

	return send_file(target, download_name=target.name, conditional=True)
