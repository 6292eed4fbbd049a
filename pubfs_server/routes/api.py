import logging
from flask import Blueprint, request, jsonify, current_app
from werkzeug.exceptions import HTTPException

from pubfs import FileManager, FileManagerError, FileNode

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def get_manager() -> FileManager:
	"""Get the FileManager serving this app."""
	return current_app.config["FILE_MANAGER"]


def error_response(error: FileManagerError):
	return jsonify({"error": error.message}), error.http_status


def read_name() -> object:
	data = request.get_json(silent=True) or {}
	return data.get("name")


# ============ Folders ============

@api_bp.route("/folders/<folder_id>", methods=["GET"])
def get_folder(folder_id: str):
	"""Get a folder and everything below it."""
	manager = get_manager()

	depth = request.args.get("depth", type=int)

	try:
		folder = manager.find_folder(folder_id)
	except FileManagerError as e:
		return error_response(e)

	if folder is None:
		return jsonify({"error": "Folder not found"}), 404

	return jsonify(folder.to_dict(depth))


@api_bp.route("/folders/<folder_id>/breadcrumbs", methods=["GET"])
def get_breadcrumbs(folder_id: str):
	"""Root-first trail of {id, name} down to a folder or file."""
	try:
		trail = get_manager().breadcrumb_path(folder_id)
	except FileManagerError as e:
		return error_response(e)

	if trail is None:
		return jsonify({"error": "Folder not found"}), 404

	return jsonify({"breadcrumbs": trail})


@api_bp.route("/folders/<folder_id>", methods=["POST"])
def create_folder(folder_id: str):
	"""Create a subfolder."""
	manager = get_manager()

	try:
		result = manager.create_folder(folder_id, read_name())
	except FileManagerError as e:
		return error_response(e)
	except Exception:
		logger.exception("Failed to create folder")
		return jsonify({"error": "Failed to create folder"}), 500

	return jsonify({
		"success": True,
		"folderName": result.name,
		"id": result.id,
		"path": result.path
	})


@api_bp.route("/folders/<folder_id>", methods=["PATCH"])
def rename_folder(folder_id: str):
	"""Rename a folder in place."""
	manager = get_manager()

	try:
		result = manager.rename_folder(folder_id, read_name())
	except FileManagerError as e:
		return error_response(e)
	except Exception:
		logger.exception("Failed to rename folder")
		return jsonify({"error": "Failed to rename folder"}), 500

	return jsonify({
		"success": True,
		"folderName": result.name,
		"id": result.id,
		"path": result.path
	})


@api_bp.route("/folders/<folder_id>", methods=["DELETE"])
def delete_folder(folder_id: str):
	"""Delete an empty folder."""
	manager = get_manager()

	try:
		manager.delete_folder(folder_id)
	except FileManagerError as e:
		return error_response(e)
	except Exception:
		logger.exception("Failed to delete folder")
		return jsonify({"error": "Failed to delete folder"}), 500

	return jsonify({"success": True})


# ============ Files ============

@api_bp.route("/files/<parent_id>", methods=["POST"])
def upload_file(parent_id: str):
	"""Upload a file into a folder. Name clashes get a (n) suffix."""
	manager = get_manager()

	try:
		if manager.find_folder(parent_id) is None:
			return jsonify({"error": f"Parent folder not found (ID: {parent_id})"}), 404

		if "file" not in request.files:
			return jsonify({"error": "No file provided"}), 400

		file = request.files["file"]
		result = manager.create_file(
			parent_id,
			file.stream,
			filename=file.filename,
			provided_name=request.form.get("name")
		)
	except FileManagerError as e:
		return error_response(e)
	except HTTPException:
		# Oversized bodies surface here as 413
		raise
	except Exception:
		logger.exception("Failed to upload file")
		return jsonify({"error": "Failed to create file"}), 500

	return jsonify({
		"success": True,
		"fileName": result.name,
		"id": result.id,
		"path": result.path
	})


@api_bp.route("/files/<file_id>", methods=["GET"])
def get_file(file_id: str):
	"""Get a file node and the id of the folder holding it."""
	try:
		match = get_manager().find_item(file_id)
	except FileManagerError as e:
		return error_response(e)

	if match is None or not isinstance(match.item, FileNode):
		return jsonify({"error": "File not found"}), 404

	data = match.item.to_dict()
	data["parent"] = match.parent.id
	return jsonify(data)


@api_bp.route("/files/<file_id>", methods=["PATCH"])
def rename_file(file_id: str):
	"""Rename a file within its folder."""
	manager = get_manager()

	try:
		result = manager.rename_file(file_id, read_name())
	except FileManagerError as e:
		return error_response(e)
	except Exception:
		logger.exception("Failed to rename file")
		return jsonify({"error": "Failed to rename file"}), 500

	return jsonify({
		"success": True,
		"fileName": result.name,
		"id": result.id,
		"path": result.path
	})


@api_bp.route("/files/<file_id>", methods=["DELETE"])
def delete_file(file_id: str):
	"""Delete a file."""
	manager = get_manager()

	try:
		manager.delete_file(file_id)
	except FileManagerError as e:
		return error_response(e)
	except Exception:
		logger.exception("Failed to delete file")
		return jsonify({"error": "Failed to delete file"}), 500

	return jsonify({"success": True})


# ============ Recent ============

@api_bp.route("/recent", methods=["GET"])
def recent_files():
	"""Every file in the tree, in tree order."""
	limit = request.args.get("limit", type=int)

	try:
		files = get_manager().list_files()
	except FileManagerError as e:
		return error_response(e)

	total = len(files)
	if limit is not None and limit >= 0:
		files = files[:limit]

	return jsonify({
		"files": [f.to_dict() for f in files],
		"total": total
	})
