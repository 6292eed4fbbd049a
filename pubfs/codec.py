"""
Path <-> identifier codec.

Folder ids are reversible: "folder-" followed by the relative path escaped the
JSON-Pointer way ("~" -> "~0", then "/" -> "~1"). Since every literal "~" is
escaped first, "~1" in an id always means a separator and no segment name has
to be rejected. Ids never contain "/", so they fit in one URL path segment.

File ids are lookup keys only: a readable slug of the path plus a short
SHA-256 digest. They are never decoded.
"""
import hashlib
import re

from .errors import InvalidIdentifier

ROOT_ID = "root"
FOLDER_PREFIX = "folder-"
FILE_PREFIX = "file-"

FILE_DIGEST_LENGTH = 12

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")
_ESCAPE = re.compile(r"~(.?)")
_UNESCAPES = {"0": "~", "1": "/"}


def is_valid_relative_path(path: str) -> bool:
	"""True for "" (the root) or a "/"-joined run of real segment names."""
	if path == "":
		return True
	if not isinstance(path, str) or "\x00" in path:
		return False
	return all(part not in ("", ".", "..") for part in path.split("/"))


def escape_path(path: str) -> str:
	return path.replace("~", "~0").replace("/", "~1")


def unescape_path(escaped: str) -> str:
	def _replace(match):
		try:
			return _UNESCAPES[match.group(1)]
		except KeyError:
			raise InvalidIdentifier(f"Bad escape sequence in identifier: ~{match.group(1)}")

	return _ESCAPE.sub(_replace, escaped)


def encode_folder_id(path: str) -> str:
	if path == "":
		return ROOT_ID
	return FOLDER_PREFIX + escape_path(path)


def decode_folder_id(folder_id: str) -> str:
	"""
	Inverse of encode_folder_id.
	Raises InvalidIdentifier for anything encode_folder_id could not have produced.
	"""
	if folder_id == ROOT_ID:
		return ""
	if not isinstance(folder_id, str) or not folder_id.startswith(FOLDER_PREFIX):
		raise InvalidIdentifier(f"Not a folder identifier: {folder_id!r}")

	escaped = folder_id[len(FOLDER_PREFIX):]
	if not escaped:
		raise InvalidIdentifier("Empty folder identifier")

	path = unescape_path(escaped)
	if not is_valid_relative_path(path):
		raise InvalidIdentifier(f"Identifier does not name a relative path: {folder_id!r}")
	return path


def encode_file_id(path: str) -> str:
	slug = _UNSAFE_CHARS.sub("-", path)
	digest = hashlib.sha256(path.encode("utf-8", "surrogateescape")).hexdigest()[:FILE_DIGEST_LENGTH]
	return f"{FILE_PREFIX}{slug}-{digest}"


def is_folder_id(node_id: str) -> bool:
	return node_id == ROOT_ID or node_id.startswith(FOLDER_PREFIX)
