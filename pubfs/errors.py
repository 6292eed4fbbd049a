"""
Error taxonomy for the file manager.

Every error carries the HTTP status the API layer answers with, so routes can
turn any FileManagerError into `{"error": ...}` without a lookup table.
"""


class FileManagerError(Exception):
	"""Base class for all errors raised by pubfs."""
	http_status = 500

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class NotFound(FileManagerError):
	http_status = 404


class InvalidInput(FileManagerError):
	http_status = 400


class InvalidIdentifier(InvalidInput):
	"""An id that the codec cannot decode."""


class RootProtected(InvalidInput):
	pass


class Conflict(FileManagerError):
	# 409 would be more precise, the API has always answered 400
	http_status = 400


class AlreadyExists(Conflict):
	pass


class NotEmpty(FileManagerError):
	http_status = 400


class IOFailure(FileManagerError):
	http_status = 500


class DirectoryUnreadable(IOFailure):
	"""Listing or stat failed while building the tree."""


class DeleteFailed(IOFailure):
	pass
