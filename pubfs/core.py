import os
import errno
import time
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, List, Dict, IO, Callable

from .cache import TreeCache
from .codec import ROOT_ID, encode_folder_id, encode_file_id, is_valid_relative_path
from .config import ManagerConfig
from .errors import (
	NotFound, InvalidInput, InvalidIdentifier, RootProtected, AlreadyExists,
	NotEmpty, IOFailure, DeleteFailed
)
from .fs import LocalFileSystem
from .lookup import LookupService
from .models import FileNode, FolderNode, ItemMatch, MutationResult
from .tree import TreeBuilder

logger = logging.getLogger(__name__)


def clean_name(raw, what: str = "name") -> str:
	"""
	Reduce an untrusted name to its final path segment.
	"../../etc/passwd" -> "passwd", "a\\b" -> "b". Raises InvalidInput if nothing usable is left.
	"""
	if not isinstance(raw, str):
		raise InvalidInput(f"Invalid {what}")

	trimmed = raw.strip().replace("\\", "/").rstrip("/")
	safe = trimmed.rsplit("/", 1)[-1].strip()

	if safe in ("", ".", "..") or "\x00" in safe:
		raise InvalidInput(f"Invalid {what}")
	return safe


def join_relative(parent_path: str, name: str) -> str:
	return f"{parent_path}/{name}" if parent_path else name


def parent_of(relative_path: str) -> str:
	return relative_path.rsplit("/", 1)[0] if "/" in relative_path else ""


class FileManager:
	def __init__(self, public_root: str, cache_ttl: float = TreeCache.DEFAULT_TTL,
				hide_dotfiles: bool = False, fs: Optional[LocalFileSystem] = None,
				clock: Callable[[], float] = time.monotonic):
		"""
		Initialize the file manager.
		:param public_root: Directory holding all managed content. Created if missing.
		:param cache_ttl: Seconds a tree snapshot is served before rebuilding.
		"""
		self.root = Path(public_root).expanduser().resolve()
		self.fs = fs or LocalFileSystem()

		self._initialize_structure()

		self.builder = TreeBuilder(self.root, fs=self.fs, hide_dotfiles=hide_dotfiles)
		self.cache = TreeCache(self.builder, ttl=cache_ttl, clock=clock)
		self.lookup = LookupService(self.cache)

	@classmethod
	def from_config(cls, config: ManagerConfig) -> 'FileManager':
		return cls(config.root_path, cache_ttl=config.cache_ttl, hide_dotfiles=config.hide_dotfiles)

	def _initialize_structure(self):
		"""Creates the public root if it doesn't exist."""
		self.fs.make_dir(self.root, exist_ok=True)
		logger.info(f"Serving public root {self.root}")

	# --- Helpers ---

	def physical_path(self, relative_path: str) -> Path:
		"""Map a relative path onto disk, refusing anything outside the public root."""
		if not is_valid_relative_path(relative_path):
			raise InvalidInput(f"Invalid path: {relative_path!r}")

		target = self.root / relative_path if relative_path else self.root
		if os.path.commonpath([str(self.root), os.path.abspath(target)]) != str(self.root):
			raise InvalidInput(f"Path escapes the public root: {relative_path!r}")
		return target

	@contextmanager
	def _disk_change(self):
		"""Invalidate the tree cache once the block is done, whether or not it succeeded."""
		try:
			yield
		finally:
			self.cache.invalidate()

	def _unique_name(self, name: str, attempt: int) -> str:
		if attempt == 0:
			return name
		stem, ext = os.path.splitext(name)
		return f"{stem}({attempt}){ext}"

	# --- Reads ---

	def invalidate(self):
		self.cache.invalidate()

	def get_root(self) -> FolderNode:
		return self.cache.get_snapshot()

	def find_folder(self, folder_id: str) -> Optional[FolderNode]:
		return self.lookup.find_folder(folder_id)

	def find_item(self, item_id: str) -> Optional[ItemMatch]:
		return self.lookup.find_item(item_id)

	def breadcrumb_path(self, node_id: str) -> Optional[List[Dict[str, str]]]:
		return self.lookup.breadcrumb_path(node_id)

	def list_files(self) -> List[FileNode]:
		return self.lookup.list_files()

	def resolve_content_path(self, relative_path: str) -> Path:
		"""Physical path of an existing regular file, for downloads."""
		try:
			target = self.physical_path(relative_path)
		except InvalidInput:
			raise NotFound("File not found")
		if not relative_path or not os.path.isfile(target):
			raise NotFound("File not found")
		return target

	# --- WRITE OPERATIONS: Folders ---

	def create_folder(self, parent_id: str, name) -> MutationResult:
		"""Create a subfolder. Fails with AlreadyExists rather than reusing a folder."""
		safe_name = clean_name(name, "folder name")

		parent = self.lookup.find_folder(parent_id)
		if parent is None:
			raise NotFound("Folder not found")

		relative_path = join_relative(parent.path, safe_name)
		target = self.physical_path(relative_path)

		if self.fs.exists(target):
			raise AlreadyExists("Folder already exists")

		try:
			self.fs.make_dir(target)
		except FileExistsError:
			# Created by someone else in the meantime; nothing of ours changed
			raise AlreadyExists("Folder already exists")
		except OSError as e:
			self.cache.invalidate()
			logger.warning(f"mkdir failed for {relative_path}: {e}")
			raise IOFailure("Failed to create folder") from e
		self.cache.invalidate()

		logger.info(f"Created folder: {relative_path}")
		return MutationResult(name=safe_name, path=relative_path, id=encode_folder_id(relative_path))

	def rename_folder(self, folder_id: str, new_name) -> MutationResult:
		if folder_id == ROOT_ID:
			raise RootProtected("Cannot rename root folder")

		safe_name = clean_name(new_name, "folder name")

		folder = self.lookup.find_folder(folder_id)
		if folder is None:
			raise NotFound("Folder not found")

		return self._rename(folder.path, safe_name, encode_folder_id, "Folder")

	def delete_folder(self, folder_id: str) -> MutationResult:
		"""Remove an empty folder. Never recursive."""
		if folder_id == ROOT_ID:
			raise RootProtected("Cannot delete root folder")

		try:
			relative_path = self.lookup.path_from_folder_id(folder_id)
		except InvalidIdentifier:
			raise NotFound("Folder not found")

		target = self.physical_path(relative_path)
		if not self.fs.is_dir(target):
			raise NotFound("Folder not found")

		with self._disk_change():
			try:
				self.fs.remove_dir(target)
			except FileNotFoundError:
				raise NotFound("Folder not found")
			except OSError as e:
				if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
					raise NotEmpty("Cannot delete non-empty folder")
				logger.warning(f"rmdir failed for {relative_path}: {e}")
				raise IOFailure("Failed to delete folder") from e

		logger.info(f"Deleted folder: {relative_path}")
		return MutationResult(name=relative_path.rsplit("/", 1)[-1], path=relative_path, id=folder_id)

	# --- WRITE OPERATIONS: Files ---

	def create_file(self, parent_id: str, stream: IO[bytes], filename: Optional[str] = None,
					provided_name: Optional[str] = None) -> MutationResult:
		"""
		Store an uploaded stream in a folder.
		An explicit provided_name wins over the upload's own filename. On a
		clash the name gets "(1)", "(2)", ... before the extension; an existing
		file is never overwritten.
		"""
		if isinstance(provided_name, str) and provided_name.strip():
			raw_name = provided_name.strip()
		else:
			raw_name = filename
		safe_name = clean_name(raw_name, "file name")

		parent = self.lookup.find_folder(parent_id)
		if parent is None:
			raise NotFound(f"Parent folder not found (ID: {parent_id})")

		target_dir = self.physical_path(parent.path)

		with self._disk_change():
			try:
				self.fs.make_dir(target_dir, exist_ok=True)
			except OSError as e:
				raise IOFailure("Failed to create file") from e

			attempt = 0
			while True:
				unique_name = self._unique_name(safe_name, attempt)
				attempt += 1
				target = target_dir / unique_name
				if self.fs.exists(target):
					continue
				try:
					size = self.fs.write_new(target, stream)
					break
				except FileExistsError:
					# Lost a race for this name, try the next one
					continue
				except OSError as e:
					logger.warning(f"Write failed for {target}: {e}")
					self._discard_partial(target)
					raise IOFailure("Failed to create file") from e

		relative_path = join_relative(parent.path, unique_name)
		logger.info(f"Stored file: {relative_path} ({size} bytes)")
		return MutationResult(name=unique_name, path=relative_path, id=encode_file_id(relative_path))

	def _discard_partial(self, target: Path):
		try:
			if self.fs.exists(target):
				self.fs.remove_file(target)
		except OSError as e:
			logger.warning(f"Could not remove partial upload {target}: {e}")

	def rename_file(self, file_id: str, new_name) -> MutationResult:
		safe_name = clean_name(new_name, "file name")

		match = self.lookup.find_item(file_id)
		if match is None or not isinstance(match.item, FileNode):
			raise NotFound("File not found")

		return self._rename(match.item.path, safe_name, encode_file_id, "File")

	def delete_file(self, file_id: str) -> MutationResult:
		match = self.lookup.find_item(file_id)
		if match is None or not isinstance(match.item, FileNode):
			raise NotFound("File not found")

		relative_path = match.item.path
		target = self.physical_path(relative_path)

		with self._disk_change():
			try:
				self.fs.remove_file(target)
			except FileNotFoundError:
				raise NotFound("File not found")
			except OSError as e:
				logger.warning(f"unlink failed for {relative_path}: {e}")
				raise DeleteFailed("Failed to delete file from disk") from e

		logger.info(f"Deleted file: {relative_path}")
		return MutationResult(name=match.item.name, path=relative_path, id=file_id)

	# --- Shared ---

	def _rename(self, relative_path: str, new_name: str, encode: Callable[[str], str], kind: str) -> MutationResult:
		"""Rename an entry within its own directory."""
		new_relative_path = join_relative(parent_of(relative_path), new_name)
		if new_relative_path == relative_path:
			return MutationResult(name=new_name, path=relative_path, id=encode(relative_path))

		source = self.physical_path(relative_path)
		destination = self.physical_path(new_relative_path)

		if self.fs.exists(destination):
			raise AlreadyExists(f"{kind} with this name already exists")

		with self._disk_change():
			try:
				self.fs.rename(source, destination)
			except FileNotFoundError:
				raise NotFound(f"{kind} not found")
			except OSError as e:
				if e.errno in (errno.EEXIST, errno.ENOTEMPTY):
					raise AlreadyExists(f"{kind} with this name already exists")
				logger.warning(f"rename failed for {relative_path}: {e}")
				raise IOFailure(f"Failed to rename {kind.lower()}") from e

		logger.info(f"Renamed {kind.lower()}: {relative_path} -> {new_relative_path}")
		return MutationResult(name=new_name, path=new_relative_path, id=encode(new_relative_path))
