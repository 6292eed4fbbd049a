import os
import stat
from pathlib import Path
from typing import List, IO
import logging

logger = logging.getLogger(__name__)


class LocalFileSystem:
	"""
	Thin wrapper over the OS calls the tree builder and mutations need.
	Every method raises the OSError subclass the OS gives back
	(FileNotFoundError, FileExistsError, PermissionError, ...).
	"""
	CHUNK_SIZE = 65536

	def list_dir(self, path: Path) -> List[str]:
		"""Entry names in listing order (not sorted)."""
		return os.listdir(path)

	def stat(self, path: Path) -> os.stat_result:
		return os.stat(path)

	def is_dir(self, path: Path) -> bool:
		try:
			return stat.S_ISDIR(os.stat(path).st_mode)
		except (FileNotFoundError, NotADirectoryError):
			return False

	def exists(self, path: Path) -> bool:
		return os.path.lexists(path)

	def real_path(self, path: Path) -> str:
		return os.path.realpath(path)

	def make_dir(self, path: Path, exist_ok: bool = False):
		os.makedirs(path, exist_ok=exist_ok)

	def rename(self, source: Path, destination: Path):
		os.rename(source, destination)

	def remove_dir(self, path: Path):
		"""Removes an empty directory only."""
		os.rmdir(path)

	def remove_file(self, path: Path):
		os.unlink(path)

	def open_new(self, path: Path) -> IO[bytes]:
		"""Opens a file for writing, failing with FileExistsError if it is already there."""
		return open(path, 'xb')

	def write_new(self, path: Path, stream: IO[bytes]) -> int:
		"""
		Copies a stream into a new file.
		Returns bytes written. Raises FileExistsError without touching an existing file.
		"""
		written = 0
		with self.open_new(path) as f:
			while True:
				chunk = stream.read(self.CHUNK_SIZE)
				if not chunk:
					break
				f.write(chunk)
				written += len(chunk)
		logger.debug(f"Wrote {written} bytes to {path}")
		return written
