import stat
import logging
from pathlib import Path
from typing import Optional, Set

from .codec import encode_folder_id, encode_file_id
from .errors import DirectoryUnreadable
from .fs import LocalFileSystem
from .models import FileNode, FolderNode, ROOT_NAME

logger = logging.getLogger(__name__)


class TreeBuilder:
	"""Walks the public root and produces a fresh FolderNode snapshot."""

	def __init__(self, public_root: Path, fs: Optional[LocalFileSystem] = None, hide_dotfiles: bool = False):
		self.public_root = Path(public_root)
		self.fs = fs or LocalFileSystem()
		self.hide_dotfiles = hide_dotfiles

	def build(self, relative_path: str = "") -> FolderNode:
		"""
		Build the tree below relative_path.
		Any listing or stat failure aborts the whole build with DirectoryUnreadable.
		"""
		visited: Set[str] = set()
		tree = self._build_folder(relative_path, visited)
		logger.debug(f"Built tree for '{relative_path or '/'}' ({len(visited)} folders)")
		return tree

	def _build_folder(self, relative_path: str, visited: Set[str]) -> FolderNode:
		full_path = self.public_root / relative_path if relative_path else self.public_root

		try:
			visited.add(self.fs.real_path(full_path))
			entries = self.fs.list_dir(full_path)
		except OSError as e:
			raise DirectoryUnreadable(f"Cannot list '{relative_path or '/'}': {e.strerror or e}") from e

		children = []
		for entry in entries:
			if self.hide_dotfiles and entry.startswith('.'):
				continue

			entry_full_path = full_path / entry
			entry_relative_path = f"{relative_path}/{entry}" if relative_path else entry

			try:
				mode = self.fs.stat(entry_full_path).st_mode
			except FileNotFoundError:
				# Dangling symlink: nothing to show
				if self.fs.exists(entry_full_path):
					continue
				raise DirectoryUnreadable(f"'{entry_relative_path}' vanished during the walk")
			except OSError as e:
				raise DirectoryUnreadable(f"Cannot stat '{entry_relative_path}': {e.strerror or e}") from e

			if stat.S_ISDIR(mode):
				if self.fs.real_path(entry_full_path) in visited:
					logger.warning(f"Skipping directory cycle at '{entry_relative_path}'")
					continue
				children.append(self._build_folder(entry_relative_path, visited))
			elif stat.S_ISREG(mode):
				children.append(FileNode(
					id=encode_file_id(entry_relative_path),
					name=entry,
					path=entry_relative_path
				))

		if relative_path:
			name = relative_path.rsplit("/", 1)[-1]
		else:
			name = ROOT_NAME

		return FolderNode(
			id=encode_folder_id(relative_path),
			name=name,
			path=relative_path,
			children=children
		)
