import logging
from typing import Optional, List, Dict, Iterator, Tuple

from .cache import TreeCache
from .codec import ROOT_ID, decode_folder_id
from .models import FileNode, FolderNode, ItemMatch, Node

logger = logging.getLogger(__name__)


class LookupService:
	"""
	Resolves identifiers against the current snapshot.

	Searches are pre-order depth-first with children in listing order; the
	first match wins. No index is kept since the tree is rebuilt often.
	Misses return None and leave the status code to the caller.
	"""

	def __init__(self, cache: TreeCache):
		self.cache = cache

	def _walk(self, folder: FolderNode, trail: Tuple[FolderNode, ...] = ()) -> Iterator[Tuple[Node, Tuple[FolderNode, ...]]]:
		"""Yield (node, ancestors) for every node below folder, pre-order."""
		ancestors = trail + (folder,)
		for child in folder.children:
			yield child, ancestors
			if isinstance(child, FolderNode):
				yield from self._walk(child, ancestors)

	def find_folder(self, folder_id: str) -> Optional[FolderNode]:
		root = self.cache.get_snapshot()
		if folder_id == ROOT_ID:
			return root

		for node, _ in self._walk(root):
			if isinstance(node, FolderNode) and node.id == folder_id:
				return node

		logger.debug(f"Folder not found: {folder_id}")
		return None

	def find_item(self, item_id: str) -> Optional[ItemMatch]:
		"""Find any file or folder below the root, together with its parent."""
		root = self.cache.get_snapshot()
		for node, ancestors in self._walk(root):
			if node.id == item_id:
				return ItemMatch(item=node, parent=ancestors[-1])

		logger.debug(f"Item not found: {item_id}")
		return None

	def breadcrumb_path(self, node_id: str) -> Optional[List[Dict[str, str]]]:
		"""Root-first list of {id, name} ending at the matching node."""
		root = self.cache.get_snapshot()
		if node_id == root.id:
			return [{"id": root.id, "name": root.name}]

		for node, ancestors in self._walk(root):
			if node.id == node_id:
				return [{"id": n.id, "name": n.name} for n in ancestors + (node,)]
		return None

	def path_from_folder_id(self, folder_id: str) -> str:
		"""Decode without touching the snapshot. Raises InvalidIdentifier."""
		return decode_folder_id(folder_id)

	def list_files(self) -> List[FileNode]:
		"""Every file in the snapshot, pre-order."""
		root = self.cache.get_snapshot()
		return [node for node, _ in self._walk(root) if isinstance(node, FileNode)]
