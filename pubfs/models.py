from dataclasses import dataclass, field
from typing import List, Dict, Union, Optional

ROOT_NAME = "Root"


@dataclass
class FileNode:
	"""A regular file in a tree snapshot."""
	id: str
	name: str
	path: str            # Relative to the public root: "docs/report.pdf"
	type: str = field(default="file", init=False)

	def to_dict(self) -> Dict:
		return {"id": self.id, "name": self.name, "type": self.type, "path": self.path}


@dataclass
class FolderNode:
	"""A directory in a tree snapshot. The root has path "" and id "root"."""
	id: str
	name: str
	path: str
	children: List['Node'] = field(default_factory=list)
	type: str = field(default="folder", init=False)

	@property
	def is_root(self) -> bool:
		return self.path == ""

	def folders(self) -> List['FolderNode']:
		return [c for c in self.children if isinstance(c, FolderNode)]

	def files(self) -> List[FileNode]:
		return [c for c in self.children if isinstance(c, FileNode)]

	def to_dict(self, depth: Optional[int] = None) -> Dict:
		"""
		Serialize for the API.
		:param depth: How many levels of children to include. None = all.
		"""
		data = {"id": self.id, "name": self.name, "type": self.type, "path": self.path}
		if depth is not None and depth <= 0:
			data["children"] = []
			return data

		next_depth = None if depth is None else depth - 1
		data["children"] = [
			c.to_dict(next_depth) if isinstance(c, FolderNode) else c.to_dict()
			for c in self.children
		]
		return data


Node = Union[FileNode, FolderNode]


@dataclass
class ItemMatch:
	"""Result of a find_item lookup: the node and its immediate parent."""
	item: Node
	parent: FolderNode


@dataclass
class MutationResult:
	"""What a mutation produced or touched."""
	name: str
	path: str
	id: str
