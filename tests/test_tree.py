import os

import pytest

from pubfs.codec import encode_file_id, encode_folder_id
from pubfs.errors import DirectoryUnreadable
from pubfs.models import FileNode, FolderNode
from pubfs.tree import TreeBuilder


@pytest.fixture
def populated_root(public_root):
	(public_root / "docs" / "reports").mkdir(parents=True)
	(public_root / "docs" / "reports" / "q1.pdf").write_bytes(b"q1")
	(public_root / "docs" / "notes.txt").write_text("notes")
	(public_root / "empty").mkdir()
	(public_root / "readme.md").write_text("# hi")
	return public_root


def test_root_node_shape(populated_root):
	tree = TreeBuilder(populated_root).build()

	assert isinstance(tree, FolderNode)
	assert tree.id == "root"
	assert tree.name == "Root"
	assert tree.path == ""
	assert tree.is_root


def test_children_keep_listing_order(populated_root):
	tree = TreeBuilder(populated_root).build()
	assert [c.name for c in tree.children] == os.listdir(populated_root)


def test_nodes_carry_relative_paths_and_ids(populated_root):
	tree = TreeBuilder(populated_root).build()
	docs = next(c for c in tree.children if c.name == "docs")
	reports = next(c for c in docs.children if c.name == "reports")
	q1 = reports.children[0]

	assert docs.path == "docs"
	assert docs.id == encode_folder_id("docs")
	assert reports.path == "docs/reports"
	assert reports.id == encode_folder_id("docs/reports")
	assert isinstance(q1, FileNode)
	assert q1.path == "docs/reports/q1.pdf"
	assert q1.id == encode_file_id("docs/reports/q1.pdf")


def test_build_subtree(populated_root):
	sub = TreeBuilder(populated_root).build("docs")
	assert sub.id == encode_folder_id("docs")
	assert sub.name == "docs"
	assert {c.name for c in sub.children} == {"reports", "notes.txt"}


def test_ids_unique_within_snapshot(populated_root):
	(populated_root / "a.b").write_text("")
	(populated_root / "a-b").write_text("")
	tree = TreeBuilder(populated_root).build()

	ids = []
	stack = [tree]
	while stack:
		node = stack.pop()
		ids.append(node.id)
		if isinstance(node, FolderNode):
			stack.extend(node.children)
	assert len(ids) == len(set(ids))


def test_listing_failure_aborts_whole_build(populated_root, recording_fs):
	class FailingSubdir(type(recording_fs)):
		def list_dir(self, path):
			if str(path).endswith("reports"):
				raise PermissionError(13, "Permission denied")
			return super().list_dir(path)

	with pytest.raises(DirectoryUnreadable):
		TreeBuilder(populated_root, fs=FailingSubdir()).build()


def test_missing_root_is_unreadable(tmp_path):
	with pytest.raises(DirectoryUnreadable):
		TreeBuilder(tmp_path / "gone").build()


def test_hide_dotfiles(populated_root):
	(populated_root / ".secret").write_text("x")
	(populated_root / ".cache").mkdir()

	visible = TreeBuilder(populated_root, hide_dotfiles=True).build()
	everything = TreeBuilder(populated_root).build()

	assert not any(c.name.startswith(".") for c in visible.children)
	assert {".secret", ".cache"} <= {c.name for c in everything.children}


def test_symlink_cycle_terminates(populated_root):
	try:
		os.symlink(populated_root / "docs", populated_root / "docs" / "loop")
	except (OSError, NotImplementedError):
		pytest.skip("symlinks not supported here")

	tree = TreeBuilder(populated_root).build()
	docs = next(c for c in tree.children if c.name == "docs")
	assert "loop" not in {c.name for c in docs.children}


def test_dangling_symlink_is_skipped(populated_root):
	try:
		os.symlink(populated_root / "nowhere", populated_root / "dangling")
	except (OSError, NotImplementedError):
		pytest.skip("symlinks not supported here")

	tree = TreeBuilder(populated_root).build()
	assert "dangling" not in {c.name for c in tree.children}


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs mkfifo")
def test_special_files_are_skipped(populated_root):
	os.mkfifo(populated_root / "pipe")
	tree = TreeBuilder(populated_root).build()
	assert "pipe" not in {c.name for c in tree.children}


def test_to_dict_depth(populated_root):
	tree = TreeBuilder(populated_root).build()

	full = tree.to_dict()
	shallow = tree.to_dict(depth=1)
	docs_full = next(c for c in full["children"] if c["name"] == "docs")
	docs_shallow = next(c for c in shallow["children"] if c["name"] == "docs")

	assert full["type"] == "folder"
	assert docs_full["children"]
	assert docs_shallow["children"] == []
