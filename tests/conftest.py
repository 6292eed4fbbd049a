"""
Shared fixtures: a throwaway public root, a FileManager over it and a Flask
test client wired to the same manager.

The manager's cache TTL is long on purpose, so any test that sees a mutation
reflected in the next read is seeing invalidation, not expiry.
"""
import pytest

from pubfs import FileManager
from pubfs.fs import LocalFileSystem
from pubfs_server import ServerConfig, create_app

LONG_TTL = 3600.0


class FakeClock:
	def __init__(self, start: float = 1000.0):
		self.now = start

	def __call__(self) -> float:
		return self.now

	def advance(self, seconds: float):
		self.now += seconds


class RecordingFileSystem(LocalFileSystem):
	"""LocalFileSystem that records every call and can be told to fail one."""

	def __init__(self):
		self.calls = []
		self.failures = {}

	def fail(self, method: str, error: OSError):
		self.failures[method] = error

	def _record(self, method: str, *args):
		self.calls.append(method)
		if method in self.failures:
			raise self.failures[method]

	def list_dir(self, path):
		self._record("list_dir", path)
		return super().list_dir(path)

	def stat(self, path):
		self._record("stat", path)
		return super().stat(path)

	def is_dir(self, path):
		self._record("is_dir", path)
		return super().is_dir(path)

	def exists(self, path):
		self._record("exists", path)
		return super().exists(path)

	def make_dir(self, path, exist_ok=False):
		self._record("make_dir", path)
		return super().make_dir(path, exist_ok=exist_ok)

	def rename(self, source, destination):
		self._record("rename", source)
		return super().rename(source, destination)

	def remove_dir(self, path):
		self._record("remove_dir", path)
		return super().remove_dir(path)

	def remove_file(self, path):
		self._record("remove_file", path)
		return super().remove_file(path)

	def write_new(self, path, stream):
		self._record("write_new", path)
		return super().write_new(path, stream)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def public_root(tmp_path):
	root = tmp_path / "public"
	root.mkdir()
	return root


@pytest.fixture
def manager(public_root):
	return FileManager(public_root, cache_ttl=LONG_TTL)


@pytest.fixture
def recording_fs():
	return RecordingFileSystem()


@pytest.fixture
def recorded_manager(public_root, recording_fs):
	mgr = FileManager(public_root, cache_ttl=LONG_TTL, fs=recording_fs)
	recording_fs.calls.clear()
	return mgr


@pytest.fixture
def app(public_root, manager):
	config = ServerConfig(public_root=public_root, cache_ttl=LONG_TTL)
	app = create_app(config, manager=manager)
	app.config["TESTING"] = True
	return app


@pytest.fixture
def client(app):
	return app.test_client()
