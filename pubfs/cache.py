import time
import logging
from typing import Optional, Callable

from .models import FolderNode
from .tree import TreeBuilder

logger = logging.getLogger(__name__)


class TreeCache:
	"""
	Holds the most recent tree snapshot for a short time-to-live.

	There is no lock: two requests racing past an expired snapshot both
	rebuild and the later one is kept. Both builds read the same disk, so
	either result is valid.
	"""
	DEFAULT_TTL = 2.0  # seconds

	def __init__(self, builder: TreeBuilder, ttl: float = DEFAULT_TTL,
				clock: Callable[[], float] = time.monotonic):
		self.builder = builder
		self.ttl = ttl
		self._clock = clock
		self._snapshot: Optional[FolderNode] = None
		self._built_at = 0.0

	@property
	def is_populated(self) -> bool:
		return self._snapshot is not None

	def get_snapshot(self) -> FolderNode:
		"""
		Return the cached tree if it is younger than the TTL, otherwise rebuild it.
		DirectoryUnreadable from the builder propagates and leaves the cache empty.
		"""
		now = self._clock()
		if self._snapshot is not None and now - self._built_at < self.ttl:
			return self._snapshot

		self._snapshot = None
		snapshot = self.builder.build()
		self._snapshot = snapshot
		self._built_at = now
		logger.debug("Tree cache rebuilt")
		return snapshot

	def invalidate(self):
		self._snapshot = None
		self._built_at = 0.0
