from dataclasses import dataclass, field
from pathlib import Path
import os
import logging

from pubfs.config import ManagerConfig

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
	"""Configuration for the pubfs web server."""
	host: str = "127.0.0.1"
	port: int = 8080
	debug: bool = False
	secret_key: str = field(default_factory=lambda: os.urandom(24).hex())
	public_root: Path = None
	cache_ttl: float = 2.0
	hide_dotfiles: bool = False
	max_upload_size: int = 100 * 1024 * 1024  # 100MB

	def __post_init__(self):
		# Default to ./public like a static site
		if self.public_root is None:
			self.public_root = Path.cwd() / "public"
		elif isinstance(self.public_root, str):
			self.public_root = Path(self.public_root)

		self.public_root = self.public_root.expanduser().resolve()
		self.public_root.mkdir(parents=True, exist_ok=True)

	@classmethod
	def from_manager_config(cls, manager_config: ManagerConfig, **overrides) -> 'ServerConfig':
		"""Server config seeded from a saved ManagerConfig; keyword overrides win."""
		values = {
			"public_root": manager_config.public_root,
			"cache_ttl": manager_config.cache_ttl,
			"hide_dotfiles": manager_config.hide_dotfiles,
		}
		values.update({k: v for k, v in overrides.items() if v is not None})
		return cls(**values)

	def manager_config(self) -> ManagerConfig:
		return ManagerConfig(
			public_root=str(self.public_root),
			cache_ttl=self.cache_ttl,
			hide_dotfiles=self.hide_dotfiles
		)
