import json
from pathlib import Path
from dataclasses import dataclass, asdict
import logging

logger = logging.getLogger(__name__)


@dataclass
class ManagerConfig:
	"""Configuration for a file manager over one public root."""
	public_root: str = "public"
	cache_ttl: float = 2.0  # Seconds a tree snapshot is served without rebuilding
	hide_dotfiles: bool = False

	def to_dict(self) -> dict:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict) -> 'ManagerConfig':
		# Only use known fields
		known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
		return cls(**known)

	def save(self, path: Path):
		"""Save config to JSON file."""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			json.dump(self.to_dict(), f, indent=2)
		logger.debug(f"Saved manager config to {path}")

	@classmethod
	def load(cls, path: Path) -> 'ManagerConfig':
		"""Load config from JSON file, or return defaults if not found."""
		path = Path(path)
		if not path.exists():
			logger.debug(f"No config found at {path}, using defaults")
			return cls()

		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			return cls.from_dict(data)
		except (json.JSONDecodeError, IOError) as e:
			logger.warning(f"Failed to load config: {e}, using defaults")
			return cls()

	def validate(self) -> bool:
		"""Validate config consistency."""
		if not self.public_root:
			logger.error("Public root cannot be empty")
			return False
		if self.cache_ttl < 0:
			logger.error("Cache TTL cannot be negative")
			return False
		return True

	@property
	def root_path(self) -> Path:
		return Path(self.public_root).expanduser().resolve()
