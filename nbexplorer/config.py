import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class ExplorerConfig:
	"""Rendering and filtering policy for an explorer session."""
	preview_cells: int = 3  # markdown/code cells shown in a notebook preview
	preview_lines: int = 8  # lines shown in a script preview
	extensions: List[str] = field(default_factory=lambda: [".ipynb", ".py"])
	reserved_prefix: str = "._"  # macOS resource-fork files and folders
	# Textual echoes of a plotting figure, matched case-sensitively
	figure_placeholders: List[str] = field(default_factory=lambda: ["<Figure size", "Figure("])
	show_scripts: bool = True
	default_language: str = "python"

	def to_dict(self) -> dict:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict) -> 'ExplorerConfig':
		# Only use known fields
		known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
		return cls(**known)

	def save(self, path: Path):
		"""Save config to JSON file."""
		path = Path(path)
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			json.dump(self.to_dict(), f, indent=2)
		logger.debug(f"Saved explorer config to {path}")

	@classmethod
	def load(cls, path: Path) -> 'ExplorerConfig':
		"""Load config from JSON file, or return defaults if not found."""
		path = Path(path)
		if not path.exists():
			logger.debug(f"No config found at {path}, using defaults")
			return cls()

		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			config = cls.from_dict(data)
		except (json.JSONDecodeError, TypeError, IOError) as e:
			logger.warning(f"Failed to load config: {e}, using defaults")
			return cls()

		if not config.validate():
			logger.warning(f"Invalid config in {path}, using defaults")
			return cls()
		return config

	def validate(self) -> bool:
		"""Validate config consistency."""
		if self.preview_cells < 0 or self.preview_lines < 0:
			logger.error("Preview sizes cannot be negative")
			return False
		if not self.extensions:
			logger.error("At least one file extension is required")
			return False
		return True
