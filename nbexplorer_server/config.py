from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os
import logging

from nbexplorer.config import ExplorerConfig

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
	"""Configuration for the explorer web server."""
	host: str = "127.0.0.1"
	port: int = 8080
	debug: bool = False
	secret_key: str = field(default_factory=lambda: os.urandom(24).hex())
	max_upload_size: int = 200 * 1024 * 1024  # 200MB
	explorer_config: Optional[Path] = None  # JSON file with rendering policy
	preload_dir: Optional[Path] = None  # folder loaded into the session at startup
	show_scripts: Optional[bool] = None  # overrides the explorer config when set
	
	def __post_init__(self):
		if isinstance(self.explorer_config, str):
			self.explorer_config = Path(self.explorer_config)
		if isinstance(self.preload_dir, str):
			self.preload_dir = Path(self.preload_dir)
		
		if self.preload_dir is not None:
			self.preload_dir = self.preload_dir.resolve()
	
	def load_explorer_config(self) -> ExplorerConfig:
		if self.explorer_config is None:
			config = ExplorerConfig()
		else:
			config = ExplorerConfig.load(self.explorer_config)
		if self.show_scripts is not None:
			config.show_scripts = self.show_scripts
		return config
