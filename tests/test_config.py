"""
Tests for ExplorerConfig persistence and logging setup.
"""

import logging

from nbexplorer.config import ExplorerConfig
from nbexplorer.logger import setup_logging


class TestExplorerConfig:

	def test_defaults(self):
		config = ExplorerConfig()
		assert config.preview_cells == 3
		assert config.preview_lines == 8
		assert config.extensions == [".ipynb", ".py"]
		assert config.figure_placeholders == ["<Figure size", "Figure("]

	def test_save_and_load(self, tmp_path):
		path = tmp_path / "cfg" / "explorer.json"
		ExplorerConfig(preview_cells=5, show_scripts=False).save(path)

		loaded = ExplorerConfig.load(path)
		assert loaded.preview_cells == 5
		assert loaded.show_scripts is False

	def test_missing_file_gives_defaults(self, tmp_path):
		assert ExplorerConfig.load(tmp_path / "none.json") == ExplorerConfig()

	def test_corrupt_file_gives_defaults(self, tmp_path):
		path = tmp_path / "bad.json"
		path.write_text("{oops", encoding="utf-8")
		assert ExplorerConfig.load(path) == ExplorerConfig()

	def test_unknown_keys_ignored(self):
		assert ExplorerConfig.from_dict({"preview_lines": 4, "theme": "dark"}).preview_lines == 4

	def test_invalid_values_rejected(self, tmp_path):
		assert not ExplorerConfig(preview_cells=-1).validate()
		assert not ExplorerConfig(extensions=[]).validate()

		path = tmp_path / "neg.json"
		path.write_text('{"preview_lines": -3}', encoding="utf-8")
		assert ExplorerConfig.load(path).preview_lines == 8


class TestLogging:

	def test_setup_is_repeatable(self):
		root = logging.getLogger()
		before = len(root.handlers)
		setup_logging(logging.DEBUG)
		setup_logging(logging.INFO)
		try:
			assert len(root.handlers) == before + 1
			assert root.level == logging.INFO
		finally:
			for handler in list(root.handlers):
				if getattr(handler, "_nbexplorer", False):
					root.removeHandler(handler)
			root.setLevel(logging.WARNING)
