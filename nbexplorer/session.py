import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional

from .cards import CardNavigator, CardRegistry
from .config import ExplorerConfig
from .errors import FileReadError, NoSupportedFilesError, NotebookParseError
from .models import CardEntry, ContentKind, FileEntry, FolderListing, FolderNode, LoadState, RawFileRef, ViewerState
from .navigator import FolderNavigator
from .render import preview_text, render_full, render_preview
from .tree import build_tree, prepare_entries

logger = logging.getLogger(__name__)

Highlighter = Callable[[str], str]

PARSE_ERROR_MESSAGE = "Could not parse"


class ExplorerSession:
	"""
	All state for one browsing session: the folder tree, the current
	folder, the card registry and the viewer.

	Every public method runs to completion and leaves the state consistent;
	callers serialize access (one handler at a time).
	"""

	def __init__(self, config: Optional[ExplorerConfig] = None, highlighter: Optional[Highlighter] = None):
		self.config = config or ExplorerConfig()
		self.highlighter = highlighter
		self.tree: Optional[FolderNode] = None
		self.entries: Dict[str, FileEntry] = {}
		self.navigator = FolderNavigator()
		self.registry = CardRegistry()
		self.viewer = CardNavigator(self.registry, self._render_card)
		# Bumped on every load/clear so late read completions can tell they are stale
		self.generation = 0
		# Keys keep counting across loads so a late request for an old key misses
		self._file_keys = itertools.count()

	@property
	def is_loaded(self) -> bool:
		return self.tree is not None

	# ============ Session lifecycle ============

	def load(self, refs: Iterable[RawFileRef]) -> int:
		"""Replace the session with a tree built from `refs`. Returns the file count."""
		entries = prepare_entries(refs, self.config, self._file_keys)
		if not entries:
			raise NoSupportedFilesError("No .ipynb or .py files found.")

		self._discard()
		self.entries = {e.key: e for e in entries}
		self.tree = build_tree(entries)
		self.navigator.set_root(self.tree)
		logger.info(f"Loaded {len(entries)} files")
		return len(entries)

	def clear(self):
		self._discard()
		self.navigator.set_root(FolderNode())
		logger.info("Session cleared")

	def _discard(self):
		self.generation += 1
		self.viewer.close()
		self.registry.clear()
		self.entries = {}
		self.tree = None

	# ============ Folder navigation ============

	def current_node(self) -> FolderNode:
		return self.navigator.current_node()

	def enter(self, name: str) -> FolderNode:
		return self.navigator.enter(name)

	def jump_to_breadcrumb(self, index: int) -> FolderNode:
		return self.navigator.jump_to_breadcrumb(index)

	def reset_navigation(self):
		self.navigator.reset()

	def listing(self, query: str = "", show_scripts: Optional[bool] = None) -> FolderListing:
		"""
		Subfolders then files of the current folder. `query` matches folder
		names, file names and the text of already loaded previews.
		"""
		if show_scripts is None:
			show_scripts = self.config.show_scripts
		needle = (query or "").lower()
		node = self.current_node()

		folders = [name for name in node.children if needle in name.lower()]
		files = [
			entry for entry in node.files
			if (show_scripts or entry.kind != ContentKind.SCRIPT) and self._matches(entry, needle)
		]
		return FolderListing(breadcrumbs=self.navigator.breadcrumbs(), folders=folders, files=files)

	@staticmethod
	def _matches(entry: FileEntry, needle: str) -> bool:
		if needle in entry.name.lower():
			return True
		return bool(entry.preview_html) and needle in preview_text(entry.preview_html).lower()

	def visible_card_ids(self, query: str = "", show_scripts: Optional[bool] = None) -> List[str]:
		return [e.card_id for e in self.listing(query, show_scripts).files if e.card_id]

	# ============ Lazy previews ============

	def notify_visible(self, key: str) -> Optional[FileEntry]:
		"""
		First visibility of a file: read it and render its preview.
		Later notifications for the same entry are no-ops.
		"""
		entry = self.entries.get(key)
		if entry is None:
			logger.debug(f"Visibility for unknown entry {key}")
			return None
		if entry.state != LoadState.PENDING:
			return entry

		# Disengage before reading so overlapping notifications can't read twice
		entry.state = LoadState.LOADING
		generation = self.generation
		try:
			text = entry.ref.read_text()
		except FileReadError as e:
			self._complete_read(entry, generation, error=e)
		else:
			self._complete_read(entry, generation, text=text)
		return entry

	def _complete_read(self, entry: FileEntry, generation: int, text: Optional[str] = None, error: Optional[Exception] = None):
		if generation != self.generation:
			logger.debug(f"Dropping stale read of {entry.name}")
			return

		if error is not None:
			logger.warning(f"Unreadable file {entry.name}: {error}")
			entry.state = LoadState.FAILED
			return

		try:
			preview = render_preview(text, entry.kind, self.config)
		except NotebookParseError as e:
			logger.warning(f"Could not parse {entry.name}: {e}")
			entry.state = LoadState.FAILED
			entry.error = PARSE_ERROR_MESSAGE
			return

		entry.preview_html = self._highlight(preview)
		entry.card_id = self.registry.register(entry.name, text, entry.kind)
		entry.state = LoadState.LOADED

	# ============ Viewer ============

	def lookup(self, card_id: str) -> Optional[CardEntry]:
		return self.registry.lookup(card_id)

	def open_viewer(self, card_id: str, visible_ids: Optional[List[str]] = None) -> Optional[ViewerState]:
		if visible_ids is None:
			visible_ids = self.visible_card_ids()
		return self.viewer.open(card_id, visible_ids)

	def step_prev(self) -> Optional[ViewerState]:
		return self.viewer.step_prev()

	def step_next(self) -> Optional[ViewerState]:
		return self.viewer.step_next()

	def close_viewer(self):
		self.viewer.close()

	def _render_card(self, card: CardEntry) -> str:
		return self._highlight(render_full(card.raw, card.kind, self.config))

	def _highlight(self, html: str) -> str:
		if self.highlighter is None:
			return html
		try:
			return self.highlighter(html)
		except Exception as e:
			logger.warning(f"Highlighter failed, keeping plain output: {e}")
			return html
