from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .errors import FileReadError


class ContentKind(str, Enum):
	NOTEBOOK = "ipynb"
	SCRIPT = "py"

	@classmethod
	def for_name(cls, name: str) -> 'ContentKind':
		return cls.SCRIPT if name.endswith(".py") else cls.NOTEBOOK


class LoadState(str, Enum):
	PENDING = "pending"
	LOADING = "loading"
	LOADED = "loaded"
	FAILED = "failed"


@dataclass
class RawFileRef:
	"""
	A selected or dropped file, as handed over by the file-access layer.

	Location hints:
	1. `full_path`: built while traversing a dropped directory ("docs/a/nb.ipynb").
	2. `relative_path`: reported by a directory picker, possibly with backslashes.
	Neither is required; a bare `name` places the file at root level.
	"""
	name: str
	reader: Callable[[], str] = field(repr=False, default=None)
	full_path: Optional[str] = None
	relative_path: Optional[str] = None

	def read_text(self) -> str:
		if self.reader is None:
			raise FileReadError(f"No content source for {self.name}")
		try:
			return self.reader()
		except FileReadError:
			raise
		except (OSError, UnicodeDecodeError) as e:
			raise FileReadError(f"Could not read {self.name}: {e}") from e


@dataclass
class FileEntry:
	"""A file placed in the tree, with its lazy preview state."""
	key: str
	ref: RawFileRef
	path: Tuple[str, ...]
	kind: ContentKind
	state: LoadState = LoadState.PENDING
	card_id: Optional[str] = None
	preview_html: Optional[str] = None
	error: Optional[str] = None

	@property
	def name(self) -> str:
		return self.ref.name

	def to_dict(self) -> dict:
		return {
			"key": self.key,
			"name": self.name,
			"path": "/".join(self.path),
			"kind": self.kind.value,
			"state": self.state.value,
			"cardId": self.card_id,
			"preview": self.preview_html,
			"error": self.error,
		}


@dataclass
class FolderNode:
	"""Named subfolders plus the files living directly at this level."""
	children: Dict[str, 'FolderNode'] = field(default_factory=dict)
	files: List[FileEntry] = field(default_factory=list)

	def child(self, name: str) -> Optional['FolderNode']:
		return self.children.get(name)


@dataclass
class CardEntry:
	card_id: str
	filename: str
	raw: str = field(repr=False)
	kind: ContentKind


@dataclass
class ViewerState:
	"""What the single-item viewer currently shows."""
	card_id: str
	title: str
	html: str
	has_prev: bool
	has_next: bool
	position: int
	total: int
	error: Optional[str] = None

	def to_dict(self) -> dict:
		return {
			"cardId": self.card_id,
			"title": self.title,
			"html": self.html,
			"hasPrev": self.has_prev,
			"hasNext": self.has_next,
			"position": self.position,
			"total": self.total,
			"error": self.error,
		}


@dataclass
class FolderListing:
	breadcrumbs: List[str]
	folders: List[str]
	files: List[FileEntry]

	def to_dict(self) -> dict:
		return {
			"breadcrumbs": self.breadcrumbs,
			"folders": self.folders,
			"files": [f.to_dict() for f in self.files],
		}
