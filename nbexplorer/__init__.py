from .config import ExplorerConfig
from .errors import (
	ExplorerError,
	FileReadError,
	NavigationError,
	NoSupportedFilesError,
	NotebookParseError,
)
from .models import CardEntry, ContentKind, FileEntry, FolderNode, LoadState, RawFileRef, ViewerState
from .session import ExplorerSession

__all__ = [
	"ExplorerConfig",
	"ExplorerError",
	"FileReadError",
	"NavigationError",
	"NoSupportedFilesError",
	"NotebookParseError",
	"CardEntry",
	"ContentKind",
	"FileEntry",
	"FolderNode",
	"LoadState",
	"RawFileRef",
	"ViewerState",
	"ExplorerSession",
]
