class ExplorerError(Exception):
	"""Base class for all explorer errors."""


class NotebookParseError(ExplorerError):
	"""Raised when raw text is not a notebook document."""


class FileReadError(ExplorerError):
	"""Raised when a file's content could not be read as text."""


class NavigationError(ExplorerError):
	"""Raised when entering a folder that does not exist at the current level."""


class NoSupportedFilesError(ExplorerError):
	"""Raised when a load yields no notebook or script files."""
