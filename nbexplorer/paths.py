import logging
import re
from typing import Tuple

from .models import RawFileRef

logger = logging.getLogger(__name__)

# Some Windows APIs hand back doubled separators, so a whole run counts as one
_BACKSLASH_RUN = re.compile(r"\\+")


def split_path(path: str) -> Tuple[str, ...]:
	"""Split on forward or backward slashes, dropping empty segments."""
	return tuple(part for part in _BACKSLASH_RUN.sub("/", path).split("/") if part)


def canonical_path(ref: RawFileRef) -> Tuple[str, ...]:
	"""
	Canonical location of a file as a tuple of segments.

	Hint preference: traversal-derived full path, then picker-derived
	relative path, then the bare file name.
	"""
	hint = ref.full_path or ref.relative_path or ""
	parts = split_path(hint)
	if not parts:
		parts = split_path(ref.name) or (ref.name,)

	logger.debug(
		f"Normalized {ref.name!r}: full_path={ref.full_path!r} "
		f"relative_path={ref.relative_path!r} -> {'/'.join(parts)!r}"
	)
	return parts


def normalize_path(ref: RawFileRef) -> str:
	return "/".join(canonical_path(ref))
