import itertools
import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from .config import ExplorerConfig
from .models import ContentKind, FileEntry, FolderNode, RawFileRef
from .paths import canonical_path

logger = logging.getLogger(__name__)


def is_supported(name: str, config: ExplorerConfig) -> bool:
	"""True for notebook/script names that are not platform metadata files."""
	if name.startswith(config.reserved_prefix):
		return False
	return any(name.endswith(ext) for ext in config.extensions)


def prepare_entries(refs: Iterable[RawFileRef], config: ExplorerConfig, keys: Optional[Iterator[int]] = None) -> List[FileEntry]:
	"""
	Apply the filtering policy and normalize the survivors.
	Entries keep input order; keys are drawn from `keys` (0, 1, ... by default).
	"""
	if keys is None:
		keys = itertools.count()
	entries = []
	for ref in refs:
		if not is_supported(ref.name, config):
			logger.debug(f"Skipping unsupported file {ref.name!r}")
			continue
		path = canonical_path(ref)
		if any(seg.startswith(config.reserved_prefix) for seg in path[:-1]):
			logger.debug(f"Skipping {ref.name!r} inside a metadata folder")
			continue
		entries.append(FileEntry(
			key=f"f{next(keys)}",
			ref=ref,
			path=path,
			kind=ContentKind.for_name(ref.name)
		))
	return entries


def build_tree(entries: Iterable[FileEntry]) -> FolderNode:
	"""Nest entries into folders by their canonical path."""
	root = FolderNode()
	count = 0
	for entry in entries:
		node = root
		for part in entry.path[:-1]:
			child = node.children.get(part)
			if child is None:
				child = node.children[part] = FolderNode()
			node = child
		node.files.append(entry)
		count += 1

	logger.debug(f"Built tree with {count} files, {len(root.children)} top-level folders")
	return root


def resolve(root: FolderNode, segments: Sequence[str]) -> Optional[FolderNode]:
	"""Walk from root by folder names; None if any segment is missing."""
	node = root
	for seg in segments:
		node = node.child(seg)
		if node is None:
			return None
	return node
