import logging
import os
from functools import partial
from pathlib import Path
from typing import List, Optional

from .config import ExplorerConfig
from .models import RawFileRef

logger = logging.getLogger(__name__)


def read_text_file(path: Path) -> str:
	with open(path, 'r', encoding='utf-8') as f:
		return f.read()


def decode_bytes(data: bytes) -> str:
	return data.decode('utf-8')


def scan_directory(root: Path, reserved_prefix: str = ExplorerConfig.reserved_prefix) -> List[RawFileRef]:
	"""
	Recursively collect files under `root`, the way a dropped folder is
	traversed: paths start with the folder's own name and use forward slashes.
	Entries are visited in name order; reserved-prefix entries are skipped.
	"""
	root = Path(root).resolve()
	if not root.is_dir():
		raise NotADirectoryError(f"Not a directory: {root}")

	refs: List[RawFileRef] = []

	def walk(directory: Path, prefix: str):
		try:
			entries = sorted(os.scandir(directory), key=lambda e: e.name)
		except PermissionError as e:
			logger.warning(f"Skipping unreadable directory {directory}: {e}")
			return

		for entry in entries:
			if entry.name.startswith(reserved_prefix):
				continue
			if entry.is_dir(follow_symlinks=False):
				walk(Path(entry.path), f"{prefix}{entry.name}/")
			elif entry.is_file():
				refs.append(RawFileRef(
					name=entry.name,
					reader=partial(read_text_file, Path(entry.path)),
					full_path=f"{prefix}{entry.name}"
				))

	walk(root, f"{root.name}/")
	logger.info(f"Scanned {root}: {len(refs)} files")
	return refs


def from_upload(storage, relative_path: Optional[str] = None, full_path: Optional[str] = None) -> RawFileRef:
	"""
	Wrap an uploaded werkzeug FileStorage. `relative_path` comes from a
	directory picker, `full_path` from a client-side traversal of a dropped
	folder. The body is read now since the upload stream does not outlive
	the request.
	"""
	filename = storage.filename or ""
	# Browsers may put the picker path into the filename itself
	name = filename.replace("\\", "/").rsplit("/", 1)[-1]
	if not relative_path and not full_path and name != filename:
		relative_path = filename

	data = storage.read()
	return RawFileRef(
		name=name,
		reader=partial(decode_bytes, data),
		full_path=full_path or None,
		relative_path=relative_path or None
	)
