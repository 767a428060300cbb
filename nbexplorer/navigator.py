import logging
from typing import List

from .errors import NavigationError
from .models import FolderNode
from .tree import resolve

logger = logging.getLogger(__name__)

ROOT_LABEL = "root"
TRAIL_SEPARATOR = " → "


class FolderNavigator:
	"""Current position in the folder tree, as a list of folder names."""

	def __init__(self, root: FolderNode = None):
		self.root = root if root is not None else FolderNode()
		self.path: List[str] = []

	def set_root(self, root: FolderNode):
		self.root = root
		self.path = []

	def current_node(self) -> FolderNode:
		node = resolve(self.root, self.path)
		if node is None:
			# The path is only ever extended through enter(), so this means the
			# tree was swapped underneath us
			logger.warning(f"Current path {self.path} no longer resolves, returning to root")
			self.path = []
			return self.root
		return node

	def enter(self, name: str) -> FolderNode:
		node = self.current_node().child(name)
		if node is None:
			raise NavigationError(f"No folder named {name!r} in /{'/'.join(self.path)}")
		self.path.append(name)
		return node

	def jump_to_breadcrumb(self, index: int) -> FolderNode:
		"""
		Truncate the path to `index + 1` segments; -1 means root.
		A path that no longer resolves falls back to root.
		"""
		if index < 0:
			self.reset()
			return self.root

		self.path = self.path[:index + 1]
		node = self.root
		for seg in self.path:
			child = node.child(seg)
			if child is None:
				logger.warning(f"Path segment {seg!r} not found in path {self.path}, falling back to root")
				self.path = []
				return self.root
			node = child
		return node

	def reset(self):
		self.path = []

	def breadcrumbs(self) -> List[str]:
		return [ROOT_LABEL] + list(self.path)

	def trail(self) -> str:
		return TRAIL_SEPARATOR.join(self.breadcrumbs())
