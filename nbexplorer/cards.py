import itertools
import logging
from typing import Callable, Dict, List, Optional

from .errors import NotebookParseError
from .models import CardEntry, ContentKind, ViewerState

logger = logging.getLogger(__name__)


class CardRegistry:
	"""Maps card ids to the file they were rendered from."""

	def __init__(self):
		# Never reset, so ids from a cleared session can't alias new cards
		self._counter = itertools.count(1)
		self._cards: Dict[str, CardEntry] = {}

	def register(self, filename: str, raw: str, kind: ContentKind) -> str:
		card_id = f"card-{next(self._counter)}"
		self._cards[card_id] = CardEntry(card_id=card_id, filename=filename, raw=raw, kind=kind)
		return card_id

	def lookup(self, card_id: str) -> Optional[CardEntry]:
		return self._cards.get(card_id)

	def clear(self):
		self._cards.clear()

	def __contains__(self, card_id: str) -> bool:
		return card_id in self._cards

	def __len__(self) -> int:
		return len(self._cards)


class CardNavigator:
	"""
	Steps through a fixed, ordered set of cards inside the viewer.

	The set is captured when the viewer opens and is not kept in sync with
	later listing changes. There is no wraparound at either end.
	"""

	def __init__(self, registry: CardRegistry, render_full: Callable[[CardEntry], str]):
		self.registry = registry
		self.render_full = render_full
		self.card_ids: List[str] = []
		self.index: int = -1
		self.state: Optional[ViewerState] = None

	@property
	def is_open(self) -> bool:
		return self.index >= 0

	@property
	def has_prev(self) -> bool:
		return self.index > 0

	@property
	def has_next(self) -> bool:
		return 0 <= self.index < len(self.card_ids) - 1

	def open(self, card_id: str, visible_ids: List[str]) -> Optional[ViewerState]:
		card = self.registry.lookup(card_id)
		if card is None:
			logger.debug(f"Ignoring open for unknown card {card_id}")
			return None

		ids = [cid for cid in visible_ids if cid in self.registry]
		if card_id not in ids:
			ids.append(card_id)
		self.card_ids = ids
		self.index = ids.index(card_id)
		return self._show(card)

	def step_prev(self) -> Optional[ViewerState]:
		if not self.has_prev:
			return self.state
		return self._step(-1)

	def step_next(self) -> Optional[ViewerState]:
		if not self.has_next:
			return self.state
		return self._step(1)

	def close(self):
		self.card_ids = []
		self.index = -1
		self.state = None

	def _step(self, delta: int) -> Optional[ViewerState]:
		target = self.index + delta
		card = self.registry.lookup(self.card_ids[target])
		if card is None:
			logger.debug(f"Card {self.card_ids[target]} vanished, staying put")
			return self.state
		self.index = target
		return self._show(card)

	def _show(self, card: CardEntry) -> ViewerState:
		html, error = "", None
		try:
			html = self.render_full(card)
		except NotebookParseError as e:
			logger.warning(f"Could not parse {card.filename}: {e}")
			error = "Could not parse notebook"

		self.state = ViewerState(
			card_id=card.card_id,
			title=card.filename,
			html=html,
			has_prev=self.has_prev,
			has_next=self.has_next,
			position=self.index,
			total=len(self.card_ids),
			error=error
		)
		return self.state
