"""Session state: active deck, position, review mode and the incorrect set."""

from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple, TypeVar

from flashdeck.cards import Card
from flashdeck.storage import (
    DEFAULT_STORAGE_KEY,
    KeyValueStore,
    load_incorrect_ids,
    save_incorrect_ids,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Verdict(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class DisplayState(str, Enum):
    REVIEW_COMPLETE = "review_complete"
    LOADING = "loading"
    DECK_COMPLETE = "deck_complete"
    ACTIVE = "active"


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random) -> List[T]:
    """Uniform random permutation of a copy of items."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


class SessionController:
    """Owns one learner's session.

    Usage:
        controller = SessionController(JsonFileStore(path))
        controller.initialize(load_cards())
        card = controller.current_card()
        controller.record_verdict(card.id, Verdict.INCORRECT)

    Every change to the incorrect set is written back to the store once
    initialize() has finished loading it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.storage_key = storage_key
        self.rng = rng if rng is not None else random.Random()
        self.cards: Tuple[Card, ...] = ()
        self.incorrect_ids: Set[int] = set()
        self.review_mode = False
        self.deck: List[int] = []
        self.position = 0
        self.ready = False
        self._by_id: Dict[int, Card] = {}

    # ----------------------------- Lifecycle -----------------------------
    def initialize(self, cards: Sequence[Card]) -> None:
        self.cards = tuple(cards)
        self._by_id = {c.id: c for c in self.cards}
        loaded = load_incorrect_ids(self.store, self.storage_key)
        unknown = loaded - self._by_id.keys()
        if unknown:
            logger.info("Dropping %d stored ids with no matching card: %s", len(unknown), sorted(unknown))
        self.incorrect_ids = loaded - unknown
        self.ready = True
        self.regenerate_deck()

    def persist(self) -> None:
        if not self.ready:
            return
        save_incorrect_ids(self.store, self.incorrect_ids, self.storage_key)

    # ----------------------------- Deck -----------------------------
    def regenerate_deck(self) -> None:
        if self.review_mode:
            source = sorted(self.incorrect_ids)
        else:
            source = [c.id for c in self.cards]
        self.deck = fisher_yates_shuffle(source, self.rng)
        self.position = 0
        logger.debug("New %s deck of %d cards", "review" if self.review_mode else "full", len(self.deck))

    def advance(self) -> None:
        self.position += 1

    def restart(self) -> None:
        self.position = 0

    # ----------------------------- Verdicts -----------------------------
    def add_incorrect(self, card_id: int) -> bool:
        """Returns True when the set changed."""
        if card_id in self.incorrect_ids:
            return False
        self.incorrect_ids.add(card_id)
        return True

    def remove_incorrect(self, card_id: int) -> bool:
        """Returns True when the set changed."""
        if card_id not in self.incorrect_ids:
            return False
        self.incorrect_ids.discard(card_id)
        return True

    def record_verdict(self, card_id: int, verdict: Verdict) -> None:
        if verdict == Verdict.CORRECT:
            self.advance()
            if self.review_mode and self.remove_incorrect(card_id):
                self.persist()
                # the review pass restarts on a reshuffled, smaller deck
                self.regenerate_deck()
            return

        changed = self.add_incorrect(card_id)
        self.persist()
        self.advance()
        if changed and self.review_mode:
            self.regenerate_deck()

    # ----------------------------- Mode -----------------------------
    def toggle_review_mode(self) -> bool:
        """Flip review mode. Returns False (and changes nothing) when there is nothing to review."""
        if not self.review_mode and not self.incorrect_ids:
            return False
        self.review_mode = not self.review_mode
        self.regenerate_deck()
        return True

    # ----------------------------- Reads -----------------------------
    @property
    def incorrect_count(self) -> int:
        return len(self.incorrect_ids)

    def current_card(self) -> Optional[Card]:
        if not 0 <= self.position < len(self.deck):
            return None
        return self._by_id.get(self.deck[self.position])

    def display_state(self) -> DisplayState:
        if not self.deck:
            return DisplayState.REVIEW_COMPLETE if self.review_mode else DisplayState.LOADING
        if self.position >= len(self.deck):
            return DisplayState.DECK_COMPLETE
        return DisplayState.ACTIVE

    def progress(self) -> Optional[Tuple[int, int]]:
        if self.display_state() != DisplayState.ACTIVE:
            return None
        return self.position + 1, len(self.deck)
