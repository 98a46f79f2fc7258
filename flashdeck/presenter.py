"""Progressive answer reveal for a single card."""

from __future__ import annotations
from typing import Callable, Optional

from flashdeck.cards import Card
from flashdeck.session import Verdict

PLACEHOLDER = "＿"


class RevealIncompleteError(RuntimeError):
    """A verdict was submitted before the answer was fully revealed, or twice."""


class CardPresenter:
    def __init__(self, card: Card, on_verdict: Callable[[int, Verdict], None]):
        self.card = card
        self.on_verdict = on_verdict
        self.revealed_prefix = ""
        self.fully_revealed = False
        self.verdict: Optional[Verdict] = None

    @property
    def can_reveal_more(self) -> bool:
        return len(self.revealed_prefix) < len(self.card.answer)

    @property
    def finished(self) -> bool:
        return self.verdict is not None

    def reveal_one(self) -> None:
        answer = self.card.answer
        if not self.can_reveal_more:
            return
        self.revealed_prefix = answer[: len(self.revealed_prefix) + 1]
        if len(self.revealed_prefix) == len(answer):
            self.fully_revealed = True

    def reveal_all(self) -> None:
        self.revealed_prefix = self.card.answer
        self.fully_revealed = True

    @property
    def display_text(self) -> str:
        if self.fully_revealed:
            return self.card.answer
        remaining = len(self.card.answer) - len(self.revealed_prefix)
        return self.revealed_prefix + PLACEHOLDER * remaining

    def submit(self, verdict: Verdict) -> None:
        if not self.fully_revealed:
            raise RevealIncompleteError(f"Card {self.card.id}: answer not fully revealed")
        if self.verdict is not None:
            raise RevealIncompleteError(f"Card {self.card.id}: verdict already given")
        self.verdict = verdict
        self.on_verdict(self.card.id, verdict)
