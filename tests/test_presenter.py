"""Tests for progressive reveal and verdict emission."""

import pytest

from flashdeck.cards import Card
from flashdeck.presenter import PLACEHOLDER, CardPresenter, RevealIncompleteError
from flashdeck.session import Verdict


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, card_id, verdict):
        self.calls.append((card_id, verdict))


@pytest.fixture
def recorder():
    return Recorder()


def make(answer="AB", card_id=1, on_verdict=None):
    return CardPresenter(Card(card_id, "Q", answer), on_verdict or Recorder())


def test_starts_hidden():
    p = make("AB")
    assert p.revealed_prefix == ""
    assert p.fully_revealed is False
    assert p.display_text == PLACEHOLDER * 2
    assert p.can_reveal_more


def test_reveal_one_twice_then_noop():
    p = make("AB")
    p.reveal_one()
    assert p.display_text == "A" + PLACEHOLDER
    assert p.fully_revealed is False
    p.reveal_one()
    assert p.display_text == "AB"
    assert p.fully_revealed is True
    assert not p.can_reveal_more
    p.reveal_one()
    assert p.revealed_prefix == "AB"


def test_reveal_is_monotonic_prefix():
    answer = "誤差逆伝播法"
    p = make(answer)
    lengths = []
    for _ in range(len(answer) + 2):
        p.reveal_one()
        assert answer.startswith(p.revealed_prefix)
        lengths.append(len(p.revealed_prefix))
    assert lengths == sorted(lengths)
    assert lengths[-1] == len(answer)


def test_reveal_all_from_any_state():
    p = make("ABC")
    p.reveal_one()
    p.reveal_all()
    assert p.revealed_prefix == "ABC"
    assert p.fully_revealed
    assert p.display_text == "ABC"
    p.reveal_all()
    assert p.revealed_prefix == "ABC"


def test_single_character_answer():
    p = make("C")
    p.reveal_one()
    assert p.fully_revealed
    assert p.display_text == "C"


def test_submit_before_reveal_is_refused(recorder):
    p = make("AB", on_verdict=recorder)
    p.reveal_one()
    with pytest.raises(RevealIncompleteError):
        p.submit(Verdict.CORRECT)
    assert recorder.calls == []
    assert p.verdict is None


def test_submit_emits_card_id(recorder):
    p = make("AB", card_id=4, on_verdict=recorder)
    p.reveal_all()
    p.submit(Verdict.INCORRECT)
    assert recorder.calls == [(4, Verdict.INCORRECT)]
    assert p.finished
    assert p.display_text == "AB"


def test_submit_only_once(recorder):
    p = make("AB", on_verdict=recorder)
    p.reveal_all()
    p.submit(Verdict.CORRECT)
    with pytest.raises(RevealIncompleteError):
        p.submit(Verdict.INCORRECT)
    assert recorder.calls == [(1, Verdict.CORRECT)]


def test_submit_drives_controller(controller):
    card = controller.current_card()
    p = CardPresenter(card, controller.record_verdict)
    p.reveal_all()
    p.submit(Verdict.INCORRECT)
    assert controller.incorrect_ids == {card.id}
    assert controller.position == 1
