"""End-to-end tests of the Streamlit page."""

import json
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from flashdeck.runner import NOTHING_TO_REVIEW
from flashdeck.storage import DEFAULT_STORAGE_KEY

APP_PATH = str(Path(__file__).parents[1] / "app.py")


@pytest.fixture
def storage_path(tmp_path, monkeypatch):
    cards = tmp_path / "cards.json"
    cards.write_text(json.dumps([{"id": 1, "question": "Q1", "answer": "AB"}]), encoding="utf-8")
    path = tmp_path / "local_storage.json"
    monkeypatch.setenv("FLASHCARDS_CARDS_PATH", str(cards))
    monkeypatch.setenv("FLASHCARDS_STORAGE_PATH", str(path))
    monkeypatch.setenv("FLASHCARDS_SEED", "1")
    return path


def start():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def page_text(at):
    return "\n".join(m.value for m in at.markdown)


def stored(path):
    return json.loads(json.loads(path.read_text(encoding="utf-8"))[DEFAULT_STORAGE_KEY])


def test_first_card_is_hidden(storage_path):
    at = start()
    text = page_text(at)
    assert "Q1" in text
    assert "＿＿" in text
    assert "1 / 1" in text
    assert at.button(key="fd_reveal_one").label == "1文字めくる"
    assert at.button(key="fd_flip").label == "めくる"


def test_reveal_one_character_at_a_time(storage_path):
    at = start()
    at.button(key="fd_reveal_one").click().run()
    assert "A＿" in page_text(at)
    at.button(key="fd_reveal_one").click().run()
    assert not at.exception
    assert '<div class="answer">AB</div>' in page_text(at)
    assert at.button(key="fd_correct").label == "✓ 正解した"


def test_toggle_refused_without_missed_cards(storage_path):
    at = start()
    at.toggle(key="review_toggle").set_value(True).run()
    assert not at.exception
    assert at.info[0].value == NOTHING_TO_REVIEW
    assert at.toggle(key="review_toggle").value is False
    assert at.session_state["fd_controller"].review_mode is False


def test_missed_card_then_review_until_done(storage_path):
    at = start()
    at.button(key="fd_flip").click().run()
    at.button(key="fd_incorrect").click().run()
    assert "デッキ完了!" in page_text(at)
    assert stored(storage_path) == [1]

    at.button(key="fd_restart").click().run()
    assert "Q1" in page_text(at)
    assert "＿＿" in page_text(at)

    at.toggle(key="review_toggle").set_value(True).run()
    assert at.session_state["fd_controller"].review_mode is True
    at.button(key="fd_flip").click().run()
    at.button(key="fd_correct").click().run()
    assert not at.exception
    assert "復習完了!" in page_text(at)
    assert stored(storage_path) == []
    assert len(at.button) == 0


def test_missed_cards_survive_a_new_session(storage_path):
    storage_path.write_text(json.dumps({DEFAULT_STORAGE_KEY: "[1]"}), encoding="utf-8")
    at = start()
    assert "間違えた問題: 1" in at.caption[0].value
    at.toggle(key="review_toggle").set_value(True).run()
    assert at.session_state["fd_controller"].deck == [1]


def test_bad_card_file_shows_error(tmp_path, monkeypatch):
    cards = tmp_path / "broken.json"
    cards.write_text('{"not": "a list"}', encoding="utf-8")
    monkeypatch.setenv("FLASHCARDS_CARDS_PATH", str(cards))
    monkeypatch.setenv("FLASHCARDS_STORAGE_PATH", str(tmp_path / "ls.json"))
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert "Card data could not be loaded" in at.error[0].value
