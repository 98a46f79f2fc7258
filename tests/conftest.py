"""Shared test fixtures."""

import random

import pytest

from flashdeck.cards import Card
from flashdeck.session import SessionController
from flashdeck.storage import MemoryStore


@pytest.fixture
def two_cards():
    return (Card(1, "Q1", "AB"), Card(2, "Q2", "C"))


@pytest.fixture
def many_cards():
    return tuple(Card(i, f"Q{i}", f"A{i}") for i in range(1, 11))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def controller(store, two_cards):
    """Initialized controller over two cards with a seeded shuffle."""
    c = SessionController(store, rng=random.Random(7))
    c.initialize(two_cards)
    return c
