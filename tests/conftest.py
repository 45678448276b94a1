"""Pytest fixtures for Twenty-One engine tests."""

import pytest
from random import Random

from twentyone.cards import Card, Deck
from twentyone.game import EventEmitter, Round
from twentyone.hand import Hand
from twentyone.player import Player


def make_hand(*codes: str) -> Hand:
    """Build a hand from short card strings like 'AS', '10H'."""
    return Hand([Card.from_string(code) for code in codes])


def stacked_deck(*codes: str) -> Deck:
    """Build a deck that deals ``codes`` in the given order."""
    return Deck(cards=[Card.from_string(code) for code in reversed(codes)])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return Deck(rng=rng)


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def events():
    """A fresh event emitter."""
    return EventEmitter()


@pytest.fixture
def user():
    """The human player."""
    return Player.user("Ada")


@pytest.fixture
def dealer():
    """The house, standing on 17."""
    return Player.dealer()


@pytest.fixture
def make_round(user, dealer, events):
    """Factory for a round dealt from a stacked deck."""

    def _make(*codes: str) -> Round:
        return Round(user, dealer, deck=stacked_deck(*codes), events=events)

    return _make


@pytest.fixture
def hand_of():
    """Factory building a hand from short card strings."""
    return make_hand


@pytest.fixture
def stack():
    """Factory building a deck that deals the given cards in order."""
    return stacked_deck
