"""
Pytest configuration and shared fixtures for DuelPoker tests.
"""

import random

import pytest
from fastapi.testclient import TestClient
from duelpoker.core.card import Card, Deck, Rank, Suit
from duelpoker.core.player import PlayerState
from duelpoker.core.game import create_session, new_session
from duelpoker.server.app import create_app


@pytest.fixture
def rng():
    """A seeded random source so deals are reproducible."""
    return random.Random(42)


@pytest.fixture
def deck(rng):
    """Create a fresh shuffled deck."""
    d = Deck(rng)
    d.shuffle()
    return d


@pytest.fixture
def unshuffled_deck():
    """Create a fresh deck in canonical order."""
    return Deck(random.Random(0))


@pytest.fixture
def sample_player():
    """Create a sample player with 1000 chips."""
    return PlayerState(player_id="test_player", chips=1000)


@pytest.fixture
def waiting_session():
    """An empty session waiting for players."""
    return new_session("s-wait")


@pytest.fixture
def session(rng):
    """An active session: alice deals (small blind), bob posts the big blind."""
    return create_session("s1", ("alice", 1000), ("bob", 1000), rng=rng)


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]


@pytest.fixture
def client():
    """HTTP/WebSocket test client for a freshly seeded app."""
    with TestClient(create_app(seed=7)) as c:
        yield c
