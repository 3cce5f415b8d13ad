"""
Tests for Card and Deck classes.
"""

import random

import pytest
from duelpoker.core.card import Card, Deck, Rank, Suit, full_deck, parse_cards
from duelpoker.core.errors import DeckExhausted


class TestCard:
    """Tests for Card class."""

    def test_card_creation(self):
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES
        assert card.revealed is False

    def test_card_from_string(self):
        """Test creating cards from string notation."""
        card1 = Card.from_string("As")
        assert card1.rank == Rank.ACE
        assert card1.suit == Suit.SPADES

        card2 = Card.from_string("K♥")
        assert card2.rank == Rank.KING
        assert card2.suit == Suit.HEARTS

        # Ten, both spellings
        assert Card.from_string("Td") == Card.from_string("10d")
        assert Card.from_string("10♦").rank == Rank.TEN

    def test_invalid_card_strings(self):
        for bad in ("", "A", "1s", "Ax", "11h"):
            with pytest.raises(ValueError):
                Card.from_string(bad)

    def test_equality_ignores_revealed(self):
        hidden = Card(Rank.ACE, Suit.SPADES)
        shown = Card(Rank.ACE, Suit.SPADES, revealed=True)
        assert hidden == shown
        assert hash(hidden) == hash(shown)
        assert hidden != Card(Rank.KING, Suit.SPADES)

    def test_reveal_returns_face_up_copy(self):
        card = Card(Rank.QUEEN, Suit.CLUBS)
        shown = card.reveal()
        assert shown.revealed is True
        assert card.revealed is False
        assert shown == card
        assert shown.reveal() is shown

    def test_card_string(self):
        card = Card(Rank.ACE, Suit.SPADES)
        assert str(card) == "A♠"
        assert card.short_str == "As"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_card_color(self):
        assert Card(Rank.ACE, Suit.HEARTS).color == "red"
        assert Card(Rank.ACE, Suit.DIAMONDS).color == "red"
        assert Card(Rank.ACE, Suit.CLUBS).color == "black"
        assert Card(Rank.ACE, Suit.SPADES).color == "black"

    def test_to_dict(self):
        d = Card(Rank.KING, Suit.HEARTS, revealed=True).to_dict()
        assert d["rank"] == "K"
        assert d["suit"] == "hearts"
        assert d["text"] == "K♥"
        assert d["hidden"] is False

    def test_to_dict_redacted(self):
        d = Card(Rank.KING, Suit.HEARTS).to_dict(redact=True)
        assert d == {"hidden": True, "revealed": False}


class TestDeck:
    """Tests for Deck class."""

    def test_full_deck_has_52_distinct_cards(self):
        cards = full_deck()
        assert len(cards) == 52
        assert len(set(cards)) == 52
        assert all(not c.revealed for c in cards)

    def test_deck_creation(self, unshuffled_deck):
        assert len(unshuffled_deck) == 52
        assert unshuffled_deck.remaining == 52

    def test_shuffle_is_a_permutation(self, deck):
        assert len(deck) == 52
        assert set(deck.cards) == set(full_deck())

    def test_shuffle_changes_order(self, deck, unshuffled_deck):
        assert deck.cards != unshuffled_deck.cards

    def test_same_seed_same_order(self):
        d1 = Deck(random.Random(99))
        d2 = Deck(random.Random(99))
        d1.shuffle()
        d2.shuffle()
        assert [c.short_str for c in d1.cards] == [c.short_str for c in d2.cards]

    def test_deal_card_removes_top(self, deck):
        top = deck.cards[-1]
        card = deck.deal_card()
        assert card == top
        assert deck.remaining == 51
        assert card not in deck.cards

    def test_deal_card_revealed_flag(self, deck):
        assert deck.deal_card(revealed=True).revealed is True
        assert deck.deal_card().revealed is False

    def test_deal_all_cards_unique(self, deck):
        dealt = [deck.deal_card() for _ in range(52)]
        assert len(set(dealt)) == 52
        assert deck.remaining == 0

    def test_deal_from_empty_deck(self, deck):
        for _ in range(52):
            deck.deal_card()
        with pytest.raises(DeckExhausted):
            deck.deal_card()


class TestParseCards:
    """Tests for parse_cards."""

    def test_space_separated(self):
        cards = parse_cards("As Kh 10d")
        assert [c.short_str for c in cards] == ["As", "Kh", "10d"]
        assert all(c.revealed for c in cards)

    def test_symbols(self):
        cards = parse_cards("A♠ K♥ T♦", revealed=False)
        assert cards[2] == Card(Rank.TEN, Suit.DIAMONDS)
        assert not any(c.revealed for c in cards)
