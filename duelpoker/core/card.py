"""
Card and Deck classes for heads-up Hold'em.

A Card is identified by (rank, suit); the ``revealed`` flag only records
whether the card is face up and never takes part in equality or hashing.
The Deck shuffles with an injected random source so that a session's deal
is reproducible from the seed its owner chose.
"""

from __future__ import annotations
import random
from typing import List, Optional
from enum import Enum, IntEnum

from duelpoker.core.errors import DeckExhausted


class Suit(Enum):
    """The four suits."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest), valued by pip."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_LABELS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

LABEL_TO_RANK = {v: k for k, v in RANK_LABELS.items()}
LABEL_TO_RANK["T"] = Rank.TEN
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

SUIT_ORDER = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)


class Card:
    """
    A playing card.

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")

    Rank and suit never change once a card exists. ``reveal()`` returns a
    face-up copy instead of flipping the flag in place, so a card held in one
    snapshot cannot change under another.
    """

    __slots__ = ("rank", "suit", "revealed")

    def __init__(self, rank: Rank, suit: Suit, revealed: bool = False):
        self.rank = Rank(rank)
        self.suit = Suit(suit)
        self.revealed = bool(revealed)

    @classmethod
    def from_string(cls, s: str, revealed: bool = True) -> Card:
        """
        Create a card from string notation.

        Accepts "As", "Kh", "Td", "10d", "2c" and the symbol forms "A♠", "10♥".
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part = s[:-1].upper()
        suit_part = s[-1]

        if rank_part not in LABEL_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(LABEL_TO_RANK[rank_part], suit, revealed)

    def reveal(self) -> Card:
        """Return a face-up copy of this card."""
        if self.revealed:
            return self
        return Card(self.rank, self.suit, revealed=True)

    @property
    def identity(self) -> tuple:
        return (self.rank, self.suit)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self.identity == other.identity
        return False

    def __hash__(self) -> int:
        return hash(self.identity)

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self.rank < other.rank

    def __repr__(self) -> str:
        flag = "" if self.revealed else ", hidden"
        return f"Card({RANK_LABELS[self.rank]}{SUIT_CHARS[self.suit]}{flag})"

    def __str__(self) -> str:
        return f"{RANK_LABELS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', '10h'."""
        return f"{RANK_LABELS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self, redact: bool = False) -> dict:
        """
        Convert to a dictionary for JSON serialization.

        With ``redact`` set, only the fact that a card occupies the slot is
        exposed.
        """
        if redact:
            return {"hidden": True, "revealed": self.revealed}
        return {
            "rank": RANK_LABELS[self.rank],
            "suit": self.suit.value,
            "text": str(self),
            "color": self.color,
            "revealed": self.revealed,
            "hidden": False,
        }


def full_deck() -> List[Card]:
    """The 52 card identities in canonical order, face down."""
    return [Card(rank, suit) for suit in SUIT_ORDER for rank in Rank]


class Deck:
    """
    A standard 52-card deck dealt from the top.

    Usage:
        deck = Deck(rng=random.Random(7))
        deck.shuffle()
        hole = [deck.deal_card(revealed=True), deck.deal_card(revealed=True)]
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self._cards: List[Card] = full_deck()

    def shuffle(self) -> None:
        """Fisher-Yates shuffle of the cards still in the deck."""
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            cards[i], cards[j] = cards[j], cards[i]

    def deal_card(self, revealed: bool = False) -> Card:
        """
        Remove and return the top card.

        Raises:
            DeckExhausted: If the deck is empty.
        """
        if not self._cards:
            raise DeckExhausted("Cannot deal from an empty deck")
        card = self._cards.pop()
        return card.reveal() if revealed else card

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        """The undealt cards, top of the deck last."""
        return self._cards.copy()

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str, revealed: bool = True) -> List[Card]:
    """
    Parse space-separated cards, e.g. "As Kh 10d" or "A♠ K♥ T♦".
    """
    return [Card.from_string(s, revealed) for s in cards_str.split()]
