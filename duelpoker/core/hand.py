"""
Hand evaluation for heads-up Hold'em.

Evaluates 5-7 cards and returns the best 5-card hand as a HandValue. The
``strength`` of a HandValue is a single integer, higher is better, that
orders any two hands regardless of category:

    strength = category * RANK_BASE**5 + tiebreak ranks in base RANK_BASE

Hand categories (worst to best):
1. High Card
2. Pair
3. Two Pair
4. Three of a Kind
5. Straight
6. Flush
7. Full House
8. Four of a Kind
9. Straight Flush
10. Royal Flush

Note: Ace can be low in A-2-3-4-5 straight (wheel), which ranks five-high.
"""

from __future__ import annotations
from typing import Dict, Hashable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from itertools import combinations
from enum import IntEnum
from collections import Counter

from duelpoker.core.card import Card, Rank


class HandCategory(IntEnum):
    """Hand categories, higher value is better."""
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


CATEGORY_NAMES = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.ROYAL_FLUSH: "Royal Flush",
}

# One digit per tiebreak rank; ranks run 2..14
RANK_BASE = 15
TIEBREAK_SLOTS = 5


@dataclass(frozen=True)
class HandValue:
    """Result of evaluating one hand."""
    strength: int
    category: HandCategory
    best_cards: Tuple[Card, ...]
    description: str

    @property
    def name(self) -> str:
        return CATEGORY_NAMES[self.category]

    def __lt__(self, other: HandValue) -> bool:
        return self.strength < other.strength

    def __gt__(self, other: HandValue) -> bool:
        return self.strength > other.strength


@dataclass
class ShowdownResult:
    """Outcome of comparing several hands."""
    winner_ids: List[Hashable]
    winning_hand: HandValue
    values: Dict[Hashable, HandValue] = field(default_factory=dict)

    @property
    def is_tie(self) -> bool:
        return len(self.winner_ids) > 1


def evaluate_hand(cards: Sequence[Card]) -> HandValue:
    """
    Evaluate a poker hand of 5-7 cards.

    Raises:
        ValueError: If not 5-7 cards provided
    """
    if len(cards) < 5 or len(cards) > 7:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")

    best: Optional[Tuple[int, HandCategory, List[Card]]] = None
    for combo in combinations(cards, 5):
        scored = _score_5_cards(list(combo))
        if best is None or scored[0] > best[0]:
            best = scored

    strength, category, best_cards = best
    return HandValue(
        strength=strength,
        category=category,
        best_cards=tuple(best_cards),
        description=_describe(category, best_cards),
    )


def _score_5_cards(cards: List[Card]) -> Tuple[int, HandCategory, List[Card]]:
    """Score exactly 5 cards."""
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    straight_high = _straight_high(ranks)

    rank_counts = Counter(ranks)
    # Ranks ordered by (count, rank) descending: quads before kicker, etc.
    grouped = sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True)
    counts = [rank_counts[r] for r in grouped]

    if straight_high is not None and is_flush:
        category = (HandCategory.ROYAL_FLUSH if straight_high == Rank.ACE
                    else HandCategory.STRAIGHT_FLUSH)
        return _strength(category, [straight_high]), category, _order_straight(sorted_cards, straight_high)

    if counts == [4, 1]:
        category = HandCategory.FOUR_OF_A_KIND
    elif counts == [3, 2]:
        category = HandCategory.FULL_HOUSE
    elif is_flush:
        return _strength(HandCategory.FLUSH, ranks), HandCategory.FLUSH, sorted_cards
    elif straight_high is not None:
        category = HandCategory.STRAIGHT
        return _strength(category, [straight_high]), category, _order_straight(sorted_cards, straight_high)
    elif counts == [3, 1, 1]:
        category = HandCategory.THREE_OF_A_KIND
    elif counts == [2, 2, 1]:
        category = HandCategory.TWO_PAIR
    elif counts == [2, 1, 1, 1]:
        category = HandCategory.PAIR
    else:
        return _strength(HandCategory.HIGH_CARD, ranks), HandCategory.HIGH_CARD, sorted_cards

    ordered = sorted(sorted_cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True)
    return _strength(category, grouped), category, ordered


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """High card of the straight these five ranks form, if any."""
    unique = sorted(set(ranks), reverse=True)
    if len(unique) != 5:
        return None
    if unique[0] - unique[4] == 4:
        return unique[0]
    if unique == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return Rank.FIVE
    return None


def _order_straight(cards: List[Card], high: Rank) -> List[Card]:
    """Put the wheel's ace at the bottom (5-4-3-2-A)."""
    if high != Rank.FIVE:
        return cards
    return [c for c in cards if c.rank != Rank.ACE] + [c for c in cards if c.rank == Rank.ACE]


def _strength(category: HandCategory, tiebreak: List[Rank]) -> int:
    value = int(category)
    for i in range(TIEBREAK_SLOTS):
        value = value * RANK_BASE + (int(tiebreak[i]) if i < len(tiebreak) else 0)
    return value


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    s1 = evaluate_hand(cards1).strength
    s2 = evaluate_hand(cards2).strength
    return (s1 > s2) - (s1 < s2)


def evaluate_winner(hands: Sequence[Tuple[Hashable, Sequence[Card]]]) -> ShowdownResult:
    """
    Pick the winner(s) among competing hands.

    Every hand is evaluated; all players sharing the highest strength are
    returned in input order, so an exact tie yields several winner ids.

    Raises:
        ValueError: If no hands are given or a hand has fewer than 5 cards.
    """
    if not hands:
        raise ValueError("No hands to compare")

    values = {player_id: evaluate_hand(cards) for player_id, cards in hands}
    top = max(v.strength for v in values.values())
    winner_ids = [pid for pid, _ in hands if values[pid].strength == top]
    return ShowdownResult(
        winner_ids=winner_ids,
        winning_hand=values[winner_ids[0]],
        values=values,
    )


def get_hand_description(cards: Sequence[Card]) -> str:
    """Human-readable description of the best hand in ``cards``."""
    if len(cards) < 5:
        return "Incomplete hand"
    return evaluate_hand(cards).description


def _describe(category: HandCategory, best_cards: List[Card]) -> str:
    rank_counts = Counter(c.rank for c in best_cards)
    grouped = sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True)
    lead = grouped[0]

    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    if category in (HandCategory.STRAIGHT, HandCategory.STRAIGHT_FLUSH):
        high = best_cards[0].rank
        suffix = " (Wheel)" if high == Rank.FIVE and category == HandCategory.STRAIGHT else ""
        return f"{CATEGORY_NAMES[category]}, {_rank_name(high)} high{suffix}"
    if category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(lead)}"
    if category == HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(lead)} full of {_plural(grouped[1])}"
    if category == HandCategory.FLUSH:
        return f"Flush, {_rank_name(lead)} high"
    if category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(lead)}"
    if category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(grouped[0])} and {_plural(grouped[1])}"
    if category == HandCategory.PAIR:
        return f"Pair of {_plural(lead)}"
    return f"High Card, {_rank_name(lead)}"


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(rank: Rank) -> str:
    return _RANK_NAMES[rank]


def _plural(rank: Rank) -> str:
    return "Sixes" if rank == Rank.SIX else f"{_rank_name(rank)}s"
