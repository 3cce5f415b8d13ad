"""
Per-seat player record for a heads-up session.

Tracks:
- Chips behind (not yet committed)
- Hole cards
- Bet committed in the current betting round
- Fold and connection flags, last action
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from duelpoker.core.card import Card
from duelpoker.core.rules import ActionType


@dataclass
class PlayerState:
    """
    A player seated in a session.

    Attributes:
        player_id: Identifier assigned by the account layer
        chips: Chips behind, never negative
        hand: Hole cards, empty until dealt, then exactly 2
        current_bet: Chips committed in the current betting round
        folded: Has folded this hand
        connected: Transport reports a live connection
        last_action: Most recent accepted action
        has_acted: Acted at least once in the current betting round
    """
    player_id: str
    chips: int
    hand: List[Card] = field(default_factory=list)
    current_bet: int = 0
    folded: bool = False
    connected: bool = True
    last_action: Optional[ActionType] = None
    has_acted: bool = False

    def commit(self, amount: int) -> int:
        """
        Move chips from the stack into the current bet.

        Returns:
            Chips actually moved (capped at the stack, so short stacks go all-in)
        """
        if amount <= 0:
            return 0
        actual = min(amount, self.chips)
        self.chips -= actual
        self.current_bet += actual
        return actual

    def refund(self, amount: int) -> None:
        """Return an uncalled part of the current bet to the stack."""
        self.current_bet -= amount
        self.chips += amount

    def reset_for_new_round(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    def record(self, action: ActionType) -> None:
        self.last_action = action
        self.has_acted = True

    @property
    def is_all_in(self) -> bool:
        """Still in the hand with nothing left to bet."""
        return not self.folded and self.chips == 0

    @property
    def can_act(self) -> bool:
        return not self.folded and self.chips > 0

    def to_dict(self, show_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            show_cards: If False, hole cards are redacted
        """
        return {
            "id": self.player_id,
            "chips": self.chips,
            "bet": self.current_bet,
            "folded": self.folded,
            "connected": self.connected,
            "last_action": self.last_action.value if self.last_action else None,
            "hand": [card.to_dict(redact=not show_cards) for card in self.hand],
        }

    def __repr__(self) -> str:
        return (
            f"PlayerState({self.player_id}, chips={self.chips}, "
            f"bet={self.current_bet}, folded={self.folded})"
        )
