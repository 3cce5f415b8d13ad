"""
DuelPoker - Heads-up Hold'em Session Engine

A two-player Texas Hold'em project with:
- Pure Python game core (deck, betting state machine, pot, showdown)
- FastAPI + WebSocket server layer around it

Usage:
    from duelpoker.core import create_session, apply_action, session_to_dict
"""

__version__ = "0.1.0"

from duelpoker.core.card import Card, Deck
from duelpoker.core.player import PlayerState
from duelpoker.core.game import GameSession, create_session, apply_action, get_state
from duelpoker.core.hand import HandCategory, evaluate_hand, evaluate_winner

__all__ = [
    "Card",
    "Deck",
    "PlayerState",
    "GameSession",
    "create_session",
    "apply_action",
    "get_state",
    "HandCategory",
    "evaluate_hand",
    "evaluate_winner",
    "__version__",
]
