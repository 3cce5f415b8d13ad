"""
DuelPoker Core - Pure Python heads-up Hold'em game logic

This module contains all game logic without any network dependencies.
"""

from duelpoker.core.card import Card, Deck, Rank, Suit
from duelpoker.core.errors import GameError
from duelpoker.core.player import PlayerState
from duelpoker.core.hand import HandCategory, HandValue, evaluate_hand, evaluate_winner
from duelpoker.core.rules import ActionType, GameRound, GameStatus
from duelpoker.core.game import (
    GameSession, new_session, seat_player, create_session,
    rematch, apply_action, get_state, get_legal_actions, session_to_dict,
)

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "GameError",
    "PlayerState",
    "HandCategory",
    "HandValue",
    "evaluate_hand",
    "evaluate_winner",
    "ActionType",
    "GameRound",
    "GameStatus",
    "GameSession",
    "new_session",
    "seat_player",
    "create_session",
    "rematch",
    "apply_action",
    "get_state",
    "get_legal_actions",
    "session_to_dict",
]
