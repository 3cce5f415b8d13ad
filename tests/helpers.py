from __future__ import annotations

import copy
from typing import Iterable, Optional, Tuple

from duelpoker.core.card import full_deck, parse_cards
from duelpoker.core.game import GameSession, apply_action, get_legal_actions


def rig_session(session: GameSession, dealer_cards: str, other_cards: str, board: str) -> GameSession:
    """Copy of ``session`` with the given hole cards and board, deck rebuilt to match."""
    state = copy.deepcopy(session)
    state.players[0].hand = parse_cards(dealer_cards)
    state.players[1].hand = parse_cards(other_cards)
    state.community_cards = [
        new.reveal() if old.revealed else new
        for old, new in zip(state.community_cards, parse_cards(board, revealed=False))
    ]
    used = set(state.players[0].hand + state.players[1].hand + state.community_cards)
    state.deck = [card for card in full_deck() if card not in used]
    return state


def play(session: GameSession, actions: Iterable[Tuple]) -> GameSession:
    """Apply a scripted sequence of (player_id, action[, amount]) tuples."""
    for step in actions:
        player_id, action = step[0], step[1]
        amount: Optional[int] = step[2] if len(step) > 2 else None
        session = apply_action(session, player_id, action, amount)
    return session


def check_down(session: GameSession) -> GameSession:
    """Advance with check (or call when facing a bet) until the hand ends."""
    while session.is_active:
        player = session.current_player
        legal = [a["type"] for a in get_legal_actions(session)]
        action = "check" if "check" in legal else "call"
        session = apply_action(session, player.player_id, action)
    return session
