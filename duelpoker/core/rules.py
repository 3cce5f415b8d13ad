"""
Heads-up Hold'em rules and constants.

The betting structure is fixed policy rather than configuration:

1. Blinds are 5/10. The dealer (seat 0) posts the small blind, the other
   seat posts the big blind. A short stack posts whatever it has left.

2. Pre-flop the big blind acts first; from the flop on the dealer acts first.

3. Minimum raise: a raise names the new total bet for the round and must be
   at least double the current high bet. This is deliberately simpler than
   the usual "raise by at least the previous raise" rule.

4. There are no side pots. When one player is all-in for less, the part of
   the other player's bet that could not be called goes back to them.
"""

from enum import Enum
from typing import Dict, List, Tuple


class GameStatus(Enum):
    """Lifecycle of a session."""
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"


class GameRound(Enum):
    """Betting rounds of the single hand a session plays."""
    PRE_FLOP = "pre-flop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"


SMALL_BLIND = 5
BIG_BLIND = 10
STARTING_CHIPS = 1000
SEATS = 2

HOLE_CARDS = 2
TOTAL_COMMUNITY_CARDS = 5

# Community slots turned face up when the round is entered
REVEAL_SCHEDULE: Dict[GameRound, Tuple[int, ...]] = {
    GameRound.PRE_FLOP: (),
    GameRound.FLOP: (0, 1, 2),
    GameRound.TURN: (3,),
    GameRound.RIVER: (4,),
    GameRound.SHOWDOWN: (),
}

NEXT_ROUND: Dict[GameRound, GameRound] = {
    GameRound.PRE_FLOP: GameRound.FLOP,
    GameRound.FLOP: GameRound.TURN,
    GameRound.TURN: GameRound.RIVER,
    GameRound.RIVER: GameRound.SHOWDOWN,
}

# Community cards face up once a round has been entered
REVEALED_COUNT: Dict[GameRound, int] = {
    GameRound.PRE_FLOP: 0,
    GameRound.FLOP: 3,
    GameRound.TURN: 4,
    GameRound.RIVER: 5,
    GameRound.SHOWDOWN: 5,
}


def parse_action(action) -> ActionType:
    """
    Coerce a wire value ("call", "CALL", ActionType.CALL) to an ActionType.

    Raises:
        ValueError: If the value names no action.
    """
    if isinstance(action, ActionType):
        return action
    if not isinstance(action, str):
        raise ValueError(f"Unknown action: {action!r}")
    return ActionType(action.strip().lower())


def get_blind_seats(dealer_index: int) -> Tuple[int, int]:
    """
    Return (small_blind_seat, big_blind_seat).

    Heads-up: the dealer posts the small blind.
    """
    return dealer_index, (dealer_index + 1) % SEATS


def get_first_to_act(game_round: GameRound, dealer_index: int) -> int:
    """Big blind opens pre-flop, the dealer opens every later round."""
    if game_round == GameRound.PRE_FLOP:
        return (dealer_index + 1) % SEATS
    return dealer_index


def min_raise_total(high_bet: int) -> int:
    """
    Minimum total bet a raise must reach.

    Double the current high bet; any positive amount opens an unbet round.
    """
    return max(2 * high_bet, high_bet + 1)


def split_pot(pot: int, winner_seats: List[int], dealer_index: int) -> Dict[int, int]:
    """
    Divide a pot among tied winners.

    Each winner gets an equal share. Odd chips go one at a time to winners in
    seat order starting left of the dealer button, so in heads-up the
    non-dealer receives the odd chip.
    """
    if not winner_seats:
        return {}
    share, remainder = divmod(pot, len(winner_seats))
    shares = {seat: share for seat in winner_seats}
    for i in range(SEATS):
        if remainder == 0:
            break
        seat = (dealer_index + 1 + i) % SEATS
        if seat in shares:
            shares[seat] += 1
            remainder -= 1
    return shares
