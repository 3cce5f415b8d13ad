"""
Heads-up Hold'em session engine.

A GameSession is a plain state value; every operation that changes it is a
function taking a session and returning a new one:

    session = create_session("s1", ("alice", 1000), ("bob", 1000), rng=random.Random(7))
    session = apply_action(session, "bob", "check")
    session = apply_action(session, "alice", "raise", 40)

The session passed in is never modified. A rejected action raises a
GameError and the caller simply keeps the session it already had, which
makes replaying a recorded action list deterministic given the same seed.

Each session plays exactly one hand: blinds, pre-flop, flop, turn, river and
showdown (or an earlier fold). A completed session is terminal; the next hand
between the same players is a new session built by rematch().
"""

from __future__ import annotations
import copy
import logging
import random
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from duelpoker.core.card import Card, Deck
from duelpoker.core.errors import (
    InsufficientChips, InvalidAction, MustCallOrRaise, NotActiveGame,
    NothingToCall, OutOfTurn, RaiseTooSmall, RematchUnavailable, SeatingError,
    UnknownPlayer,
)
from duelpoker.core.hand import evaluate_winner
from duelpoker.core.player import PlayerState
from duelpoker.core.rules import (
    ActionType, GameRound, GameStatus,
    NEXT_ROUND, REVEAL_SCHEDULE, SEATS, HOLE_CARDS, TOTAL_COMMUNITY_CARDS,
    SMALL_BLIND, BIG_BLIND,
    get_blind_seats, get_first_to_act, min_raise_total, parse_action, split_pot,
)


logger = logging.getLogger(__name__)


@dataclass
class ActionRecord:
    """One entry of a session's in-memory action log."""
    player_id: str
    action: str
    amount: int
    round: GameRound


@dataclass
class GameSession:
    """
    Complete state of one heads-up session.

    Seat 0 is the dealer (the first player seated) and seat 1 the other
    player; seating never changes for the life of the session.
    """
    session_id: str
    status: GameStatus = GameStatus.WAITING
    round: GameRound = GameRound.PRE_FLOP
    pot: int = 0
    community_cards: List[Card] = field(default_factory=list)
    players: List[PlayerState] = field(default_factory=list)
    dealer_index: int = 0
    current_player_index: int = 0
    winner_id: Optional[str] = None
    winner_ids: List[str] = field(default_factory=list)
    winning_hand: Optional[str] = None
    winning_category: Optional[str] = None
    payouts: Dict[str, int] = field(default_factory=dict)
    deck: List[Card] = field(default_factory=list)
    starting_total: int = 0
    action_log: List[ActionRecord] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == GameStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED

    @property
    def current_player(self) -> Optional[PlayerState]:
        """The player whose turn it is, None unless the session is active."""
        if not self.is_active:
            return None
        return self.players[self.current_player_index]

    @property
    def high_bet(self) -> int:
        """Highest current bet among players still in the hand."""
        bets = [p.current_bet for p in self.players if not p.folded]
        return max(bets) if bets else 0

    @property
    def revealed_community_cards(self) -> List[Card]:
        return [c for c in self.community_cards if c.revealed]

    def get_player(self, player_id: str) -> Optional[PlayerState]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def seat_of(self, player_id: str) -> int:
        for seat, player in enumerate(self.players):
            if player.player_id == player_id:
                return seat
        raise UnknownPlayer(f"Player {player_id} is not seated in session {self.session_id}")


# ============= Session lifecycle =============

def new_session(session_id: str) -> GameSession:
    """Create an empty session waiting for two players."""
    return GameSession(session_id=str(session_id))


def seat_player(
    session: GameSession,
    player_id: str,
    chips: int,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """
    Seat a player in a waiting session.

    The first player seated becomes the dealer. Seating the second player
    shuffles, deals and posts the blinds, which makes the session active.

    Raises:
        SeatingError: If the session is not waiting, the id is already
            seated, or the stack is not a positive integer.
    """
    if session.status != GameStatus.WAITING:
        raise SeatingError(f"Session {session.session_id} is not waiting for players")
    if session.get_player(player_id) is not None:
        raise SeatingError(f"Player {player_id} is already seated")
    if isinstance(chips, bool) or not isinstance(chips, int) or chips <= 0:
        raise SeatingError(f"Starting chips must be a positive integer, got {chips!r}")

    state = copy.deepcopy(session)
    state.players.append(PlayerState(player_id=str(player_id), chips=chips))
    logger.debug(f"Seated {player_id} with {chips} chips in session {state.session_id}")

    if len(state.players) == SEATS:
        _start(state, rng if rng is not None else random.Random())
    return state


def create_session(
    session_id: str,
    player_a: Tuple[str, int],
    player_b: Tuple[str, int],
    rng: Optional[random.Random] = None,
) -> GameSession:
    """
    Create an active session for two (player_id, chips) pairs.

    ``player_a`` is the dealer. ``rng`` drives the shuffle; pass a seeded
    ``random.Random`` for a reproducible deal.
    """
    state = new_session(session_id)
    state = seat_player(state, player_a[0], player_a[1])
    return seat_player(state, player_b[0], player_b[1], rng=rng)


def rematch(
    finished: GameSession,
    session_id: str,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """
    Start the next hand between the same two players.

    The previous non-dealer takes the dealer seat, so the button alternates,
    and both players keep the stacks they finished with.

    Raises:
        RematchUnavailable: If ``finished`` is not completed or a player
            has no chips left.
    """
    if not finished.is_completed:
        raise RematchUnavailable(f"Session {finished.session_id} is still {finished.status.value}")
    broke = [p.player_id for p in finished.players if p.chips <= 0]
    if broke:
        raise RematchUnavailable(f"No chips left for {', '.join(broke)}")

    dealer = finished.players[(finished.dealer_index + 1) % SEATS]
    other = finished.players[finished.dealer_index]
    logger.info(f"Rematch of {finished.session_id} as {session_id}: dealer={dealer.player_id}")
    return create_session(
        session_id, (dealer.player_id, dealer.chips), (other.player_id, other.chips), rng=rng
    )


def _start(state: GameSession, rng: random.Random) -> None:
    """Shuffle, deal, post blinds and hand the turn to the big blind."""
    deck = Deck(rng)
    deck.shuffle()

    for player in state.players:
        player.hand = [deck.deal_card(revealed=True) for _ in range(HOLE_CARDS)]
    state.community_cards = [deck.deal_card() for _ in range(TOTAL_COMMUNITY_CARDS)]
    state.deck = deck.cards

    state.starting_total = sum(p.chips for p in state.players)
    state.status = GameStatus.ACTIVE
    state.round = GameRound.PRE_FLOP
    state.dealer_index = 0

    _post_blinds(state)
    state.current_player_index = _first_actor(state)

    logger.info(
        f"Session {state.session_id} started: dealer={state.players[0].player_id} "
        f"big blind={state.players[1].player_id}"
    )

    # Both blinds may already be all-in
    if _is_round_complete(state):
        _end_round(state)


def _post_blinds(state: GameSession) -> None:
    sb_seat, bb_seat = get_blind_seats(state.dealer_index)
    sb_amount = state.players[sb_seat].commit(SMALL_BLIND)
    bb_amount = state.players[bb_seat].commit(BIG_BLIND)
    state.action_log.append(ActionRecord(state.players[sb_seat].player_id, "small_blind", sb_amount, state.round))
    state.action_log.append(ActionRecord(state.players[bb_seat].player_id, "big_blind", bb_amount, state.round))
    logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")


def _first_actor(state: GameSession) -> int:
    seat = get_first_to_act(state.round, state.dealer_index)
    if not state.players[seat].can_act:
        seat = (seat + 1) % SEATS
    return seat


# ============= Actions =============

def apply_action(
    session: GameSession,
    player_id: str,
    action,
    amount: Optional[int] = None,
) -> GameSession:
    """
    Apply one player action and return the resulting session.

    Args:
        session: Current state (left unchanged)
        player_id: Acting player
        action: ActionType or its wire name ("fold", "check", "call", "raise")
        amount: For raises, the new total bet for the round

    Raises:
        NotActiveGame: Session is waiting or completed
        UnknownPlayer: player_id is not seated
        OutOfTurn: It is the other player's turn
        InvalidAction: Unrecognised action or missing raise amount
        MustCallOrRaise, NothingToCall, RaiseTooSmall, InsufficientChips:
            The action is not legal right now
    """
    if not session.is_active:
        raise NotActiveGame(f"Session {session.session_id} is {session.status.value}")

    seat = session.seat_of(player_id)
    if seat != session.current_player_index:
        raise OutOfTurn(f"It is {session.current_player.player_id}'s turn")

    try:
        action_type = parse_action(action)
    except ValueError:
        raise InvalidAction(f"Invalid action: {action!r}")

    state = copy.deepcopy(session)
    moved = _execute(state, seat, action_type, amount)

    state.players[seat].record(action_type)
    state.action_log.append(ActionRecord(player_id, action_type.value, moved, state.round))
    logger.debug(f"{player_id} {action_type.value} {moved} in {state.round.value}")

    _advance(state, seat)
    return state


def _execute(state: GameSession, seat: int, action_type: ActionType, amount: Optional[int]) -> int:
    """Validate and apply the action on the working copy; returns chips moved."""
    player = state.players[seat]
    high = state.high_bet
    deficit = high - player.current_bet

    if action_type == ActionType.FOLD:
        player.folded = True
        return 0

    if action_type == ActionType.CHECK:
        if deficit > 0:
            raise MustCallOrRaise(f"Cannot check, you must call {deficit} or raise")
        return 0

    if action_type == ActionType.CALL:
        if deficit <= 0:
            raise NothingToCall()
        return player.commit(deficit)

    # RAISE
    if amount is None or isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAction("Raise amount is required")
    minimum = min_raise_total(high)
    if amount < minimum:
        raise RaiseTooSmall(f"Raise must be at least {minimum}")
    needed = amount - player.current_bet
    if needed > player.chips:
        raise InsufficientChips(f"Raise to {amount} needs {needed} chips, you have {player.chips}")
    return player.commit(needed)


def _advance(state: GameSession, seat: int) -> None:
    """Pass the turn, close the round or end the hand after an action."""
    live = [p for p in state.players if not p.folded]
    if len(live) == 1:
        _award_uncontested(state, live[0])
        return

    if _is_round_complete(state):
        _end_round(state)
        return

    other = (seat + 1) % SEATS
    if state.players[other].can_act:
        state.current_player_index = other


def _is_round_complete(state: GameSession) -> bool:
    """
    A round is over when every player who still has chips has acted and
    matched the high bet. All-in players need not act, and a lone player
    with chips who already covers the high bet has nothing left to decide.
    """
    live = [p for p in state.players if not p.folded]
    if len(live) <= 1:
        return True

    high = state.high_bet
    actors = [p for p in live if p.chips > 0]
    if not actors:
        return True
    if len(actors) == 1 and actors[0].current_bet >= high:
        return True
    return all(p.has_acted and p.current_bet == high for p in actors)


def _end_round(state: GameSession) -> None:
    """Sweep bets into the pot and move to the next round or showdown."""
    _return_uncalled(state)
    _collect_bets(state)

    actors = [p for p in state.players if p.can_act]
    if state.round == GameRound.RIVER or len(actors) < 2:
        _run_out_board(state)
        _showdown(state)
        return

    state.round = NEXT_ROUND[state.round]
    for index in REVEAL_SCHEDULE[state.round]:
        state.community_cards[index] = state.community_cards[index].reveal()
    for player in state.players:
        player.reset_for_new_round()
    state.current_player_index = _first_actor(state)

    logger.info(
        f"Session {state.session_id} -> {state.round.value}: "
        f"{' '.join(str(c) for c in state.revealed_community_cards)} pot={state.pot}"
    )


def _return_uncalled(state: GameSession) -> None:
    """Give back the part of the high bet the all-in opponent could not match."""
    ordered = sorted(state.players, key=lambda p: p.current_bet, reverse=True)
    top, other = ordered[0], ordered[1]
    excess = top.current_bet - other.current_bet
    if excess > 0 and not other.folded:
        top.refund(excess)
        logger.debug(f"Returned uncalled {excess} to {top.player_id}")


def _collect_bets(state: GameSession) -> None:
    for player in state.players:
        state.pot += player.current_bet
        player.current_bet = 0


def _run_out_board(state: GameSession) -> None:
    state.community_cards = [card.reveal() for card in state.community_cards]
    state.round = GameRound.RIVER


def _showdown(state: GameSession) -> None:
    """Evaluate both hands and pay the pot, splitting it on an exact tie."""
    state.round = GameRound.SHOWDOWN

    board = state.revealed_community_cards
    result = evaluate_winner([
        (p.player_id, p.hand + board) for p in state.players if not p.folded
    ])

    winner_seats = [state.seat_of(pid) for pid in result.winner_ids]
    shares = split_pot(state.pot, winner_seats, state.dealer_index)
    for seat, share in shares.items():
        state.players[seat].chips += share
        state.payouts[state.players[seat].player_id] = share

    state.winner_ids = list(result.winner_ids)
    state.winner_id = result.winner_ids[0] if not result.is_tie else None
    state.winning_hand = result.winning_hand.description
    state.winning_category = result.winning_hand.name
    state.pot = 0
    state.status = GameStatus.COMPLETED

    logger.info(
        f"Session {state.session_id} showdown: winners={state.winner_ids} "
        f"with {state.winning_hand}, payouts={state.payouts}"
    )


def _award_uncontested(state: GameSession, winner: PlayerState) -> None:
    """The other player folded: the survivor takes everything in the middle."""
    _collect_bets(state)
    amount = state.pot
    winner.chips += amount
    state.payouts = {winner.player_id: amount}
    state.winner_id = winner.player_id
    state.winner_ids = [winner.player_id]
    state.pot = 0
    state.status = GameStatus.COMPLETED
    logger.info(f"Session {state.session_id}: {winner.player_id} wins {amount} uncontested")


# ============= Queries =============

def set_connected(session: GameSession, player_id: str, connected: bool) -> GameSession:
    """
    Record whether a player's connection is live.

    Connection state never affects betting; a transport that wants to fold a
    disconnected player submits an ordinary fold. Completed sessions are
    returned unchanged.
    """
    if session.is_completed:
        return session
    seat = session.seat_of(player_id)
    state = copy.deepcopy(session)
    state.players[seat].connected = bool(connected)
    return state


def get_state(session: GameSession) -> GameSession:
    """Return an independent copy of the session."""
    return copy.deepcopy(session)


def chip_total(session: GameSession) -> int:
    """Chips behind plus chips bet plus the pot; constant for a session."""
    return sum(p.chips + p.current_bet for p in session.players) + session.pot


def get_legal_actions(session: GameSession, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Legal actions for the player to act.

    Returns an empty list when the session is not active or ``player_id``
    is not the player to act.
    """
    player = session.current_player
    if player is None or (player_id is not None and player.player_id != player_id):
        return []

    high = session.high_bet
    deficit = high - player.current_bet
    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

    if deficit <= 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({"type": ActionType.CALL.value, "amount": min(deficit, player.chips)})

    # Raising into an all-in opponent could only be returned as uncalled
    opponent = session.players[(session.current_player_index + 1) % SEATS]
    minimum = min_raise_total(high)
    maximum = player.chips + player.current_bet
    if maximum >= minimum and opponent.chips > 0:
        actions.append({"type": ActionType.RAISE.value, "min": minimum, "max": maximum})

    return actions


def session_to_dict(session: GameSession, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    JSON-ready projection of a session as ``viewer_id`` may see it.

    Face-down community cards are always redacted. Hole cards are dealt
    ``revealed`` to their owner only: other viewers see them once the hand
    reaches showdown, never after a fold.
    """
    current = session.current_player
    showdown = session.round == GameRound.SHOWDOWN
    return {
        "id": session.session_id,
        "status": session.status.value,
        "round": session.round.value,
        "pot": session.pot,
        "high_bet": session.high_bet,
        "community_cards": [c.to_dict(redact=not c.revealed) for c in session.community_cards],
        "players": [_player_view(p, viewer_id, showdown) for p in session.players],
        "dealer_id": session.players[session.dealer_index].player_id if session.players else None,
        "current_player_id": current.player_id if current else None,
        "winner_id": session.winner_id,
        "winner_ids": list(session.winner_ids),
        "winning_hand": session.winning_hand,
        "winning_category": session.winning_category,
        "payouts": dict(session.payouts),
    }


def _player_view(player: PlayerState, viewer_id: Optional[str], showdown: bool) -> Dict[str, Any]:
    visible = player.player_id == viewer_id or (showdown and not player.folded)
    view = player.to_dict(show_cards=visible)
    view["hand"] = [card.to_dict(redact=not (visible and card.revealed)) for card in player.hand]
    return view
