"""
Session directory for the server layer.

The core engine is a set of pure functions over GameSession values; this
module owns the current value of every live session and serialises changes
to it. Each session has its own asyncio.Lock held for the duration of one
action, so two requests for the same session never interleave while
different sessions proceed independently.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import asyncio
import itertools
import logging
import random

from duelpoker.core.game import (
    GameSession, new_session, seat_player, apply_action, get_legal_actions, rematch,
)
from duelpoker.core.rules import GameStatus, STARTING_CHIPS


logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    """No session with the requested id."""


@dataclass
class SessionEntry:
    """A live session value, the lock guarding it and its follow-up hand."""
    session: GameSession
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    rematch_id: Optional[str] = None


class SessionManager:
    """
    Owns the sessions of one server process.

    Usage:
        manager = SessionManager(rng=random.Random(7))
        session = manager.create_session("alice", 1000)
        session = await manager.join(session.session_id, "bob", 1000)
        session = await manager.apply(session.session_id, "bob", "check")
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng if rng is not None else random.Random()
        self._entries: Dict[str, SessionEntry] = {}
        self._counter = itertools.count(1)

    def create_session(self, player_id: str, chips: int = STARTING_CHIPS) -> GameSession:
        """Open a waiting session with ``player_id`` in the dealer seat."""
        session_id = self._next_id()
        session = seat_player(new_session(session_id), player_id, chips)
        self._entries[session_id] = SessionEntry(session=session)
        logger.info(f"Created {session_id} for {player_id}")
        return session

    def get(self, session_id: str) -> GameSession:
        return self._entry(session_id).session

    def find_waiting(self, exclude_player: Optional[str] = None) -> Optional[str]:
        """Oldest waiting session not opened by ``exclude_player``."""
        for session_id, entry in self._entries.items():
            session = entry.session
            if session.status != GameStatus.WAITING:
                continue
            if exclude_player is not None and session.get_player(exclude_player) is not None:
                continue
            return session_id
        return None

    async def join(self, session_id: str, player_id: str, chips: int = STARTING_CHIPS) -> GameSession:
        """Seat the second player; the session starts immediately."""
        entry = self._entry(session_id)
        async with entry.lock:
            entry.session = seat_player(entry.session, player_id, chips, rng=self._rng)
        logger.info(f"{player_id} joined {session_id}")
        return entry.session

    async def apply(
        self,
        session_id: str,
        player_id: str,
        action: Any,
        amount: Optional[int] = None,
    ) -> GameSession:
        """
        Apply an action under the session lock.

        GameError from the engine propagates; the stored session is only
        replaced when the action was accepted.
        """
        entry = self._entry(session_id)
        async with entry.lock:
            entry.session = apply_action(entry.session, player_id, action, amount)
        return entry.session

    async def update(self, session_id: str, transform) -> GameSession:
        """Replace the session with ``transform(session)`` under its lock."""
        entry = self._entry(session_id)
        async with entry.lock:
            entry.session = transform(entry.session)
        return entry.session

    async def rematch(self, session_id: str) -> GameSession:
        """
        Start the next hand for a completed session.

        Both players asking for a rematch get the same new session.
        """
        entry = self._entry(session_id)
        async with entry.lock:
            if entry.rematch_id is None:
                new_id = self._next_id()
                session = rematch(entry.session, new_id, rng=self._rng)
                self._entries[new_id] = SessionEntry(session=session)
                entry.rematch_id = new_id
        return self.get(entry.rematch_id)

    def legal_actions(self, session_id: str, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return get_legal_actions(self.get(session_id), player_id)

    def _next_id(self) -> str:
        return f"session-{next(self._counter)}"

    def _entry(self, session_id: str) -> SessionEntry:
        try:
            return self._entries[session_id]
        except KeyError:
            raise SessionNotFound(f"Session {session_id} not found")
