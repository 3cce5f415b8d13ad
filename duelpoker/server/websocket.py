"""
WebSocket handling for real-time game communication.

This module provides:
- ConnectionDirectory: which socket belongs to which player of which session
- WebSocket endpoint: joins a player to a session and relays their actions

Connection bookkeeping lives here, keyed by session id, and never inside the
game state. Every viewer receives its own redacted snapshot.
"""

from __future__ import annotations
from typing import Dict, Optional, Any
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from duelpoker.core.errors import GameError
from duelpoker.core.game import GameSession, session_to_dict, set_connected
from duelpoker.server.manager import SessionManager, SessionNotFound
from duelpoker.server.schemas import WSJoinMessage, WSActionMessage


logger = logging.getLogger(__name__)


class ConnectionDirectory:
    """
    Live sockets per session.

    Usage:
        directory = ConnectionDirectory()
        directory.add(session_id, player_id, websocket)
        await directory.send_state(session)
        directory.remove(session_id, player_id, websocket)
    """

    def __init__(self):
        self._sockets: Dict[str, Dict[str, WebSocket]] = {}

    def add(self, session_id: str, player_id: str, websocket: WebSocket) -> None:
        self._sockets.setdefault(session_id, {})[player_id] = websocket

    def remove(self, session_id: str, player_id: str, websocket: WebSocket) -> bool:
        """
        Forget ``websocket`` if it is still the player's current socket.

        Returns False when the player has since reconnected on another socket,
        which stays registered.
        """
        sockets = self._sockets.get(session_id)
        if sockets is None or sockets.get(player_id) is not websocket:
            return False
        del sockets[player_id]
        if not sockets:
            del self._sockets[session_id]
        return True

    async def broadcast(self, session_id: str, message: Dict[str, Any], exclude: Optional[str] = None):
        """Send the same message to every socket of a session."""
        for player_id, ws in list(self._sockets.get(session_id, {}).items()):
            if player_id == exclude:
                continue
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.error(f"Error sending to {player_id}: {e}")

    async def send_state(self, session: GameSession) -> None:
        """Send each connected viewer the snapshot it is allowed to see."""
        for player_id, ws in list(self._sockets.get(session.session_id, {}).items()):
            try:
                await ws.send_json({
                    "type": "state",
                    "session": session_to_dict(session, viewer_id=player_id),
                })
            except Exception as e:
                logger.error(f"Error sending state to {player_id}: {e}")


def error_message(message: str, code: str = "BAD_REQUEST") -> Dict[str, Any]:
    return {"type": "error", "code": code, "message": message}


async def handle_message(
    manager: SessionManager,
    directory: ConnectionDirectory,
    session_id: str,
    player_id: str,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Handle one message from a joined player.

    Returns the reply for the sender; accepted actions are also broadcast to
    every viewer of the session.
    """
    if not isinstance(message, dict):
        return error_message("Message must be a JSON object")

    msg_type = message.get("type", "")

    if msg_type == "get_state":
        return {
            "type": "state",
            "session": session_to_dict(manager.get(session_id), viewer_id=player_id),
        }

    if msg_type != "action":
        return error_message(f"Unknown message type: {msg_type}")

    try:
        msg = WSActionMessage(**message)
    except ValidationError as e:
        return error_message(str(e))

    try:
        session = await manager.apply(session_id, player_id, msg.action, msg.amount)
    except GameError as e:
        logger.warning(f"Rejected {msg.action} from {player_id} in {session_id}: {e.code}")
        return error_message(e.message, e.code)

    await directory.send_state(session)
    return {"type": "action_result", "success": True, "action": msg.action.lower()}


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for game communication.

    Protocol:
    1. Client connects and sends: {"type": "join", "session_id": "...", "player_id": "..."}
    2. Server sends the session state
    3. Client sends actions: {"type": "action", "action": "raise", "amount": 40}
    4. Server broadcasts state updates to both players
    5. Client sends {"type": "leave"} (or just closes) to detach
    """
    manager: SessionManager = websocket.app.state.manager
    directory: ConnectionDirectory = websocket.app.state.connections
    session_id: Optional[str] = None
    player_id: Optional[str] = None
    left = False

    await websocket.accept()
    try:
        try:
            join = WSJoinMessage(**(await websocket.receive_json()))
            if join.type != "join":
                raise ValueError("First message must be join")
            session = manager.get(join.session_id)
            session.seat_of(join.player_id)
        except (ValidationError, ValueError, TypeError, SessionNotFound, GameError) as e:
            await websocket.send_json(error_message(str(e)))
            await websocket.close()
            return

        session_id, player_id = join.session_id, join.player_id
        directory.add(session_id, player_id, websocket)
        session = await manager.update(
            session_id, lambda s: set_connected(s, player_id, True)
        )
        logger.info(f"Player {player_id} connected to {session_id}")

        await websocket.send_json({
            "type": "state",
            "session": session_to_dict(session, viewer_id=player_id),
        })
        await directory.broadcast(
            session_id, {"type": "player_joined", "player_id": player_id}, exclude=player_id
        )

        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                await websocket.send_json(error_message("Message is not valid JSON"))
                continue

            if isinstance(message, dict) and message.get("type") == "leave":
                left = True
                break

            reply = await handle_message(manager, directory, session_id, player_id, message)
            await websocket.send_json(reply)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {player_id}")
    except Exception as e:
        logger.error(f"WebSocket error for {player_id}: {e}")
    finally:
        if session_id and player_id and directory.remove(session_id, player_id, websocket):
            await manager.update(session_id, lambda s: set_connected(s, player_id, False))
            await directory.broadcast(session_id, {"type": "player_left", "player_id": player_id})

    if left:
        logger.info(f"Player {player_id} left {session_id}")
        await websocket.close()
