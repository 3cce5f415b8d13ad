"""
HTTP API Routes for DuelPoker.

These routes open and join sessions, query state and accept actions.
Accepted actions are also pushed to any WebSocket viewers of the session.
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Request

from duelpoker.core.game import session_to_dict
from duelpoker.server.manager import SessionManager, SessionNotFound
from duelpoker.server.schemas import (
    SeatRequest, ActionRequest, SessionSchema, LegalActionsSchema, ErrorSchema,
)
from duelpoker.server.websocket import ConnectionDirectory

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorSchema},
    403: {"model": ErrorSchema},
    409: {"model": ErrorSchema},
}


def get_manager(request: Request) -> SessionManager:
    return request.app.state.manager


def get_connections(request: Request) -> ConnectionDirectory:
    return request.app.state.connections


def _require(manager: SessionManager, session_id: str):
    try:
        return manager.get(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/sessions", status_code=201, response_model=SessionSchema)
async def create_session(req: SeatRequest, request: Request):
    """Open a waiting session; the creator takes the dealer seat."""
    session = get_manager(request).create_session(req.player_id, req.chips)
    return session_to_dict(session, viewer_id=req.player_id)


@router.post("/sessions/join", response_model=SessionSchema)
async def join_any_session(req: SeatRequest, request: Request):
    """Join the oldest waiting session opened by someone else."""
    manager = get_manager(request)
    session_id = manager.find_waiting(exclude_player=req.player_id)
    if session_id is None:
        raise HTTPException(status_code=404, detail="No waiting sessions available")
    session = await manager.join(session_id, req.player_id, req.chips)
    await get_connections(request).send_state(session)
    return session_to_dict(session, viewer_id=req.player_id)


@router.post("/sessions/{session_id}/join", response_model=SessionSchema, responses=ERROR_RESPONSES)
async def join_session(session_id: str, req: SeatRequest, request: Request):
    """Join a specific waiting session."""
    manager = get_manager(request)
    _require(manager, session_id)
    session = await manager.join(session_id, req.player_id, req.chips)
    await get_connections(request).send_state(session)
    return session_to_dict(session, viewer_id=req.player_id)


@router.get("/sessions/{session_id}", response_model=SessionSchema)
async def get_session(session_id: str, request: Request, viewer_id: Optional[str] = None):
    """
    Get the session state as ``viewer_id`` may see it.

    Without a viewer only face-up cards are included.
    """
    session = _require(get_manager(request), session_id)
    return session_to_dict(session, viewer_id=viewer_id)


@router.post("/sessions/{session_id}/actions", response_model=SessionSchema, responses=ERROR_RESPONSES)
async def take_action(session_id: str, req: ActionRequest, request: Request):
    """
    Take a game action.

    Returns the resulting state as the acting player sees it.
    """
    manager = get_manager(request)
    _require(manager, session_id)
    session = await manager.apply(session_id, req.player_id, req.action, req.amount)
    await get_connections(request).send_state(session)
    return session_to_dict(session, viewer_id=req.player_id)


@router.get("/sessions/{session_id}/legal_actions", response_model=LegalActionsSchema)
async def get_legal_actions(session_id: str, request: Request, player_id: Optional[str] = None):
    """Legal actions for the player to act (empty if it is not their turn)."""
    manager = get_manager(request)
    _require(manager, session_id)
    return {"actions": manager.legal_actions(session_id, player_id)}


@router.post("/sessions/{session_id}/rematch", status_code=201, response_model=SessionSchema,
             responses=ERROR_RESPONSES)
async def rematch_session(session_id: str, request: Request, viewer_id: Optional[str] = None):
    """
    Play again: start a new session for the same two players.

    The dealer button moves to the other player and both keep their final
    stacks. Only allowed once the session is completed; repeated calls return
    the same new session.
    """
    manager = get_manager(request)
    _require(manager, session_id)
    session = await manager.rematch(session_id)
    await get_connections(request).broadcast(
        session_id, {"type": "rematch", "session_id": session.session_id}
    )
    return session_to_dict(session, viewer_id=viewer_id)
