"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Dict
from pydantic import BaseModel, Field

from duelpoker.core.rules import STARTING_CHIPS


# ============= Request Schemas =============

class SeatRequest(BaseModel):
    """Request to open or join a session."""
    player_id: str = Field(..., min_length=1)
    chips: int = Field(default=STARTING_CHIPS, gt=0)


class ActionRequest(BaseModel):
    """Request to take a game action."""
    player_id: str = Field(..., min_length=1)
    action: str = Field(..., description="Action: fold, check, call, raise")
    amount: Optional[int] = Field(default=None, ge=0, description="New total bet for raise")


# ============= Response Schemas =============

class CardSchema(BaseModel):
    """Card representation; rank and suit are absent for hidden cards."""
    hidden: bool
    revealed: bool
    rank: Optional[str] = None
    suit: Optional[str] = None
    text: Optional[str] = None
    color: Optional[str] = None


class PlayerSchema(BaseModel):
    """Player information as one viewer sees it."""
    id: str
    chips: int
    bet: int
    folded: bool
    connected: bool
    last_action: Optional[str] = None
    hand: List[CardSchema] = []


class SessionSchema(BaseModel):
    """Session snapshot."""
    id: str
    status: str
    round: str
    pot: int
    high_bet: int
    community_cards: List[CardSchema]
    players: List[PlayerSchema]
    dealer_id: Optional[str] = None
    current_player_id: Optional[str] = None
    winner_id: Optional[str] = None
    winner_ids: List[str] = []
    winning_hand: Optional[str] = None
    winning_category: Optional[str] = None
    payouts: Dict[str, int] = {}


class LegalActionSchema(BaseModel):
    """Available action."""
    type: str
    amount: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None


class LegalActionsSchema(BaseModel):
    actions: List[LegalActionSchema]


class ErrorSchema(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None


# ============= WebSocket Message Schemas =============

class WSJoinMessage(BaseModel):
    """WebSocket join message, must be the first message on a connection."""
    type: str = "join"
    session_id: str
    player_id: str


class WSActionMessage(BaseModel):
    """WebSocket action message."""
    type: str = "action"
    action: str
    amount: Optional[int] = None
