"""
DuelPoker Server - FastAPI + WebSocket Server Layer
"""

from duelpoker.server.app import app, create_app

__all__ = ["app", "create_app"]
