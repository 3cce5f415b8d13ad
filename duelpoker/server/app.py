"""
FastAPI Application Entry Point for DuelPoker.

This module creates and configures the FastAPI application with:
- HTTP routes for session management and actions
- WebSocket endpoint for real-time communication
- Translation of engine errors into JSON error bodies
- CORS middleware for development

Environment:
    DUELPOKER_SEED: integer seed for the shuffle RNG (unset = OS entropy)
    DUELPOKER_LOG_LEVEL: logging level name (default INFO)
"""

import os
import logging
import random
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from duelpoker import __version__
from duelpoker.core.errors import (
    GameError, NotActiveGame, OutOfTurn, RematchUnavailable, SeatingError,
    UnknownPlayer,
)
from duelpoker.server.manager import SessionManager
from duelpoker.server.routes import router
from duelpoker.server.websocket import ConnectionDirectory, websocket_endpoint

# Configure logging
logging.basicConfig(
    level=os.environ.get("DUELPOKER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotActiveGame: 409,
    OutOfTurn: 409,
    SeatingError: 409,
    RematchUnavailable: 409,
    UnknownPlayer: 403,
}


def _seed_from_env() -> Optional[int]:
    value = os.environ.get("DUELPOKER_SEED")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer DUELPOKER_SEED={value!r}")
        return None


async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    """Relay a rejected operation to the caller; the session is unchanged."""
    status = ERROR_STATUS.get(type(exc), 400)
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} {exc.message}")
    return JSONResponse(status_code=status, content=exc.to_dict())


def create_app(seed: Optional[int] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        seed: Seed for the shuffle RNG shared by this app's sessions

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="DuelPoker",
        description="Heads-up Hold'em session engine with HTTP and WebSocket API",
        version=__version__,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.manager = SessionManager(rng=random.Random(seed))
    app.state.connections = ConnectionDirectory()

    app.add_exception_handler(GameError, game_error_handler)
    app.include_router(router)
    app.websocket("/ws")(websocket_endpoint)

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"DuelPoker server starting up (seed={'fixed' if seed is not None else 'random'})")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("DuelPoker server shutting down...")

    return app


# Create the application instance
app = create_app(seed=_seed_from_env())


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "duelpoker.server.app:app",
        host="0.0.0.0",
        port=8000,
    )


if __name__ == "__main__":
    main()
