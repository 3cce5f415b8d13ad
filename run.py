#!/usr/bin/env python3
"""
DuelPoker - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--seed SEED] [--log-level LEVEL]
"""

import argparse
import os
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="DuelPoker Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--seed", type=int, default=None, help="Seed the shuffle RNG")
    parser.add_argument("--log-level", default="info", help="Logging level")
    args = parser.parse_args()

    # The app module reads these at import time, also under --reload
    if args.seed is not None:
        os.environ["DUELPOKER_SEED"] = str(args.seed)
    os.environ["DUELPOKER_LOG_LEVEL"] = args.log_level

    uvicorn.run(
        "duelpoker.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
