"""FastAPI application for a local rendering client."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_arena.server.game_manager import GameManager
from snake_arena.server.routes import router
from snake_arena.server.websocket import ws_router

logger = logging.getLogger(__name__)


def create_app(max_finished_games: int = 100) -> FastAPI:
    """Build the app; each instance hosts its own in-memory games.

    Finished games beyond *max_finished_games* are dropped when new games
    are created.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.game_manager = GameManager(max_finished_games)
        logger.info("Snake Arena server ready.")
        yield
        await app.state.game_manager.cleanup()

    app = FastAPI(
        title="Snake Arena API",
        description="Play one snake against heuristic AI opponents.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
