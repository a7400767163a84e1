"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from tile_snake.config import GameConfig
from tile_snake.server.game_manager import GameManager
from tile_snake.server.routes import router
from tile_snake.server.websocket import ws_router


def create_app(
    base_config: GameConfig | None = None, max_games: int | None = None,
) -> FastAPI:
    """Build the app. Games start from *base_config* plus request overrides."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        kwargs = {} if max_games is None else {"max_games": max_games}
        app.state.game_manager = GameManager(base_config, **kwargs)
        yield
        await app.state.game_manager.cleanup()

    app = FastAPI(title="Tile Snake API", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    app.include_router(ws_router)
    return app
