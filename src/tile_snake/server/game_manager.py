"""In-memory session registry and async frame loops."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field, replace

from starlette.websockets import WebSocket, WebSocketState

from tile_snake.config import GameConfig
from tile_snake.server.models import GameSummary
from tile_snake.session import GameSession
from tile_snake.snake import Direction

logger = logging.getLogger(__name__)

_MAX_GAMES = 100


@dataclass
class GameInstance:
    """A hosted session plus its connected clients."""

    game_id: str
    session: GameSession
    clients: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def config(self) -> GameConfig:
        return self.session.config

    def summary(self) -> GameSummary:
        width, height = self.config.effective_board
        return GameSummary(
            game_id=self.game_id,
            status=self.session.status,
            score=self.session.score,
            board_width=width,
            board_height=height,
            frame_ms=self.config.frame_ms,
            movement_delay=self.config.movement_delay,
        )


class GameManager:
    """Central registry managing all hosted games.

    Each game runs its own frame loop task. Frames, steering and
    restarts for a game all go through that game's lock, so the
    session only ever sees one writer at a time.
    """

    def __init__(
        self,
        base_config: GameConfig | None = None,
        max_games: int = _MAX_GAMES,
    ) -> None:
        if max_games < 1:
            raise ValueError("max_games must be at least 1.")
        self._base_config = (
            base_config if base_config is not None else GameConfig()
        )
        self._games: dict[str, GameInstance] = {}
        self._max_games = max_games

    def create_game(self, **overrides) -> GameInstance:
        """Create and start a new game. Raises ValueError on bad config."""
        if len(self._games) >= self._max_games:
            raise ValueError("Too many games running. Try again later.")

        config = replace(
            self._base_config,
            **{k: v for k, v in overrides.items() if v is not None},
        )
        session = GameSession(config)

        game_id = uuid.uuid4().hex[:12]
        instance = GameInstance(game_id=game_id, session=session)
        self._games[game_id] = instance
        instance._task = asyncio.create_task(self._frame_loop(instance))
        width, height = config.effective_board
        logger.info("Game %s created (%dx%d).", game_id, width, height)
        return instance

    def get_game(self, game_id: str) -> GameInstance | None:
        return self._games.get(game_id)

    def list_games(self) -> list[GameSummary]:
        return [g.summary() for g in self._games.values()]

    async def steer(self, game_id: str, direction: Direction) -> bool:
        """Forward a direction change to a game's session."""
        game = self._require(game_id)
        async with game.lock:
            return game.session.steer(direction)

    async def restart(self, game_id: str) -> None:
        """Restart a finished game. Raises ValueError during play or cooldown."""
        game = self._require(game_id)
        async with game.lock:
            if not game.session.restart():
                raise ValueError("Game cannot be restarted yet.")
            state = game.session.snapshot()
        await self._broadcast(game, state)

    async def remove_game(self, game_id: str) -> None:
        """Stop a game's frame loop and drop it from the registry."""
        game = self._games.pop(game_id, None)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        await self._stop(game)
        await self._close_connections(game)
        logger.info("Game %s removed.", game_id)

    def _require(self, game_id: str) -> GameInstance:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        return game

    async def _frame_loop(self, game: GameInstance) -> None:
        """Emit frames at the configured rate, broadcasting on change."""
        frame_interval = game.config.frame_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(frame_interval)
                async with game.lock:
                    changed = game.session.on_frame()
                    state = game.session.snapshot() if changed else None
                if state is not None:
                    await self._broadcast(game, state)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for game %s.", game.game_id)
        except Exception:
            logger.exception("Frame loop error in game %s.", game.game_id)
            # A game whose loop died can never move again; drop it.
            if self._games.get(game.game_id) is game:
                del self._games[game.game_id]
            await self._close_connections(game, code=1011)

    async def _stop(self, game: GameInstance) -> None:
        task = game._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _close_connections(
        self, game: GameInstance, code: int = 1000,
    ) -> None:
        """Close any live client sockets for a removed game."""
        for ws in list(game.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=code, reason="Game closed.")
            except Exception:
                logger.warning(
                    "Failed closing client socket in game %s.", game.game_id,
                )
        game.clients.clear()

    async def _broadcast(self, game: GameInstance, state: dict) -> None:
        """Send a session snapshot to all connected clients."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live client list without affecting this send loop.
        for ws in list(game.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in game.clients:
                game.clients.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running frame loops."""
        for game in list(self._games.values()):
            await self._stop(game)
        logger.info("GameManager cleanup complete.")
