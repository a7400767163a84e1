"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from tile_snake.server.game_manager import GameManager
from tile_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


def _parse_direction(raw: str) -> Direction | None:
    """Decode a ``{"direction": ...}`` message; anything else yields None."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None

    direction_str = msg.get("direction")
    if not isinstance(direction_str, str):
        return None
    return _DIRECTION_MAP.get(direction_str.lower())


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Send directions, receive a session snapshot after every change.

    Once a finished game's cooldown has passed, any message restarts it.
    """
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.clients.append(websocket)
    logger.info("Client connected to game %s.", game_id)

    # Send initial state snapshot so the client gets immediate feedback.
    async with game.lock:
        state = game.session.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()

            async with game.lock:
                can_restart = game.session.can_restart
            try:
                if can_restart:
                    try:
                        await manager.restart(game_id)
                    except ValueError:
                        logger.debug("Game %s already restarted.", game_id)
                    continue

                direction = _parse_direction(raw)
                if direction is not None:
                    await manager.steer(game_id, direction)
            except KeyError:
                logger.info("Game %s removed while client connected.", game_id)
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.close(code=4004, reason="Game not found.")
                return
    except WebSocketDisconnect:
        logger.info("Client disconnected from game %s.", game_id)
    finally:
        if websocket in game.clients:
            game.clients.remove(websocket)
