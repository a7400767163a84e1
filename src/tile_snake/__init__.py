"""Tile Snake: grid snake game state and rules engine."""

from tile_snake.config import GameConfig, InvalidGameConfig
from tile_snake.engine import (
    PELLET_SCORE,
    Continue,
    GameOver,
    GameState,
    advance,
    new_game,
    update_direction,
)
from tile_snake.grid import Board
from tile_snake.session import GameSession, SessionStatus
from tile_snake.snake import Direction, Snake

__all__ = [
    "PELLET_SCORE",
    "Board",
    "Continue",
    "Direction",
    "GameConfig",
    "GameOver",
    "GameSession",
    "GameState",
    "InvalidGameConfig",
    "SessionStatus",
    "Snake",
    "advance",
    "new_game",
    "update_direction",
]
