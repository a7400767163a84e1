"""Host-side session: frame cadence, game-over cooldown, and restarts."""

from __future__ import annotations

import enum
import logging
import math

import numpy as np

from tile_snake.config import GameConfig
from tile_snake.engine import (
    GameOver,
    GameState,
    advance,
    new_game,
    update_direction,
)
from tile_snake.snake import Direction

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a hosted game."""

    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameSession:
    """Drives one game from a fixed-rate frame signal.

    Frames arrive every ``config.frame_ms``; only every
    ``config.movement_delay``-th frame advances the snake. After a game
    over, restarts are refused until the cooldown has elapsed.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.cooldown_frames = math.ceil(
            self.config.game_over_cooldown_ms / self.config.frame_ms,
        )
        self.games_played = 0
        self._start()

    def _start(self) -> None:
        width, height = self.config.effective_board
        self.state: GameState = new_game(
            width,
            height,
            self.config.starting_length,
            rng=self.rng,
            placement_attempts=self.config.pellet_placement_attempts,
        )
        self.status = SessionStatus.PLAYING
        self.frame_count = 1
        self.final_score: int | None = None
        self._cooldown_remaining = 0
        self.games_played += 1

    @property
    def score(self) -> int:
        if self.final_score is not None:
            return self.final_score
        return self.state.score

    @property
    def on_cooldown(self) -> bool:
        return self._cooldown_remaining > 0

    @property
    def can_restart(self) -> bool:
        return self.status == SessionStatus.GAME_OVER and not self.on_cooldown

    def on_frame(self) -> bool:
        """Handle one frame. Returns True when the visible state changed."""
        changed = False
        if self.status == SessionStatus.PLAYING:
            if self.frame_count % self.config.movement_delay == 0:
                self._tick()
                changed = True
        elif self._cooldown_remaining > 0:
            self._cooldown_remaining -= 1
            changed = self._cooldown_remaining == 0
        self.frame_count += 1
        return changed

    def _tick(self) -> None:
        outcome = advance(
            self.state,
            rng=self.rng,
            placement_attempts=self.config.pellet_placement_attempts,
        )
        if isinstance(outcome, GameOver):
            self.status = SessionStatus.GAME_OVER
            self.final_score = outcome.score
            self._cooldown_remaining = self.cooldown_frames
            logger.info(
                "Game %d over with score %d.",
                self.games_played, outcome.score,
            )
            return
        self.state = outcome.state

    def steer(self, direction: Direction) -> bool:
        """Route a decoded direction to the snake. Returns True if accepted."""
        if self.status != SessionStatus.PLAYING:
            return False
        updated = update_direction(self.state, direction)
        accepted = updated is not self.state
        self.state = updated
        return accepted

    def restart(self) -> bool:
        """Start a fresh game once the game-over cooldown has passed."""
        if not self.can_restart:
            return False
        self._start()
        logger.info("Game %d started.", self.games_played)
        return True

    def snapshot(self) -> dict:
        """Return a serializable view of the session."""
        return {
            "status": self.status.value,
            "frame": self.frame_count,
            "score": self.score,
            "final_score": self.final_score,
            "on_cooldown": self.on_cooldown,
            "games_played": self.games_played,
            "state": self.state.to_dict(),
        }
