"""Game configuration and the invalid-configuration error."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class InvalidGameConfig(ValueError):
    """Raised when a game is configured with unrepresentable values."""


@dataclass(frozen=True)
class GameConfig:
    """Tunable constants for a hosted game session.

    Supports JSON serialization so a setup can be shared or replayed.
    """

    # Board sizing: the viewport is divided into square tiles unless
    # an explicit board size is given.
    tile_size: int = 40
    viewport_width: int = 700
    viewport_height: int = 600
    board_width: int | None = None
    board_height: int | None = None

    # Snake
    starting_length: int = 5

    # Cadence: one frame every frame_ms, one move every movement_delay frames.
    frame_ms: int = 32
    movement_delay: int = 6
    game_over_cooldown_ms: int = 2000

    # Pellet placement
    pellet_placement_attempts: int = 64

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.tile_size < 1:
            raise InvalidGameConfig("tile_size must be at least 1.")
        if self.frame_ms < 1:
            raise InvalidGameConfig("frame_ms must be at least 1.")
        if self.movement_delay < 1:
            raise InvalidGameConfig("movement_delay must be at least 1.")
        if self.game_over_cooldown_ms < 0:
            raise InvalidGameConfig("game_over_cooldown_ms must be >= 0.")
        if self.pellet_placement_attempts < 1:
            raise InvalidGameConfig(
                "pellet_placement_attempts must be at least 1.",
            )
        if self.starting_length < 1:
            raise InvalidGameConfig("starting_length must be at least 1.")
        width, height = self.effective_board
        if width < 1 or height < 1:
            raise InvalidGameConfig(
                f"Board must be at least 1x1 tiles, got {width}x{height}.",
            )

    @property
    def effective_board(self) -> tuple[int, int]:
        """Resolve (width, height) in tiles."""
        width = (
            self.board_width if self.board_width is not None
            else self.viewport_width // self.tile_size
        )
        height = (
            self.board_height if self.board_height is not None
            else self.viewport_height // self.tile_size
        )
        return width, height

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
