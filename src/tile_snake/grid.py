"""Board extents for the snake game."""

from __future__ import annotations

from dataclasses import dataclass

from tile_snake.config import InvalidGameConfig


@dataclass(frozen=True)
class Board:
    """Fixed-size toroidal board measured in tiles.

    Coordinates use (x, y) ordering: x grows to the right, y grows
    downwards. Leaving one edge re-enters from the opposite edge.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise InvalidGameConfig(
                "Board dimensions must be positive, "
                f"got {self.width}x{self.height}.",
            )

    @classmethod
    def for_viewport(
        cls, px_width: int, px_height: int, tile_size: int,
    ) -> Board:
        """Build the largest board of whole tiles fitting a display surface."""
        if tile_size < 1:
            raise InvalidGameConfig("tile_size must be at least 1.")
        return cls(px_width // tile_size, px_height // tile_size)

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> tuple[int, int]:
        """Return the centre tile (rounded down)."""
        return self.width // 2, self.height // 2

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the board."""
        return 0 <= x < self.width and 0 <= y < self.height

    def wrap(self, x: int, y: int) -> tuple[int, int]:
        """Wrap coordinates around the board edges."""
        return x % self.width, y % self.height

    def to_dict(self) -> dict:
        """Serialize board extents to a dictionary."""
        return {"width": self.width, "height": self.height}
