"""Snake representation and heading logic."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tile_snake.grid import Board

Tile = tuple[int, int]


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def opposite(self) -> Direction:
        """Return the direction that would cause an instant 180° reversal."""
        dx, dy = self.value
        return Direction((-dx, -dy))


@dataclass(frozen=True)
class Snake:
    """A snake as a head-first tuple of (x, y) body segments.

    ``length`` is the target size: after each move the body is cut
    back to at most this many segments.
    """

    body: tuple[Tile, ...]
    length: int
    heading: Direction = Direction.RIGHT

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("Snake length must be at least 1.")
        if not self.body:
            raise ValueError("Snake body must contain a head.")

    @classmethod
    def spawn(
        cls,
        board: Board,
        length: int,
        heading: Direction = Direction.RIGHT,
    ) -> Snake:
        """Create a snake centred on *board*, trailing away from *heading*."""
        dx, dy = heading.value
        cx, cy = board.center
        body = tuple(
            board.wrap(cx - dx * i, cy - dy * i) for i in range(length)
        )
        return cls(body=body, length=length, heading=heading)

    @property
    def head(self) -> Tile:
        """Return the head coordinate."""
        return self.body[0]

    def is_reversal(self, direction: Direction) -> bool:
        return direction == self.heading.opposite

    def turned(self, direction: Direction) -> Snake:
        return replace(self, heading=direction)

    def moved_to(self, new_head: Tile) -> Snake:
        """Prepend *new_head* and drop tail segments beyond ``length``."""
        return replace(self, body=((new_head,) + self.body)[: self.length])

    def grown(self, segments: int = 1) -> Snake:
        """Raise the target length; the body catches up on later moves."""
        return replace(self, length=self.length + segments)

    def occupies(self, x: int, y: int) -> bool:
        """Check whether the snake occupies a given tile."""
        return (x, y) in self.body

    def has_duplicates(self) -> bool:
        """Check whether any two body segments share a tile."""
        return len(set(self.body)) < len(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "length": self.length,
            "heading": list(self.heading.value),
        }
