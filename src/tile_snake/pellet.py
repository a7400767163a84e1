"""Pellet placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from tile_snake.grid import Board
    from tile_snake.snake import Tile

logger = logging.getLogger(__name__)

DEFAULT_PLACEMENT_ATTEMPTS = 64


def place_pellet(
    board: Board,
    occupied: Collection[Tile],
    rng: np.random.Generator,
    max_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
) -> Tile | None:
    """Pick a uniformly random tile of *board* not in *occupied*.

    Draws uniformly over the whole board and retries on occupied tiles.
    After *max_attempts* misses it samples from the precomputed set of
    free tiles instead, so a crowded board never loops. Returns ``None``
    when every tile is occupied.
    """
    taken = set(occupied)
    for _ in range(max_attempts):
        x = int(rng.integers(board.width))
        y = int(rng.integers(board.height))
        if (x, y) not in taken:
            return x, y

    free = free_tiles(board, taken)
    if not free:
        logger.warning("No free tiles available for pellet placement.")
        return None
    logger.debug(
        "Rejection sampling exhausted after %d attempts; "
        "choosing among %d free tiles.",
        max_attempts, len(free),
    )
    return free[int(rng.integers(len(free)))]


def free_tiles(board: Board, occupied: Collection[Tile]) -> list[Tile]:
    """Return every unoccupied tile in row-major order."""
    mask = np.ones((board.height, board.width), dtype=bool)
    for x, y in occupied:
        if board.in_bounds(x, y):
            mask[y, x] = False
    ys, xs = np.nonzero(mask)
    return list(zip(xs.tolist(), ys.tolist(), strict=True))
