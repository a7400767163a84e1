"""Game state model and the per-tick simulation step.

Every operation here takes a :class:`GameState` and returns a new one;
nothing is mutated in place. The host owns the current state and must
serialize calls to :func:`update_direction` and :func:`advance`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

import numpy as np

from tile_snake.config import InvalidGameConfig
from tile_snake.grid import Board
from tile_snake.pellet import DEFAULT_PLACEMENT_ATTEMPTS, place_pellet
from tile_snake.snake import Direction, Snake, Tile

logger = logging.getLogger(__name__)

PELLET_SCORE = 100
INITIAL_HEADING = Direction.RIGHT

_default_rng = np.random.default_rng()


@dataclass(frozen=True)
class GameState:
    """Authoritative snapshot of one game in progress."""

    board: Board
    snake: Snake
    pellet: Tile | None
    score: int = 0
    move_pending: bool = False
    ticks: int = 0

    @property
    def body(self) -> tuple[Tile, ...]:
        """Head-first body tiles, for rendering."""
        return self.snake.body

    def to_dict(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "ticks": self.ticks,
            "score": self.score,
            "move_pending": self.move_pending,
            "board": self.board.to_dict(),
            "snake": self.snake.to_dict(),
            "pellet": list(self.pellet) if self.pellet is not None else None,
        }


@dataclass(frozen=True)
class Continue:
    """The snake survived the tick."""

    state: GameState


@dataclass(frozen=True)
class GameOver:
    """The snake ran into itself; carries the final score."""

    score: int


Outcome = Continue | GameOver


def new_game(
    board_width: int,
    board_height: int,
    starting_length: int,
    rng: np.random.Generator | None = None,
    placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
) -> GameState:
    """Build the initial state: centred snake, fresh pellet, zero score."""
    board = Board(board_width, board_height)
    if starting_length < 1:
        raise InvalidGameConfig("starting_length must be at least 1.")
    if starting_length > board.width:
        raise InvalidGameConfig(
            f"starting_length {starting_length} does not fit a board "
            f"{board.width} tiles wide.",
        )
    if starting_length >= board.tile_count:
        raise InvalidGameConfig(
            "starting_length leaves no free tile for a pellet.",
        )

    rng = rng if rng is not None else _default_rng
    snake = Snake.spawn(board, starting_length, INITIAL_HEADING)
    pellet = place_pellet(board, snake.body, rng, placement_attempts)
    logger.debug(
        "New %dx%d game, snake at %s, pellet at %s.",
        board.width, board.height, snake.head, pellet,
    )
    return GameState(board=board, snake=snake, pellet=pellet)


def update_direction(state: GameState, direction: Direction) -> GameState:
    """Accept at most one non-reversing heading change per advance."""
    if state.move_pending:
        return state
    if state.snake.is_reversal(direction):
        return state
    return replace(
        state, snake=state.snake.turned(direction), move_pending=True,
    )


def advance(
    state: GameState,
    rng: np.random.Generator | None = None,
    placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
) -> Outcome:
    """Move the snake one tile and resolve collision and consumption."""
    snake = state.snake
    hx, hy = snake.head
    dx, dy = snake.heading.value
    new_head = state.board.wrap(hx + dx, hy + dy)

    # Cut back using the pre-tick length; growth shows up from the next tick.
    moved = snake.moved_to(new_head)

    if moved.has_duplicates():
        logger.info(
            "Snake collided with itself at %s after %d ticks, score %d.",
            new_head, state.ticks + 1, state.score,
        )
        return GameOver(state.score)

    score = state.score
    pellet = state.pellet
    if new_head == pellet:
        score += PELLET_SCORE
        moved = moved.grown()
        rng = rng if rng is not None else _default_rng
        pellet = place_pellet(
            state.board,
            set(snake.body) | set(moved.body),
            rng,
            placement_attempts,
        )

    return Continue(
        replace(
            state,
            snake=moved,
            pellet=pellet,
            score=score,
            move_pending=False,
            ticks=state.ticks + 1,
        ),
    )
