"""Command-line tools for Tile Snake."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

import numpy as np

from tile_snake.config import GameConfig
from tile_snake.engine import GameOver, advance, new_game, update_direction
from tile_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class SimulationResult:
    """Aggregate results from a batch of headless games."""

    games: int
    scores: list[int]
    ticks: list[int]
    collisions: int

    def summary(self) -> str:
        return (
            f"Simulated {self.games} game(s): "
            f"{self.collisions} ended in collision | "
            f"mean score {np.mean(self.scores):.1f}, "
            f"best {max(self.scores)}, "
            f"mean ticks {np.mean(self.ticks):.1f}"
        )


def simulate(
    *,
    games: int = 10,
    width: int = 17,
    height: int = 15,
    starting_length: int = 5,
    max_ticks: int = 1_000,
    turn_chance: float = 0.2,
    seed: int | None = None,
) -> SimulationResult:
    """Play *games* games with a random steering policy.

    Each tick the policy requests a random turn with probability
    *turn_chance*. A game stops on collision or after *max_ticks*.
    """
    if games < 1:
        raise ValueError("games must be at least 1.")
    rng = np.random.default_rng(seed)
    scores: list[int] = []
    ticks: list[int] = []
    collisions = 0

    for _ in range(games):
        state = new_game(width, height, starting_length, rng=rng)
        for _ in range(max_ticks):
            if rng.random() < turn_chance:
                choice = _DIRECTIONS[int(rng.integers(len(_DIRECTIONS)))]
                state = update_direction(state, choice)
            outcome = advance(state, rng=rng)
            if isinstance(outcome, GameOver):
                collisions += 1
                break
            state = outcome.state
        scores.append(state.score)
        ticks.append(state.ticks)

    return SimulationResult(
        games=games, scores=scores, ticks=ticks, collisions=collisions,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tile-snake",
        description="Tile Snake simulation and configuration tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play headless games with random steering.",
    )
    sim_p.add_argument("--games", type=int, default=10)
    sim_p.add_argument("--width", type=int, default=17)
    sim_p.add_argument("--height", type=int, default=15)
    sim_p.add_argument("--starting-length", type=int, default=5)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)
    sim_p.add_argument("--turn-chance", type=float, default=0.2)
    sim_p.add_argument("--seed", type=int, default=None)

    # --- config ---
    cfg_p = sub.add_parser(
        "config", help="Write the default game config as JSON.",
    )
    cfg_p.add_argument("output", help="Path for the config file.")

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    try:
        result = simulate(
            games=args.games,
            width=args.width,
            height=args.height,
            starting_length=args.starting_length,
            max_ticks=args.max_ticks,
            turn_chance=args.turn_chance,
            seed=args.seed,
        )
    except ValueError as exc:
        logger.error("Invalid simulation settings: %s", exc)
        return 2
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    GameConfig().save(args.output)
    print(f"Wrote default config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``tile-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
