"""Tests for the game state model and simulation step."""

import json
from dataclasses import replace

import numpy as np
import pytest

from tile_snake.config import InvalidGameConfig
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
from tile_snake.snake import Direction, Snake


def _state(body, length=None, heading=Direction.RIGHT, pellet=(0, 0),
           width=10, height=10, score=0):
    return GameState(
        board=Board(width, height),
        snake=Snake(
            body=tuple(body),
            length=length if length is not None else len(body),
            heading=heading,
        ),
        pellet=pellet,
        score=score,
    )


class TestNewGame:
    def test_initial_state(self):
        state = new_game(10, 10, 3, rng=np.random.default_rng(0))
        assert state.body == ((5, 5), (4, 5), (3, 5))
        assert state.snake.heading == Direction.RIGHT
        assert state.score == 0
        assert state.ticks == 0
        assert not state.move_pending

    def test_pellet_placed_off_body(self):
        for seed in range(20):
            state = new_game(6, 4, 5, rng=np.random.default_rng(seed))
            assert state.pellet is not None
            assert state.board.in_bounds(*state.pellet)
            assert state.pellet not in state.body

    def test_non_positive_board_rejected(self):
        with pytest.raises(InvalidGameConfig):
            new_game(0, 10, 3)
        with pytest.raises(InvalidGameConfig):
            new_game(10, -2, 3)

    def test_zero_length_rejected(self):
        with pytest.raises(InvalidGameConfig, match="at least 1"):
            new_game(10, 10, 0)

    def test_length_wider_than_board_rejected(self):
        with pytest.raises(InvalidGameConfig, match="wide"):
            new_game(4, 10, 5)

    def test_length_filling_board_rejected(self):
        with pytest.raises(InvalidGameConfig, match="free tile"):
            new_game(3, 1, 3)

    def test_smallest_playable_board(self):
        state = new_game(2, 1, 1, rng=np.random.default_rng(0))
        assert state.body == ((1, 0),)
        assert state.pellet == (0, 0)

    def test_same_seed_same_state(self):
        a = new_game(10, 10, 3, rng=np.random.default_rng(7))
        b = new_game(10, 10, 3, rng=np.random.default_rng(7))
        assert a == b


class TestUpdateDirection:
    def test_accepts_turn(self):
        state = _state([(5, 5), (4, 5), (3, 5)])
        updated = update_direction(state, Direction.UP)
        assert updated.snake.heading == Direction.UP
        assert updated.move_pending

    def test_rejects_reversal(self):
        state = _state([(5, 5), (4, 5), (3, 5)])
        updated = update_direction(state, Direction.LEFT)
        assert updated is state
        assert updated.snake.heading == Direction.RIGHT

    def test_only_first_change_per_tick(self):
        state = _state([(5, 5), (4, 5), (3, 5)])
        state = update_direction(state, Direction.UP)
        state = update_direction(state, Direction.LEFT)
        assert state.snake.heading == Direction.UP

    def test_gate_rearmed_by_advance(self):
        state = update_direction(_state([(5, 5), (4, 5)]), Direction.UP)
        outcome = advance(state)
        assert isinstance(outcome, Continue)
        assert not outcome.state.move_pending
        updated = update_direction(outcome.state, Direction.LEFT)
        assert updated.snake.heading == Direction.LEFT

    def test_does_not_mutate_input(self):
        state = _state([(5, 5), (4, 5)])
        update_direction(state, Direction.DOWN)
        assert state.snake.heading == Direction.RIGHT
        assert not state.move_pending


class TestAdvanceMovement:
    def test_example_scenario(self):
        state = _state([(5, 5), (4, 5), (3, 5)])
        outcome = advance(state)
        assert isinstance(outcome, Continue)
        assert outcome.state.body == ((6, 5), (5, 5), (4, 5))
        assert outcome.state.ticks == 1

    def test_wraps_right_edge(self):
        state = _state([(9, 3), (8, 3)])
        outcome = advance(state)
        assert outcome.state.snake.head == (0, 3)

    def test_wraps_top_edge(self):
        state = _state([(4, 0), (4, 1)], heading=Direction.UP)
        outcome = advance(state)
        assert outcome.state.snake.head == (4, 9)

    def test_wraps_left_and_bottom(self):
        state = _state([(0, 2), (1, 2)], heading=Direction.LEFT)
        assert advance(state).state.snake.head == (9, 2)
        state = _state([(3, 9), (3, 8)], heading=Direction.DOWN)
        assert advance(state).state.snake.head == (3, 0)

    def test_body_catches_up_to_length(self):
        state = _state([(5, 5)], length=3)
        state = advance(state).state
        assert len(state.body) == 2
        state = advance(state).state
        assert len(state.body) == 3
        state = advance(state).state
        assert len(state.body) == 3

    def test_input_state_unchanged(self):
        state = _state([(5, 5), (4, 5), (3, 5)])
        advance(state)
        assert state.body == ((5, 5), (4, 5), (3, 5))
        assert state.ticks == 0


class TestAdvancePellet:
    def test_consumption(self):
        state = _state([(5, 5), (4, 5), (3, 5)], pellet=(6, 5))
        outcome = advance(state, rng=np.random.default_rng(0))
        assert isinstance(outcome, Continue)
        after = outcome.state
        assert after.score == PELLET_SCORE
        assert after.snake.length == 4
        assert after.pellet is not None
        assert after.pellet not in after.body
        assert after.pellet not in state.body

    def test_growth_starts_next_tick(self):
        state = _state([(5, 5), (4, 5), (3, 5)], pellet=(6, 5))
        eaten = advance(state, rng=np.random.default_rng(0)).state
        # Cut back with the pre-tick length on the consumption tick.
        assert eaten.body == ((6, 5), (5, 5), (4, 5))
        # Move the replacement pellet out of the way of the next step.
        grown = advance(replace(eaten, pellet=(0, 0))).state
        assert grown.body == ((7, 5), (6, 5), (5, 5), (4, 5))

    def test_score_accumulates(self):
        state = _state([(5, 5), (4, 5)], pellet=(6, 5), score=300)
        outcome = advance(state, rng=np.random.default_rng(0))
        assert outcome.state.score == 400

    def test_no_free_tile_leaves_pellet_absent(self):
        state = _state([(1, 0), (0, 0)], pellet=(2, 0), width=3, height=1)
        outcome = advance(state, rng=np.random.default_rng(0))
        assert isinstance(outcome, Continue)
        assert outcome.state.pellet is None
        assert outcome.state.score == PELLET_SCORE
        # Play continues without a pellet.
        assert isinstance(advance(outcome.state), Continue)


class TestAdvanceCollision:
    def test_self_collision_is_game_over(self):
        body = [(5, 5), (5, 6), (4, 6), (4, 5), (4, 4)]
        state = _state(body, heading=Direction.LEFT, score=500)
        outcome = advance(state)
        assert outcome == GameOver(500)

    def test_game_over_does_not_mutate(self):
        body = [(5, 5), (5, 6), (4, 6), (4, 5), (4, 4)]
        state = _state(body, heading=Direction.LEFT, score=200)
        advance(state)
        assert state.body == tuple(body)
        assert state.score == 200

    def test_chasing_tail_is_safe(self):
        # The tail tile is vacated in the same tick the head enters it.
        body = [(5, 5), (5, 6), (4, 6), (4, 5)]
        state = _state(body, heading=Direction.LEFT)
        outcome = advance(state)
        assert isinstance(outcome, Continue)
        assert outcome.state.body == ((4, 5), (5, 5), (5, 6), (4, 6))

    def test_collision_across_wrap(self):
        body = [(0, 5), (0, 6), (9, 6), (9, 5), (9, 4)]
        state = _state(body, heading=Direction.LEFT, score=100)
        assert advance(state) == GameOver(100)


class TestAdvanceDeterminism:
    def test_same_rng_same_outcome(self):
        state = _state([(5, 5), (4, 5), (3, 5)], pellet=(6, 5))
        a = advance(state, rng=np.random.default_rng(9))
        b = advance(state, rng=np.random.default_rng(9))
        assert a == b

    def test_same_seed_same_game(self):
        actions = [
            Direction.UP, Direction.RIGHT, Direction.DOWN,
            Direction.DOWN, Direction.LEFT,
        ]
        assert self._run(5, actions) == self._run(5, actions)

    @staticmethod
    def _run(seed, actions):
        rng = np.random.default_rng(seed)
        state = new_game(12, 12, 4, rng=rng)
        for action in actions:
            state = update_direction(state, action)
            outcome = advance(state, rng=rng)
            if isinstance(outcome, GameOver):
                return outcome
            state = outcome.state
        return state


class TestInvariants:
    def test_random_play_keeps_invariants(self):
        rng = np.random.default_rng(2024)
        directions = list(Direction)
        state = new_game(8, 8, 3, rng=rng)
        for _ in range(2_000):
            state = update_direction(
                state, directions[int(rng.integers(4))],
            )
            outcome = advance(state, rng=rng)
            if isinstance(outcome, GameOver):
                assert outcome.score == state.score
                state = new_game(8, 8, 3, rng=rng)
                continue
            ate = outcome.state.score > state.score
            state = outcome.state
            assert len(set(state.body)) == len(state.body)
            assert state.pellet is None or state.pellet not in state.body
            if ate:
                assert len(state.body) == state.snake.length - 1
            else:
                assert len(state.body) == min(
                    state.snake.length, 3 + state.ticks,
                )
            assert all(state.board.in_bounds(x, y) for x, y in state.body)


class TestSerialization:
    def test_to_dict_json(self):
        state = new_game(10, 10, 3, rng=np.random.default_rng(1))
        d = state.to_dict()
        assert json.loads(json.dumps(d)) == d
        assert d["snake"]["body"] == [[5, 5], [4, 5], [3, 5]]
        assert d["board"] == {"width": 10, "height": 10}
        assert d["score"] == 0
