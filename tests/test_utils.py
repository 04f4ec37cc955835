"""
Tests for utils.py and simulate.py - host helpers and the headless CLI.
"""

import random
import threading
from unittest.mock import Mock

import numpy as np

from game_logic import LOST, SessionConfig, SnakeSession
from grid import Grid
from simulate import parse_args, simulate
from tile_store import TileStore
from utils import (
    BODY_VALUE,
    FOOD_VALUE,
    HEAD_VALUE,
    body_curve,
    encode_board,
    format_board,
    greedy_policy,
    random_policy,
    run_automatic,
    safe_directions,
)


def fixed_food_session(food, mode="hard"):
    rng = Mock()
    rng.randint.side_effect = [food]
    return SnakeSession(SessionConfig(size="small", mode=mode), rng=rng)


class TestRendering:

    def test_encode_board_shape_and_values(self):
        grid = Grid.from_size("small")
        tiles = TileStore(grid, body=[40, 48], food=1).snapshot()
        board = encode_board(tiles, grid.row_size)
        assert board.shape == (9, 8)
        assert board.dtype == np.float32
        assert board[4, 7] == HEAD_VALUE
        assert board[5, 7] == BODY_VALUE
        assert board[0, 0] == FOOD_VALUE
        assert np.count_nonzero(board) == 3

    def test_format_board(self):
        grid = Grid.from_size("small")
        text = format_board(TileStore(grid, body=[40, 48], food=1).snapshot(), grid.row_size)
        lines = text.splitlines()
        assert len(lines) == 9
        assert lines[0] == " 1 F . . . . . . ."
        assert lines[4].endswith("H")
        assert lines[5].endswith("o")

    def test_body_curve_at_a_turn(self):
        grid = Grid.from_size("small")
        store = TileStore(grid, body=[31, 39, 40], food=1)
        store.directions.update({39: "left", 40: "left"})
        tiles = store.snapshot()
        assert body_curve(tiles, 39) == "top-right"
        assert body_curve(tiles, 40) == ""
        assert body_curve(tiles, 31) == ""
        assert body_curve(tiles, 1) == ""


class TestPolicies:

    def test_safe_directions_skip_walls_and_body(self):
        session = fixed_food_session(1)
        assert safe_directions(session) == ["up", "down", "left"]

        session.store = TileStore(session.grid, body=[2, 10, 9, 17], food=72)
        assert safe_directions(session) == ["left", "right"]

    def test_random_policy_picks_a_safe_direction(self):
        session = fixed_food_session(1)
        choose = random_policy(random.Random(0))
        for _ in range(20):
            assert choose(session) in ("up", "down", "left")

    def test_greedy_policy_heads_for_food(self):
        session = fixed_food_session(8)
        assert greedy_policy(session) == "up"
        session.store.clear_food()
        session.store.set_food(37)
        assert greedy_policy(session) == "left"


class TestRunAutomatic:

    def test_runs_until_the_head_leaves_the_board(self):
        session = fixed_food_session(1)
        terminal, final_score, ticks = run_automatic(session, lambda s: "right", max_ticks=10)
        assert (terminal, final_score, ticks) == ("lost", 10, 1)
        assert session.status == LOST

    def test_manual_mode_ticks_through_set_direction(self):
        session = fixed_food_session(1, mode="easy")
        terminal, _, ticks = run_automatic(session, lambda s: "up", max_ticks=10)
        assert terminal == "lost"
        assert ticks == 5

    def test_stops_at_max_ticks(self):
        session = fixed_food_session(1)
        moves = iter(["up", "down"] * 10)
        terminal, _, ticks = run_automatic(session, lambda s: next(moves), max_ticks=4)
        assert terminal == "none"
        assert ticks == 4

    def test_stop_flag_halts_before_the_first_tick(self):
        stop = threading.Event()
        stop.set()
        session = fixed_food_session(1)
        render = Mock()
        assert run_automatic(session, lambda s: "up", stop_flag=stop, render_step=render)[2] == 0
        render.assert_not_called()

    def test_render_callback_sees_every_tick(self):
        session = fixed_food_session(1)
        render = Mock()
        run_automatic(session, lambda s: "up", max_ticks=3, render_step=render)
        assert render.call_count == 3


class TestSimulateCli:

    def test_simulate_reports_statistics(self, capsys):
        stats = simulate(size="small", games=3, max_ticks=60, seed=9)
        assert set(stats) == {"score", "length", "ticks"}
        assert stats["score"].shape == (3,)
        assert np.all(stats["score"] >= 0)
        out = capsys.readouterr().out
        assert "Wins:" in out
        assert "Score" in out

    def test_greedy_simulation_with_board(self, capsys):
        simulate(size="small", games=1, max_ticks=5, seed=2, policy="greedy", show_board=True)
        assert "Tick 1" in capsys.readouterr().out

    def test_parse_args_defaults(self):
        args = parse_args([])
        assert args.size == "small"
        assert args.mode == "hard"
        assert args.games == 10
        assert args.policy == "random"
        assert args.show_board is False

    def test_parse_args_overrides(self):
        args = parse_args(["--size", "large", "--games", "2", "--seed", "5", "--show-board"])
        assert (args.size, args.games, args.seed, args.show_board) == ("large", 2, 5, True)
