# Shared helpers for hosts: board encoding, text rendering, a random policy, and the headless loop.
from __future__ import annotations

import random
import threading
import time
from typing import Callable, Sequence

import numpy as np

try:
    from .game_logic import SnakeSession
    from .grid import DIRECTIONS, Grid
    from .tile_store import Tile
except ImportError:
    from game_logic import SnakeSession
    from grid import DIRECTIONS, Grid
    from tile_store import Tile


EMPTY_VALUE = 0.0
FOOD_VALUE = 0.5
BODY_VALUE = -0.5
HEAD_VALUE = 1.0


def encode_board(tiles: Sequence[Tile], row_size: int) -> np.ndarray:
    """
    Board as a (rows, row_size) float array:
    - 0.0: empty
    - 0.5: food
    - -0.5: snake body
    - 1.0: snake head
    """
    board = np.full(len(tiles), EMPTY_VALUE, dtype=np.float32)
    for tile in tiles:
        if tile.has_head:
            board[tile.id - 1] = HEAD_VALUE
        elif tile.occupied_by_snake:
            board[tile.id - 1] = BODY_VALUE
        elif tile.has_food:
            board[tile.id - 1] = FOOD_VALUE
    return board.reshape(-1, row_size)


def format_board(tiles: Sequence[Tile], row_size: int) -> str:
    """
    Text board, top row first:
    . = empty
    F = food
    H = head
    o = body
    """
    symbols = []
    for tile in tiles:
        if tile.has_head:
            symbols.append("H")
        elif tile.occupied_by_snake:
            symbols.append("o")
        elif tile.has_food:
            symbols.append("F")
        else:
            symbols.append(".")

    lines = []
    for start in range(0, len(symbols), row_size):
        row_number = start // row_size + 1
        lines.append(f"{row_number:2d} {' '.join(symbols[start : start + row_size])}")
    return "\n".join(lines)


def body_curve(tiles: Sequence[Tile], tile_id: int) -> str:
    """
    Which corner a body segment bends around, judged from its own travel
    direction and that of the segment one step closer to the head.
    Returns '' for straight segments, the head, and unoccupied tiles.
    """
    by_order = {tile.body_order: tile for tile in tiles if tile.occupied_by_snake}
    current = tiles[tile_id - 1]
    if len(by_order) < 2 or current.body_order < 2:
        return ""
    ahead = by_order.get(current.body_order - 1)
    if ahead is None:
        return ""

    pair = (current.travel_direction, ahead.travel_direction)
    if pair in (("down", "left"), ("right", "up")):
        return "top-left"
    if pair in (("down", "right"), ("left", "up")):
        return "top-right"
    if pair in (("up", "left"), ("right", "down")):
        return "bottom-left"
    if pair in (("up", "right"), ("left", "down")):
        return "bottom-right"
    return ""


def safe_directions(session: SnakeSession) -> list[str]:
    """Directions that keep the head on the board and off the body this tick."""
    store = session.store
    head = store.head
    if head is None:
        return []
    result = []
    for direction in DIRECTIONS:
        next_id = store.grid.step(head, direction)
        if next_id is not None and not store.is_occupied(next_id):
            result.append(direction)
    return result


def random_policy(rng: random.Random | None = None) -> Callable[[SnakeSession], str]:
    """Pick a random safe direction, or any direction if none is safe (the game is lost anyway)."""
    chooser = rng if rng is not None else random.Random()

    def choose(session: SnakeSession) -> str:
        options = safe_directions(session)
        if not options:
            return chooser.choice(DIRECTIONS)
        return chooser.choice(options)

    return choose


def greedy_policy(session: SnakeSession) -> str:
    """Head for the food along the safe direction with the smallest Manhattan distance."""
    store = session.store
    options = safe_directions(session)
    if not options:
        return session.direction or DIRECTIONS[0]
    if store.food is None:
        return options[0]

    grid: Grid = store.grid
    food = grid.geometry(store.food)
    food_col = store.food - food.first_in_row

    def distance(direction: str) -> int:
        next_id = grid.step(store.head, direction)
        geo = grid.geometry(next_id)
        return abs(geo.row - food.row) + abs((next_id - geo.first_in_row) - food_col)

    return min(options, key=distance)


def run_automatic(
    session: SnakeSession,
    choose_direction: Callable[[SnakeSession], str],
    max_ticks: int = 10_000,
    interval_s: float = 0.0,
    render_step: Callable[[SnakeSession, int], None] | None = None,
    stop_flag: threading.Event | None = None,
) -> tuple[str, int, int]:
    """Drive a session at a fixed cadence until it ends. Returns (terminal, score, ticks)."""
    if max_ticks <= 0:
        raise ValueError("max_ticks must be > 0")

    for step in range(max_ticks):
        if stop_flag and stop_flag.is_set():
            break

        session.set_direction(choose_direction(session))
        if session.config.automatic:
            session.tick()

        if render_step is not None:
            render_step(session, step)

        if session.is_over:
            break

        if interval_s > 0:
            time.sleep(interval_s)

    return session.terminal, session.score, session.ticks
