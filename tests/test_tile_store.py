"""
Tests for tile_store.py - body bookkeeping and snapshots.
"""

import ast
import inspect
import textwrap

import pytest

from grid import Grid, InvalidUsageError
from tile_store import Tile, TileStore


@pytest.fixture
def grid():
    return Grid.from_size("small")


def test_default_body_is_the_starting_tile(grid):
    store = TileStore(grid)
    assert list(store.body) == [40]
    assert store.head == 40
    assert store.tail == 40
    assert store.neck is None
    assert store.length == 1


def test_body_order_follows_the_body(grid):
    store = TileStore(grid, body=[24, 32, 40])
    assert store.body_order(24) == 1
    assert store.body_order(32) == 2
    assert store.body_order(40) == 3
    assert store.body_order(16) == 0
    assert store.neck == 32


def test_duplicate_body_tile_is_rejected(grid):
    with pytest.raises(InvalidUsageError):
        TileStore(grid, body=[24, 32, 24])


def test_body_outside_grid_is_rejected(grid):
    with pytest.raises(InvalidUsageError):
        TileStore(grid, body=[0])


def test_food_on_the_snake_is_rejected(grid):
    with pytest.raises(InvalidUsageError):
        TileStore(grid, body=[24, 32], food=32)


def test_push_head_then_pop_tail(grid):
    store = TileStore(grid, body=[24, 32, 40], food=16)
    store.push_head(16, "up")
    assert store.food is None
    assert store.pop_tail() == 40
    assert list(store.body) == [16, 24, 32]
    assert not store.is_occupied(40)
    assert store.directions[16] == "up"


def test_snapshot_is_ordered_and_complete(grid):
    store = TileStore(grid, body=[24, 32, 40], food=1)
    tiles = store.snapshot()
    assert len(tiles) == 72
    assert all(isinstance(tile, Tile) for tile in tiles)
    assert [tile.id for tile in tiles] == list(range(1, 73))

    assert tiles[23].has_head and tiles[23].body_order == 1
    assert tiles[31].occupied_by_snake and tiles[31].body_order == 2
    assert tiles[39].body_order == 3 and not tiles[39].has_head
    assert tiles[0].has_food and not tiles[0].occupied_by_snake
    assert tiles[15].body_order == 0
    assert all(tile.travel_direction == "up" for tile in tiles)


def test_snapshot_is_read_only(grid):
    tile = TileStore(grid).snapshot()[0]
    with pytest.raises(AttributeError):
        tile.has_food = True


def test_detached_head_leaves_no_head(grid):
    store = TileStore(grid, body=[8, 16], food=1)
    store.detach_head()
    assert store.head is None
    tiles = store.snapshot()
    assert not any(tile.has_head for tile in tiles)
    assert tiles[7].occupied_by_snake


def test_check_invariants_passes_on_a_valid_state(grid):
    TileStore(grid, body=[24, 32, 40], food=1).check_invariants()


def test_check_invariants_requires_food(grid):
    with pytest.raises(AssertionError):
        TileStore(grid, body=[24, 32, 40]).check_invariants()


def test_is_full(grid):
    store = TileStore(grid, body=range(1, 72))
    assert not store.is_full()
    store.append_tail(72, "left")
    assert store.is_full()


def test_check_invariants_has_no_assert_statements():
    # `python -O` strips assert statements; the check must raise explicitly.
    source = inspect.getsource(TileStore.check_invariants)
    tree = ast.parse(textwrap.dedent(source))
    assert not [node for node in ast.walk(tree) if isinstance(node, ast.Assert)]


def test_check_invariants_rejects_food_on_the_snake(grid):
    store = TileStore(grid, body=[24, 32, 40], food=1)
    store.food = 32
    with pytest.raises(AssertionError, match="food on snake tile 32"):
        store.check_invariants()


def test_check_invariants_rejects_food_on_a_full_board(grid):
    store = TileStore(grid, body=range(1, 73))
    store.food = 72
    with pytest.raises(AssertionError, match="food on"):
        store.check_invariants()
