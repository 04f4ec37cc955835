# Mutable per-session tile state: snake body, food, and travel directions.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable

try:
    from .grid import Grid, InvalidUsageError, validate_direction
except ImportError:
    from grid import Grid, InvalidUsageError, validate_direction


@dataclass(frozen=True)
class Tile:
    """Read-only view of one cell, handed to renderers."""
    id: int
    row: int
    first_in_row: int
    last_in_row: int
    is_top: bool
    is_bottom: bool
    is_left_edge: bool
    is_right_edge: bool
    occupied_by_snake: bool
    has_head: bool
    has_food: bool
    travel_direction: str
    body_order: int


class TileStore:
    """
    Authoritative simulation state for one tick.

    The ordered body (head at index 0) is the primary structure; occupancy,
    body order and head flags are all derived from it.
    """

    def __init__(self, grid: Grid, body: Iterable[int] | None = None, food: int | None = None) -> None:
        self.grid = grid
        self.body: deque[int] = deque()                 # head at index 0, tail at the end
        self.occupied: set[int] = set()                 # O(1) collision lookup
        self.food: int | None = None
        self.head_detached = False
        # Direction of travel when the head entered each tile; everything starts "up".
        self.directions = {tile_id: "up" for tile_id in range(1, grid.tile_count + 1)}

        if body is None:
            body = [grid.starting_index]
        for tile_id in body:
            self._check_tile(tile_id)
            if tile_id in self.occupied:
                raise InvalidUsageError(f"Tile {tile_id} appears twice in the body.")
            self.body.append(tile_id)
            self.occupied.add(tile_id)

        if food is not None:
            self.set_food(food)

    def _check_tile(self, tile_id: int) -> None:
        if not self.grid.contains(tile_id):
            raise InvalidUsageError(f"Tile {tile_id} is outside the grid.")

    @property
    def head(self) -> int | None:
        if not self.body or self.head_detached:
            return None
        return self.body[0]

    @property
    def neck(self) -> int | None:
        return self.body[1] if len(self.body) > 1 else None

    @property
    def tail(self) -> int | None:
        return self.body[-1] if self.body else None

    @property
    def length(self) -> int:
        return len(self.body)

    def is_occupied(self, tile_id: int) -> bool:
        return tile_id in self.occupied

    def body_order(self, tile_id: int) -> int:
        """1 for the head, increasing toward the tail, 0 when unoccupied."""
        if tile_id not in self.occupied:
            return 0
        return self.body.index(tile_id) + 1

    def push_head(self, tile_id: int, direction: str) -> None:
        """Occupy `tile_id` as the new head; every other segment moves down one rank."""
        self._check_tile(tile_id)
        if tile_id in self.occupied:
            raise InvalidUsageError(f"Tile {tile_id} is already part of the snake.")
        self.body.appendleft(tile_id)
        self.occupied.add(tile_id)
        self.directions[tile_id] = validate_direction(direction)
        if self.food == tile_id:
            self.food = None

    def pop_tail(self) -> int:
        """Vacate the tail tile and return its id."""
        tail = self.body.pop()
        self.occupied.discard(tail)
        return tail

    def append_tail(self, tile_id: int, direction: str) -> None:
        """Add a new last segment behind the current tail."""
        self._check_tile(tile_id)
        if tile_id in self.occupied:
            raise InvalidUsageError(f"Tile {tile_id} is already part of the snake.")
        self.body.append(tile_id)
        self.occupied.add(tile_id)
        self.directions[tile_id] = validate_direction(direction)

    def detach_head(self) -> None:
        """The head separates from the body; the snake is left without a head."""
        self.head_detached = True

    def set_food(self, tile_id: int) -> None:
        self._check_tile(tile_id)
        if tile_id in self.occupied:
            raise InvalidUsageError(f"Food cannot be placed on snake tile {tile_id}.")
        self.food = tile_id

    def clear_food(self) -> None:
        self.food = None

    def is_full(self) -> bool:
        return len(self.occupied) >= self.grid.tile_count

    def snapshot(self) -> tuple[Tile, ...]:
        """Per-tile records ordered by id."""
        orders = {tile_id: rank for rank, tile_id in enumerate(self.body, start=1)}
        head = self.head
        tiles = []
        for geo in self.grid.tiles:
            order = orders.get(geo.id, 0)
            tiles.append(
                Tile(
                    id=geo.id,
                    row=geo.row,
                    first_in_row=geo.first_in_row,
                    last_in_row=geo.last_in_row,
                    is_top=geo.is_top,
                    is_bottom=geo.is_bottom,
                    is_left_edge=geo.is_left_edge,
                    is_right_edge=geo.is_right_edge,
                    occupied_by_snake=order > 0,
                    has_head=geo.id == head,
                    has_food=geo.id == self.food,
                    travel_direction=self.directions[geo.id],
                    body_order=order,
                )
            )
        return tuple(tiles)

    def check_invariants(self) -> None:
        """Raise AssertionError if the state is not a valid mid-game state."""
        snapshot = self.snapshot()
        occupied = [tile for tile in snapshot if tile.occupied_by_snake]
        orders = sorted(tile.body_order for tile in occupied)
        if orders != list(range(1, len(occupied) + 1)):
            raise AssertionError(f"body orders not contiguous: {orders}")
        for tile in snapshot:
            if tile.has_head != (tile.body_order == 1):
                raise AssertionError(f"head flag mismatch on tile {tile.id}")
            if tile.has_food and tile.occupied_by_snake:
                raise AssertionError(f"food on snake tile {tile.id}")
        food_tiles = [tile.id for tile in snapshot if tile.has_food]
        if len(occupied) < self.grid.tile_count and len(food_tiles) != 1:
            raise AssertionError(f"expected one food tile, found {food_tiles}")
        if len(occupied) >= self.grid.tile_count and food_tiles:
            raise AssertionError(f"food on a full board: {food_tiles}")
