# Fixed board geometry: size presets, directions, and per-tile edge flags.
from __future__ import annotations

from dataclasses import dataclass
import math


DIRECTIONS = ("up", "down", "left", "right")
REVERSE_DIRECTION = {"up": "down", "down": "up", "left": "right", "right": "left"}


class InvalidUsageError(ValueError):
    """Caller broke the contract (bad size, bad direction, closed session...)."""


@dataclass(frozen=True)
class GridPreset:
    tile_count: int
    row_size: int
    starting_index: int


GRID_PRESETS = {
    "small": GridPreset(tile_count=72, row_size=8, starting_index=40),
    "medium": GridPreset(tile_count=168, row_size=12, starting_index=84),
    "large": GridPreset(tile_count=256, row_size=16, starting_index=128),
}
SIZE_CHOICES = tuple(GRID_PRESETS)


@dataclass(frozen=True)
class TileGeometry:
    """Position data for one cell; never changes after the grid is built."""
    id: int
    row: int
    first_in_row: int
    last_in_row: int
    is_top: bool
    is_bottom: bool
    is_left_edge: bool
    is_right_edge: bool


def validate_direction(direction: str) -> str:
    if direction not in REVERSE_DIRECTION:
        raise InvalidUsageError(f"Unknown direction: {direction!r}")
    return direction


class Grid:
    """Row-major board of tiles numbered 1..tile_count, tile 1 at the top-left."""

    def __init__(self, tile_count: int, row_size: int, starting_index: int | None = None) -> None:
        if tile_count <= 0 or row_size <= 0:
            raise InvalidUsageError("tile_count and row_size must be > 0.")
        if tile_count % row_size != 0:
            raise InvalidUsageError(f"tile_count {tile_count} is not a multiple of row_size {row_size}.")

        self.tile_count = tile_count
        self.row_size = row_size
        self.row_count = tile_count // row_size
        if starting_index is None:
            starting_index = (tile_count + row_size) // 2
        if not 1 <= starting_index <= tile_count:
            raise InvalidUsageError(f"starting_index {starting_index} is outside the grid.")
        self.starting_index = starting_index
        self.tiles = tuple(self._build_geometry(tile_id) for tile_id in range(1, tile_count + 1))

    @classmethod
    def from_size(cls, size: str) -> Grid:
        """Build one of the fixed small/medium/large boards."""
        try:
            preset = GRID_PRESETS[size]
        except KeyError:
            raise InvalidUsageError(f"Unknown grid size: {size!r} (expected one of {', '.join(SIZE_CHOICES)}).")
        return cls(preset.tile_count, preset.row_size, preset.starting_index)

    def _build_geometry(self, tile_id: int) -> TileGeometry:
        row = math.ceil(tile_id / self.row_size)
        first_in_row = self.row_size * row - self.row_size + 1
        last_in_row = self.row_size * row
        return TileGeometry(
            id=tile_id,
            row=row,
            first_in_row=first_in_row,
            last_in_row=last_in_row,
            is_top=row == 1,
            is_bottom=row == self.row_count,
            is_left_edge=tile_id == first_in_row,
            is_right_edge=tile_id == last_in_row,
        )

    def contains(self, tile_id: int) -> bool:
        return 1 <= tile_id <= self.tile_count

    def geometry(self, tile_id: int) -> TileGeometry:
        if not self.contains(tile_id):
            raise InvalidUsageError(f"Tile {tile_id} is outside the grid.")
        return self.tiles[tile_id - 1]

    def _move_rule(self, direction: str) -> tuple[int, str]:
        """Id delta for a direction and the edge flag that forbids leaving that way."""
        if direction == "up":
            return -self.row_size, "is_top"
        if direction == "down":
            return self.row_size, "is_bottom"
        if direction == "left":
            return -1, "is_left_edge"
        return 1, "is_right_edge"

    def step(self, tile_id: int, direction: str) -> int | None:
        """Neighbouring tile id in `direction`, or None if that would leave the board."""
        validate_direction(direction)
        delta, blocking_edge = self._move_rule(direction)
        if getattr(self.geometry(tile_id), blocking_edge):
            return None
        return tile_id + delta

    def neighbors(self, tile_id: int) -> list[int]:
        """Edge-aware adjacent tiles: 2 at a corner, 3 on an edge, 4 inside."""
        result = []
        for direction in DIRECTIONS:
            next_id = self.step(tile_id, direction)
            if next_id is not None:
                result.append(next_id)
        return result

    def edge_class(self, tile_id: int) -> str:
        """Name of the adjacency pattern for a tile, e.g. 'top-left' or 'interior'."""
        tile = self.geometry(tile_id)
        vertical = "top" if tile.is_top else "bottom" if tile.is_bottom else ""
        horizontal = "left" if tile.is_left_edge else "right" if tile.is_right_edge else ""
        if vertical and horizontal:
            return f"{vertical}-{horizontal}"
        return vertical or horizontal or "interior"

    def __repr__(self) -> str:
        return f"<Grid {self.row_count}x{self.row_size} tiles={self.tile_count} start={self.starting_index}>"
