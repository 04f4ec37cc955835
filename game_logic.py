# Core tile-snake rules and session lifecycle, independent from GUI/CLI code.
from __future__ import annotations

from dataclasses import dataclass
import random
import threading

try:
    from .grid import REVERSE_DIRECTION, SIZE_CHOICES, Grid, InvalidUsageError, validate_direction
    from .tile_store import Tile, TileStore
except ImportError:
    from grid import REVERSE_DIRECTION, SIZE_CHOICES, Grid, InvalidUsageError, validate_direction
    from tile_store import Tile, TileStore


# Bounds used by hosts when validating settings.
MIN_TICK_MS = 50
MAX_TICK_MS = 2000
DEFAULT_TICK_MS = 1000
MODE_CHOICES = ("easy", "hard")  # easy = key-press driven, hard = timer driven
POINTS_PER_SEGMENT = 10

# Outcomes of a single advance().
MOVED = "moved"
ATE = "ate"
BLOCKED = "blocked"
SEPARATED = "separated"

# Session lifecycle.
SETUP = "setup"
RUNNING = "running"
WON = "won"
LOST = "lost"


@dataclass
class SessionConfig:
    """Settings for one game session."""
    size: str = "small"
    mode: str = "easy"
    tick_ms: int = DEFAULT_TICK_MS
    seed: int | None = None

    def validate(self) -> None:
        if self.size not in SIZE_CHOICES:
            raise InvalidUsageError(f"Unknown grid size: {self.size!r} (expected one of {', '.join(SIZE_CHOICES)}).")
        if self.mode not in MODE_CHOICES:
            raise InvalidUsageError(f"Unknown game mode: {self.mode!r} (expected one of {', '.join(MODE_CHOICES)}).")
        if not (MIN_TICK_MS <= self.tick_ms <= MAX_TICK_MS):
            raise InvalidUsageError(f"tick_ms must be between {MIN_TICK_MS} and {MAX_TICK_MS}.")

    @property
    def automatic(self) -> bool:
        return self.mode == "hard"


def advance(store: TileStore, direction: str) -> str:
    """Move the head one tile in `direction` and drag the body after it."""
    validate_direction(direction)
    head = store.head
    if head is None:
        return SEPARATED

    candidate = store.grid.step(head, direction)
    if candidate is None:
        # Off the board or across a row boundary: the head separates from the body.
        store.detach_head()
        return SEPARATED

    # Reversing into the neck, or running into any other segment, is a no-op.
    if candidate == store.neck or store.is_occupied(candidate):
        return BLOCKED

    ate = candidate == store.food
    store.push_head(candidate, direction)
    # The tail vacates even when eating; growth is paid back by replenish().
    store.pop_tail()
    return ATE if ate else MOVED


def place_food(store: TileStore, rng: random.Random) -> int:
    """Drop food on a uniformly random tile that the snake does not occupy."""
    if store.is_full():
        raise InvalidUsageError("No vacant tile left for food.")
    while True:
        candidate = rng.randint(1, store.grid.tile_count)
        if not store.is_occupied(candidate):
            break
    store.set_food(candidate)
    return candidate


def extend_tail(store: TileStore) -> int | None:
    """Append one segment behind the tail, opposite to the way the tail was travelling."""
    tail = store.tail
    if tail is None:
        return None
    tail_direction = store.directions[tail]
    behind = store.grid.step(tail, REVERSE_DIRECTION[tail_direction])
    if behind is None or store.is_occupied(behind):
        return None
    store.append_tail(behind, tail_direction)
    return behind


def replenish(store: TileStore, rng: random.Random) -> bool:
    """If the food has been eaten, grow the tail and spawn new food. Returns True if it did."""
    if store.food is not None:
        return False
    extend_tail(store)
    if not store.is_full():
        place_food(store, rng)
    return True


def is_surrounded(store: TileStore) -> bool:
    """True when every edge-aware neighbour of the head is a snake tile."""
    head = store.head
    if head is None:
        return False
    neighbors = store.grid.neighbors(head)
    return bool(neighbors) and all(store.is_occupied(tile_id) for tile_id in neighbors)


def detect_terminal(store: TileStore) -> str | None:
    """WON, LOST, or None while the game goes on. A full board wins before any loss check."""
    if store.length >= store.grid.tile_count - 1:
        return WON
    if store.head is None or is_surrounded(store):
        return LOST
    return None


class SnakeSession:
    """One game from grid generation until win, loss, or quit."""

    def __init__(self, config: SessionConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config if config is not None else SessionConfig()
        self.config.validate()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self._lock = threading.Lock()                   # one tick in flight at a time
        self.closed = False
        self.reset()

    def reset(self) -> None:
        """Build a fresh grid with a one-tile snake and the first food."""
        self.grid = Grid.from_size(self.config.size)
        self.store = TileStore(self.grid)
        place_food(self.store, self.rng)
        self.direction: str | None = None               # last requested direction
        self.status = SETUP
        self.ticks = 0
        self.last_outcome: str | None = None
        self.previous: tuple[Tile, ...] | None = None   # snapshot before the last tick

    def _ensure_open(self) -> None:
        if self.closed:
            raise InvalidUsageError("Session is closed; start a new one.")

    @property
    def is_over(self) -> bool:
        return self.status in (WON, LOST)

    @property
    def terminal(self) -> str:
        return self.status if self.is_over else "none"

    @property
    def length(self) -> int:
        return self.store.length

    @property
    def score(self) -> int:
        """Running points; a finished game earns one extra segment's worth."""
        if self.is_over:
            return self.store.length * POINTS_PER_SEGMENT
        return (self.store.length - 1) * POINTS_PER_SEGMENT

    def set_direction(self, direction: str) -> str:
        """Record an input; manual mode applies it straight away."""
        direction = validate_direction(direction)
        with self._lock:
            self._ensure_open()
            self.direction = direction
            if not self.config.automatic:
                return self._step()
            return self.status

    def tick(self) -> str:
        """Advance one step in the current direction. Frozen once the game is over."""
        with self._lock:
            self._ensure_open()
            return self._step()

    def _step(self) -> str:
        # Caller holds self._lock.
        if self.is_over or self.direction is None:
            return self.status

        self.previous = self.store.snapshot()
        self.status = RUNNING
        self.last_outcome = advance(self.store, self.direction)
        replenish(self.store, self.rng)
        self.status = detect_terminal(self.store) or RUNNING
        self.ticks += 1
        return self.status

    def snapshot(self) -> tuple[Tile, ...]:
        self._ensure_open()
        return self.store.snapshot()

    def close(self) -> None:
        """Quit: any later call on this session is a usage error."""
        self.closed = True

    def __repr__(self) -> str:
        return (
            f"<SnakeSession size={self.config.size} mode={self.config.mode} "
            f"status={self.status} length={self.length} ticks={self.ticks}>"
        )


def _require_session(handle: SnakeSession | None) -> SnakeSession:
    if not isinstance(handle, SnakeSession):
        raise InvalidUsageError("No active session; call new_session() first.")
    return handle


def new_session(size: str, mode: str = "easy", seed: int | None = None, tick_ms: int = DEFAULT_TICK_MS) -> SnakeSession:
    return SnakeSession(SessionConfig(size=size, mode=mode, tick_ms=tick_ms, seed=seed))


def set_direction(handle: SnakeSession | None, direction: str) -> str:
    return _require_session(handle).set_direction(direction)


def tick(handle: SnakeSession | None) -> str:
    return _require_session(handle).tick()


def snapshot(handle: SnakeSession | None) -> tuple[Tile, ...]:
    return _require_session(handle).snapshot()


def is_terminal(handle: SnakeSession | None) -> str:
    """'won', 'lost', or 'none'."""
    return _require_session(handle).terminal


def score(handle: SnakeSession | None) -> int:
    return _require_session(handle).score
