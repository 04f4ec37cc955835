"""Play automatic tile-snake sessions headless and summarize the scores."""
from __future__ import annotations

import argparse
import random

import numpy as np

try:
    from .game_logic import MODE_CHOICES, SessionConfig, SnakeSession
    from .grid import SIZE_CHOICES
    from .utils import format_board, greedy_policy, random_policy, run_automatic
except ImportError:
    from game_logic import MODE_CHOICES, SessionConfig, SnakeSession
    from grid import SIZE_CHOICES
    from utils import format_board, greedy_policy, random_policy, run_automatic


POLICY_CHOICES = ("random", "greedy")


def _summary_row(name: str, values: np.ndarray) -> None:
    print(f"{name:<20} {float(values.mean()):>10.2f} {float(np.median(values)):>10.2f} "
          f"{float(values.min()):>10.2f} {float(values.max()):>10.2f} {float(values.std()):>10.2f}")


def simulate(
    size: str = "small",
    games: int = 10,
    max_ticks: int = 2000,
    seed: int | None = None,
    policy: str = "random",
    delay: float = 0.0,
    show_board: bool = False,
    mode: str = "hard",
) -> dict[str, np.ndarray]:
    """Run `games` sessions and print per-game results plus summary statistics."""
    if games <= 0:
        raise ValueError("games must be > 0")
    if policy not in POLICY_CHOICES:
        raise ValueError(f"Unknown policy: {policy}")

    policy_rng = random.Random(seed)
    choose = random_policy(policy_rng) if policy == "random" else greedy_policy

    def render(session: SnakeSession, step: int) -> None:
        print(f"\nTick {session.ticks} ({session.direction}, {session.last_outcome})")
        print(format_board(session.snapshot(), session.grid.row_size))

    scores: list[float] = []
    lengths: list[float] = []
    ticks: list[float] = []
    wins = 0

    header = f"{'Game':>6} {'Result':>8} {'Score':>8} {'Length':>8} {'Ticks':>8}"
    print(header)
    print("-" * len(header))
    for game in range(1, games + 1):
        game_seed = None if seed is None else seed + game
        session = SnakeSession(SessionConfig(size=size, mode=mode, seed=game_seed))
        terminal, final_score, tick_count = run_automatic(
            session,
            choose,
            max_ticks=max_ticks,
            interval_s=delay,
            render_step=render if show_board else None,
        )
        result = terminal if terminal != "none" else "timeout"
        wins += int(terminal == "won")
        scores.append(float(final_score))
        lengths.append(float(session.length))
        ticks.append(float(tick_count))
        print(f"{game:>6} {result:>8} {final_score:>8} {session.length:>8} {tick_count:>8}")
        session.close()

    stats = {
        "score": np.asarray(scores, dtype=np.float32),
        "length": np.asarray(lengths, dtype=np.float32),
        "ticks": np.asarray(ticks, dtype=np.float32),
    }

    print("=" * 72)
    print(f"{'Metric':<20} {'Mean':>10} {'Median':>10} {'Min':>10} {'Max':>10} {'Std':>10}")
    print("-" * 72)
    _summary_row("Score", stats["score"])
    _summary_row("Length", stats["length"])
    _summary_row("Ticks", stats["ticks"])
    print("=" * 72)
    print(f"Wins: {wins}/{games} ({wins / games * 100:.1f}%)")
    return stats


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Headless tile-snake simulator")
    parser.add_argument("--size", default="small", choices=SIZE_CHOICES)
    parser.add_argument("--mode", default="hard", choices=MODE_CHOICES, help="hard ticks on a timer, easy ticks per input")
    parser.add_argument("--games", type=int, default=10, help="Number of sessions to play")
    parser.add_argument("--max-ticks", type=int, default=2000, help="Stop a session after this many inputs")
    parser.add_argument("--policy", default="random", choices=POLICY_CHOICES)
    parser.add_argument("--seed", type=int, default=None, help="Seed for food placement and the random policy")
    parser.add_argument("--delay", type=float, default=0.0, help="Seconds to sleep between ticks")
    parser.add_argument("--show-board", action="store_true", help="Print the board after every tick")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    simulate(
        size=args.size,
        games=args.games,
        max_ticks=args.max_ticks,
        seed=args.seed,
        policy=args.policy,
        delay=args.delay,
        show_board=args.show_board,
        mode=args.mode,
    )


if __name__ == "__main__":
    main()
