"""Headless command-line tools for Grid Snake."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.grid import CellType
from grid_snake.scheduler import ManualScheduler
from grid_snake.session import GameSession
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

_MOVE_CODES: dict[str, Direction | None] = {
    "U": Direction.UP,
    "D": Direction.DOWN,
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
    ".": None,
}

_CELL_GLYPHS: dict[CellType, str] = {
    CellType.EMPTY: ".",
    CellType.SNAKE: "o",
    CellType.HEAD: "@",
    CellType.FOOD: "*",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid Snake headless simulation and configuration tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a scripted game without a display.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--moves", type=str, default="",
        help="One move per tick: U, D, L, R, or '.' for no input.",
    )
    sim_p.add_argument(
        "--max-ticks", type=int, default=1_000,
        help="Stop after this many ticks if the game is still running.",
    )
    sim_p.add_argument(
        "--board", action="store_true",
        help="Print the final board as text instead of JSON.",
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Print the default configuration.")
    cfg_p.add_argument(
        "--output", type=str, default=None,
        help="Write the configuration to this JSON file instead.",
    )

    return parser


def parse_moves(moves: str) -> list[Direction | None]:
    """Translate a move string such as ``"RRU.L"`` into directions."""
    parsed: list[Direction | None] = []
    for ch in moves.upper():
        if ch.isspace() or ch == ",":
            continue
        if ch not in _MOVE_CODES:
            raise ValueError(f"Unknown move code {ch!r}.")
        parsed.append(_MOVE_CODES[ch])
    return parsed


def run_headless(
    config: GameConfig,
    moves: list[Direction | None],
    seed: int | None = None,
    max_ticks: int = 1_000,
) -> GameSession:
    """Play a session tick by tick and return it, stopped."""
    scheduler = ManualScheduler()
    session = GameSession(config, scheduler=scheduler, seed=seed)
    session.start()

    for i in range(max_ticks):
        move = moves[i] if i < len(moves) else None
        if move is not None:
            session.queue_direction(move)
        if scheduler.fire() == 0:
            break

    session.stop()
    return session


def simulate(
    config: GameConfig,
    moves: list[Direction | None],
    seed: int | None = None,
    max_ticks: int = 1_000,
) -> dict:
    """Run a headless game and return the final snapshot dict."""
    return run_headless(config, moves, seed, max_ticks).snapshot().to_dict()


def render_board(cells: np.ndarray) -> str:
    """Draw an occupancy array as text, one line per row."""
    return "\n".join(
        "".join(_CELL_GLYPHS[CellType(int(c))] for c in row) for row in cells
    )


def _run_simulate(args: argparse.Namespace) -> int:
    config = GameConfig.load(args.config) if args.config else GameConfig()
    try:
        moves = parse_moves(args.moves)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    session = run_headless(config, moves, seed=args.seed, max_ticks=args.max_ticks)
    if args.board:
        print(render_board(session.occupancy()))  # noqa: T201
    else:
        print(json.dumps(session.snapshot().to_dict()))  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = GameConfig()
    if args.output:
        config.save(args.output)
    else:
        print(json.dumps(config.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
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
