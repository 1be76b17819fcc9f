"""Game configuration constants and JSON persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from grid_snake.grid import Grid, Vector2
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_BODY: tuple[tuple[int, int], ...] = ((5, 12), (4, 12), (3, 12))


@dataclass(frozen=True)
class GameConfig:
    """Board geometry, tick timing, and the initial snake.

    Sizes are in pixels; the simulation only sees :attr:`tile_count`.
    """

    board_size: int = 400
    tile_size: int = 20
    tick_interval_ms: int = 120
    initial_body: tuple[tuple[int, int], ...] = DEFAULT_INITIAL_BODY
    initial_direction: str = "right"

    def __post_init__(self) -> None:
        if self.board_size <= 0 or self.tile_size <= 0:
            raise ValueError("board_size and tile_size must be positive.")
        if self.board_size % self.tile_size != 0:
            raise ValueError("board_size must be a multiple of tile_size.")
        if self.tile_count < 4:
            raise ValueError("Board must be at least 4 tiles per side.")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive.")

        # Normalise JSON lists into hashable tuples.
        body = tuple(tuple(seg) for seg in self.initial_body)
        object.__setattr__(self, "initial_body", body)
        object.__setattr__(
            self, "initial_direction", self.initial_direction.lower(),
        )

        if not body:
            raise ValueError("initial_body must contain at least one segment.")
        if len(set(body)) != len(body):
            raise ValueError("initial_body segments must not overlap.")
        grid = self.grid()
        if not all(grid.in_bounds(seg) for seg in body):
            raise ValueError("initial_body does not fit the configured board.")
        for (ax, ay), (bx, by) in zip(body, body[1:]):
            if abs(ax - bx) + abs(ay - by) != 1:
                raise ValueError("initial_body segments must be contiguous.")
        if len(body) >= grid.area:
            raise ValueError("initial_body leaves no free cell for food.")

        try:
            direction = Direction[self.initial_direction.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown initial_direction {self.initial_direction!r}.",
            ) from None
        if len(body) > 1 and Vector2(*body[0]) + direction.value == body[1]:
            raise ValueError("initial_direction points back into the body.")

    @property
    def tile_count(self) -> int:
        """Number of tiles per side."""
        return self.board_size // self.tile_size

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0

    @property
    def direction(self) -> Direction:
        return Direction[self.initial_direction.upper()]

    def grid(self) -> Grid:
        return Grid.from_board(self.board_size, self.tile_size)

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        d["initial_body"] = [list(seg) for seg in self.initial_body]
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        if "initial_body" in raw:
            raw["initial_body"] = tuple(tuple(seg) for seg in raw["initial_body"])
        return cls(**raw)
