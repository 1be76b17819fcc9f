"""Grid coordinate space for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np


class Vector2(NamedTuple):
    """Integer ``(x, y)`` pair used for positions and directions.

    ``x`` grows to the right and ``y`` grows downward, matching screen
    coordinates.
    """

    x: int
    y: int

    def __add__(self, other: tuple[int, int]) -> Vector2:  # type: ignore[override]
        ox, oy = other
        return Vector2(self.x + ox, self.y + oy)


class CellType(enum.IntEnum):
    """Integer codes stored in an occupancy array."""

    EMPTY = 0
    SNAKE = 1
    HEAD = 2
    FOOD = 3


class Grid:
    """Square board of ``tile_count`` × ``tile_count`` tiles.

    The grid itself holds no game state; occupancy is always derived from
    the snake and food passed in.
    """

    def __init__(self, tile_count: int = 20) -> None:
        if tile_count < 4:
            raise ValueError("Grid tile count must be at least 4.")
        self.tile_count = tile_count

    @classmethod
    def from_board(cls, board_size: int, tile_size: int) -> Grid:
        """Build a grid from board and tile sizes in pixels."""
        if tile_size <= 0:
            raise ValueError("tile_size must be positive.")
        return cls(board_size // tile_size)

    @property
    def area(self) -> int:
        return self.tile_count * self.tile_count

    def in_bounds(self, pos: tuple[int, int]) -> bool:
        """Check whether a coordinate lies within the grid."""
        x, y = pos
        return 0 <= x < self.tile_count and 0 <= y < self.tile_count

    def occupancy(
        self,
        segments: Iterable[tuple[int, int]],
        food: tuple[int, int] | None = None,
    ) -> np.ndarray:
        """Render segments and food into an ``int8`` array indexed ``[y, x]``.

        The first segment is marked as the head. Positions outside the grid
        are skipped.
        """
        cells = np.zeros((self.tile_count, self.tile_count), dtype=np.int8)
        if food is not None and self.in_bounds(food):
            cells[food[1], food[0]] = CellType.FOOD
        for i, (x, y) in enumerate(segments):
            if self.in_bounds((x, y)):
                cells[y, x] = CellType.HEAD if i == 0 else CellType.SNAKE
        return cells

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"tile_count": self.tile_count}
