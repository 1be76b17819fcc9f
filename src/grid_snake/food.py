"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from grid_snake.grid import Vector2

if TYPE_CHECKING:
    from grid_snake.grid import Grid
    from grid_snake.snake import Snake

logger = logging.getLogger(__name__)


class BoardFullError(RuntimeError):
    """Raised when food is requested but the snake covers every cell."""


def place_food(
    snake: Snake,
    grid: Grid,
    rng: np.random.Generator | None = None,
) -> Vector2:
    """Pick a uniformly random cell not occupied by *snake*.

    Cells are sampled independently until a free one turns up, so the
    expected number of draws grows as the board fills. A seeded
    ``Generator`` makes placement reproducible.
    """
    if len(snake) >= grid.area:
        logger.warning("No empty cells available for food placement.")
        raise BoardFullError("Snake occupies every cell of the grid.")

    rng = rng if rng is not None else np.random.default_rng()
    occupied = set(snake)
    n = grid.tile_count
    while True:
        x, y = rng.integers(0, n, size=2).tolist()
        candidate = Vector2(x, y)
        if candidate not in occupied:
            return candidate
