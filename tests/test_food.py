"""Tests for food placement."""

import numpy as np
import pytest

from grid_snake.food import BoardFullError, place_food
from grid_snake.grid import Grid
from grid_snake.snake import Snake


def _serpentine(n: int) -> list[tuple[int, int]]:
    """Every cell of an n×n board in a contiguous boustrophedon order."""
    return [
        (x, y)
        for y in range(n)
        for x in (range(n) if y % 2 == 0 else range(n - 1, -1, -1))
    ]


class TestPlaceFood:
    def test_within_bounds(self):
        grid = Grid(10)
        rng = np.random.default_rng(42)
        snake = Snake([(5, 5), (4, 5), (3, 5)])
        for _ in range(200):
            assert grid.in_bounds(place_food(snake, grid, rng))

    def test_never_on_snake(self):
        grid = Grid(4)
        # Snake fills every cell but the last.
        body = _serpentine(4)
        snake = Snake(body[:-1])
        rng = np.random.default_rng(0)
        for _ in range(20):
            assert place_food(snake, grid, rng) == body[-1]

    def test_deterministic_with_seed(self):
        grid = Grid(20)
        snake = Snake([(5, 12), (4, 12), (3, 12)])
        a = [place_food(snake, grid, np.random.default_rng(7)) for _ in range(3)]
        b = [place_food(snake, grid, np.random.default_rng(7)) for _ in range(3)]
        assert a == b

    def test_different_seeds(self):
        grid = Grid(20)
        snake = Snake([(5, 12)])
        rng_a = np.random.default_rng(1)
        rng_b = np.random.default_rng(2)
        a = [place_food(snake, grid, rng_a) for _ in range(5)]
        b = [place_food(snake, grid, rng_b) for _ in range(5)]
        assert a != b

    def test_default_rng(self):
        grid = Grid(5)
        snake = Snake([(0, 0)])
        assert place_food(snake, grid) != (0, 0)

    def test_full_board_raises(self):
        grid = Grid(4)
        body = _serpentine(4)
        snake = Snake(body)
        with pytest.raises(BoardFullError):
            place_food(snake, grid, np.random.default_rng(0))
