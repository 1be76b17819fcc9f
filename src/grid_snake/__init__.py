"""Grid Snake — fixed-tick snake game core."""

from grid_snake.config import GameConfig
from grid_snake.food import BoardFullError, place_food
from grid_snake.grid import CellType, Grid, Vector2
from grid_snake.scheduler import AsyncioScheduler, ManualScheduler
from grid_snake.session import GameSession, RenderableState, SessionState
from grid_snake.simulation import TickResult, tick
from grid_snake.snake import Direction, Snake

__all__ = [
    "AsyncioScheduler",
    "BoardFullError",
    "CellType",
    "Direction",
    "GameConfig",
    "GameSession",
    "Grid",
    "ManualScheduler",
    "RenderableState",
    "SessionState",
    "Snake",
    "TickResult",
    "Vector2",
    "place_food",
    "tick",
]
