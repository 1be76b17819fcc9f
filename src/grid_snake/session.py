"""Game session lifecycle: start, tick, game over, restart."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.food import place_food
from grid_snake.grid import Grid, Vector2
from grid_snake.scheduler import AsyncioScheduler, Scheduler, TaskHandle
from grid_snake.simulation import TickResult, tick
from grid_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)

# Raw input names accepted by :meth:`GameSession.dispatch_direction`.
_INPUT_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
}

StateListener = Callable[["RenderableState"], None]


class SessionState(str, enum.Enum):
    """Lifecycle states for a game session."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RenderableState:
    """Immutable snapshot handed to presentation layers."""

    snake: tuple[Vector2, ...]
    food: Vector2 | None
    score: int
    state: SessionState
    tick: int
    tile_count: int
    final_score: int | None = None

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation."""
        return {
            "snake": [list(seg) for seg in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "score": self.score,
            "state": self.state.value,
            "tick": self.tick,
            "tile_count": self.tile_count,
            "final_score": self.final_score,
        }


class GameSession:
    """Single-player snake session.

    The session owns the snake, both directions, food, score and the one
    periodic tick handle. Presentation layers observe it through
    :meth:`subscribe` and drive it through :meth:`start`, :meth:`restart`
    and :meth:`dispatch_direction`.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        scheduler: Scheduler | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self.rng = np.random.default_rng(seed)
        self.grid: Grid = self.config.grid()

        self.state = SessionState.IDLE
        self.snake = Snake(self.config.initial_body)
        self.direction = self.config.direction
        self.queued_direction = self.config.direction
        self.food: Vector2 | None = None
        self.score = 0
        self.final_score: int | None = None
        self.tick_count = 0
        self.last_result: TickResult | None = None

        self._timer: TaskHandle | None = None
        self._listeners: list[StateListener] = []

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def timer(self) -> TaskHandle | None:
        return self._timer

    # --- lifecycle ---

    def start(self) -> RenderableState:
        """Reset all game state and begin ticking, from any state.

        If the scheduler cannot install a tick source the error propagates
        and the session is left without a running game.
        """
        self._cancel_timer()
        try:
            timer = self.scheduler.schedule_periodic(
                self.config.tick_interval, self._on_tick,
            )
        except Exception:
            if self.running:
                self._finish()
            raise
        self._reset()
        self._timer = timer
        self.state = SessionState.RUNNING
        logger.info(
            "Session started (tiles=%d, interval=%dms).",
            self.grid.tile_count, self.config.tick_interval_ms,
        )
        return self._publish()

    def restart(self) -> RenderableState:
        """Start a fresh game; identical to :meth:`start`."""
        return self.start()

    def stop(self) -> None:
        """Cancel ticking without waiting for a collision."""
        self._cancel_timer()
        if self.state is SessionState.RUNNING:
            self._finish()
            self._publish()

    def _reset(self) -> None:
        self.snake = Snake(self.config.initial_body)
        self.direction = self.config.direction
        self.queued_direction = self.config.direction
        self.score = 0
        self.final_score = None
        self.tick_count = 0
        self.last_result = None
        self.food = place_food(self.snake, self.grid, self.rng)

    def _finish(self) -> None:
        self.state = SessionState.STOPPED
        self.final_score = self.score

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def end_game(self) -> None:
        """Make the current game terminal: cancel ticking, freeze the score."""
        self._cancel_timer()
        if self.running:
            self._finish()
            logger.info(
                "Game over after %d ticks with score %d.",
                self.tick_count, self.score,
            )

    # --- ticking ---

    def step(self) -> TickResult:
        """Run one simulation step and publish the resulting state."""
        if not self.running:
            return TickResult.GAME_OVER
        result = tick(self)
        self.last_result = result
        self._publish()
        return result

    def _on_tick(self) -> None:
        self.step()

    # --- input ---

    def queue_direction(self, direction: Direction) -> bool:
        """Queue *direction* for the next tick.

        Returns True if accepted. Reversals of the committed direction and
        input while not running are ignored.
        """
        if not isinstance(direction, Direction):
            logger.debug("Ignoring unknown input %r.", direction)
            return False
        if not self.running:
            logger.debug("Ignoring %s: session is %s.", direction.name, self.state.value)
            return False
        if direction.is_opposite(self.direction):
            logger.debug("Ignoring reversal to %s.", direction.name)
            return False
        self.queued_direction = direction
        return True

    def dispatch_direction(self, raw: Direction | str) -> bool:
        """Map a raw directional input to a direction and queue it."""
        if isinstance(raw, Direction):
            direction = raw
        elif isinstance(raw, str):
            direction = _INPUT_MAP.get(raw.strip().lower())
        else:
            direction = None
        if direction is None:
            logger.debug("Ignoring unknown input %r.", raw)
            return False
        return self.queue_direction(direction)

    # --- observation ---

    def snapshot(self) -> RenderableState:
        """Return the current renderable state."""
        return RenderableState(
            snake=tuple(self.snake),
            food=self.food,
            score=self.score,
            state=self.state,
            tick=self.tick_count,
            tile_count=self.grid.tile_count,
            final_score=self.final_score,
        )

    def occupancy(self) -> np.ndarray:
        """Return the board as a ``CellType`` array indexed ``[y, x]``."""
        return self.grid.occupancy(self.snake, self.food)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for state changes; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> RenderableState:
        state = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed.")
        return state
