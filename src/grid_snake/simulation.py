"""Single-tick simulation step."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from grid_snake.food import BoardFullError, place_food

if TYPE_CHECKING:
    from grid_snake.session import GameSession

logger = logging.getLogger(__name__)


class TickResult(enum.Enum):
    """Outcome of one simulation step."""

    CONTINUE = "continue"
    ATE_FOOD = "ate_food"
    GAME_OVER = "game_over"


def tick(session: GameSession) -> TickResult:
    """Advance *session* by one tick.

    The queued direction is committed first. Collisions are checked against
    the body as it is before the move, so the cell the tail is about to
    leave still counts as occupied. On ``GAME_OVER`` the snake, food and
    score are left untouched and the session is ended, so further ticks are
    rejected without mutating anything.
    """
    from grid_snake.session import SessionState

    if session.state is not SessionState.RUNNING:
        return TickResult.GAME_OVER

    session.direction = session.queued_direction
    snake = session.snake
    new_head = snake.advance(session.direction)
    session.tick_count += 1

    # --- boundary check ---
    if not session.grid.in_bounds(new_head):
        logger.info(
            "Wall collision at %s on tick %d.", tuple(new_head), session.tick_count,
        )
        session.end_game()
        return TickResult.GAME_OVER

    # --- self-collision check (pre-move body, tail included) ---
    if snake.occupies(new_head):
        logger.info(
            "Self collision at %s on tick %d.", tuple(new_head), session.tick_count,
        )
        session.end_game()
        return TickResult.GAME_OVER

    if new_head == session.food:
        snake.grow(new_head)
        session.score += 1
        try:
            session.food = place_food(snake, session.grid, session.rng)
        except BoardFullError:
            # The snake filled the board; nothing is left to eat.
            session.food = None
            session.end_game()
            return TickResult.GAME_OVER
        return TickResult.ATE_FOOD

    snake.move(new_head)
    return TickResult.CONTINUE
