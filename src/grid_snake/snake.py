"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable, Iterator

from grid_snake.grid import Vector2


class Direction(enum.Enum):
    """Cardinal movement directions as ``(dx, dy)`` unit vectors."""

    UP = Vector2(0, -1)
    DOWN = Vector2(0, 1)
    LEFT = Vector2(-1, 0)
    RIGHT = Vector2(1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def is_opposite(self, other: Direction) -> bool:
        """Return True if turning from *other* to self is a 180° reversal."""
        return _OPPOSITES[self] is other


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of ``(x, y)`` segments.

    The head is ``body[0]``; the tail is ``body[-1]``. The snake does not
    know its own direction: the session owns direction state and passes it
    to :meth:`advance`.
    """

    def __init__(self, segments: Iterable[tuple[int, int]]) -> None:
        self.body: deque[Vector2] = deque(Vector2(x, y) for x, y in segments)
        if not self.body:
            raise ValueError("Snake length must be at least 1.")
        if len(set(self.body)) != len(self.body):
            raise ValueError("Snake segments must not overlap.")

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self) -> Iterator[Vector2]:
        return iter(self.body)

    @property
    def head(self) -> Vector2:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def tail(self) -> Vector2:
        return self.body[-1]

    def advance(self, direction: Direction) -> Vector2:
        """Compute the next head position without moving."""
        return self.head + direction.value

    def grow(self, new_head: tuple[int, int]) -> None:
        """Prepend *new_head*, lengthening the snake by one."""
        self.body.appendleft(Vector2(*new_head))

    def move(self, new_head: tuple[int, int]) -> Vector2:
        """Prepend *new_head* and drop the tail.

        Returns the vacated tail cell.
        """
        self.body.appendleft(Vector2(*new_head))
        return self.body.pop()

    def occupies(self, pos: tuple[int, int]) -> bool:
        """Check whether the snake occupies a given cell."""
        return pos in self.body

    def segments(self) -> list[Vector2]:
        """Return the body as a list, head first."""
        return list(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "length": len(self.body),
        }
