"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass
from typing import NamedTuple


class Position(NamedTuple):
    """A grid cell; ``x`` grows to the right and ``y`` downwards."""

    x: int
    y: int


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Look up a direction by case-insensitive name."""
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction {text!r}.") from None


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def opposite(direction: Direction) -> Direction:
    """Return the direction pointing the other way."""
    return _OPPOSITES[direction]


@dataclass(frozen=True)
class SnakeState:
    """Read-only view of a snake handed out in snapshots."""

    id: str
    body: tuple[Position, ...]
    direction: Direction
    color: str
    is_ai: bool
    score: int
    alive: bool
    skin_id: str | None = None

    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "id": self.id,
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name,
            "color": self.color,
            "is_ai": self.is_ai,
            "score": self.score,
            "alive": self.alive,
            "skin_id": self.skin_id,
            "length": self.length,
        }


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``. The starting body
    trails behind the head, opposite to *direction*.
    """

    def __init__(
        self,
        snake_id: str,
        head: Position,
        direction: Direction = Direction.RIGHT,
        *,
        length: int = 3,
        color: str = "#b91c1c",
        is_ai: bool = False,
        skin_id: str | None = None,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        self.id = snake_id
        self.body: deque[Position] = deque(
            Position(head.x - dx * i, head.y - dy * i) for i in range(length)
        )
        self.direction = direction
        self.color = color
        self.is_ai = is_ai
        self.skin_id = skin_id
        self.score = 0
        self.alive = True

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    def set_direction(self, new_direction: Direction) -> bool:
        """Change direction, ignoring 180° reversals.

        Returns True when the change was applied.
        """
        if _OPPOSITES[new_direction] == self.direction:
            return False
        self.direction = new_direction
        return True

    def next_head(self) -> Position:
        """Compute the next head position without moving."""
        dx, dy = self.direction.value
        x, y = self.head
        return Position(x + dx, y + dy)

    def snapshot(self) -> SnakeState:
        """Return a detached, immutable copy of the snake."""
        return SnakeState(
            id=self.id,
            body=tuple(self.body),
            direction=self.direction,
            color=self.color,
            is_ai=self.is_ai,
            score=self.score,
            alive=self.alive,
            skin_id=self.skin_id,
        )

    def __repr__(self) -> str:
        return (
            f"Snake(id={self.id!r}, head={tuple(self.head)}, "
            f"length={len(self.body)}, alive={self.alive})"
        )
