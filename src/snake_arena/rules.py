"""Pure position arithmetic and collision rules.

The engine and the AI share these functions so both judge collisions the
same way. Every function accepts the engine's mutable ``Snake`` as well as
a ``SnakeState`` snapshot: anything with ``body`` (head first) and
``direction`` will do.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice
from typing import TYPE_CHECKING, Protocol

from snake_arena.snake import Direction, Position, opposite

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snake_arena.config import GameConfig

# Candidate order for valid-direction filtering.
ALL_DIRECTIONS: tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


class SnakeLike(Protocol):
    @property
    def body(self) -> Sequence[Position]: ...

    @property
    def direction(self) -> Direction: ...


def step(position: Position, direction: Direction) -> Position:
    """Return the cell one move away from *position*."""
    dx, dy = direction.value
    return Position(position[0] + dx, position[1] + dy)


def wall_collision(position: Position, config: GameConfig) -> bool:
    """True if *position* lies outside the board."""
    x, y = position
    return not (0 <= x < config.board_width and 0 <= y < config.board_height)


def self_collision(snake: SnakeLike) -> bool:
    """True if any non-head segment shares the head's cell."""
    body = snake.body
    head = body[0]
    return any(seg == head for seg in islice(body, 1, None))


def snake_collision(snake: SnakeLike, others: Iterable[SnakeLike]) -> bool:
    """True if the head lies on any segment of any snake in *others*."""
    return is_occupied(snake.body[0], others)


def valid_directions(snake: SnakeLike) -> list[Direction]:
    """All directions except the reversal of the current heading."""
    reverse = opposite(snake.direction)
    return [d for d in ALL_DIRECTIONS if d != reverse]


def distance(a: Position, b: Position) -> int:
    """Manhattan distance between two cells."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_occupied(position: Position, snakes: Iterable[SnakeLike]) -> bool:
    """True if any segment of any snake sits on *position*."""
    return any(position in snake.body for snake in snakes)
