"""Food types and spawning logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from snake_arena.grid import Grid
from snake_arena.snake import Position

logger = logging.getLogger(__name__)

# Random probes before falling back to a full scan of the free cells.
_MAX_PLACEMENT_ATTEMPTS = 64

NORMAL_FOOD_PROBABILITY = 0.8


class FoodType(enum.Enum):
    """Kinds of food and the score they award."""

    NORMAL = "normal"
    SPECIAL = "special"

    @property
    def points(self) -> int:
        return _FOOD_POINTS[self]


_FOOD_POINTS: dict[FoodType, int] = {
    FoodType.NORMAL: 10,
    FoodType.SPECIAL: 20,
}


@dataclass(frozen=True)
class Food:
    """A piece of food lying on the board."""

    position: Position
    type: FoodType = FoodType.NORMAL

    @property
    def points(self) -> int:
        return self.type.points

    def to_dict(self) -> dict:
        return {
            "position": list(self.position),
            "type": self.type.value,
            "points": self.points,
        }


class FoodSpawner:
    """Places food on unoccupied cells.

    Uses a NumPy RNG for deterministic, reproducible placement. A cell is
    picked by rejection sampling; after ``max_attempts`` misses the free
    cells are enumerated instead, so a crowded board never stalls a tick.
    """

    def __init__(
        self,
        width: int,
        height: int,
        target: int = 1,
        rng: np.random.Generator | None = None,
        max_attempts: int = _MAX_PLACEMENT_ATTEMPTS,
    ) -> None:
        if target < 1:
            raise ValueError("target must be at least 1.")
        self.width = width
        self.height = height
        self.target = target
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def generate(
        self,
        bodies: Iterable[Iterable[Position]],
        foods: Sequence[Food] = (),
    ) -> Food | None:
        """Create one food on a free cell, or ``None`` if the board is full."""
        grid = Grid.from_state(self.width, self.height, bodies, foods)
        position = self._pick_cell(grid)
        if position is None:
            logger.warning("No empty cells available for food placement.")
            return None
        if self.rng.random() < NORMAL_FOOD_PROBABILITY:
            food_type = FoodType.NORMAL
        else:
            food_type = FoodType.SPECIAL
        return Food(position, food_type)

    def replenish(
        self,
        foods: list[Food],
        bodies: Sequence[Iterable[Position]],
    ) -> list[Food]:
        """Top *foods* up to the target count in place.

        Returns the newly spawned foods; stops early when no cell is free.
        """
        spawned: list[Food] = []
        while len(foods) < self.target:
            food = self.generate(bodies, foods)
            if food is None:
                break
            foods.append(food)
            spawned.append(food)
        return spawned

    def _pick_cell(self, grid: Grid) -> Position | None:
        for _ in range(self.max_attempts):
            x = int(self.rng.integers(self.width))
            y = int(self.rng.integers(self.height))
            if grid.is_empty(x, y):
                return Position(x, y)

        empty = grid.empty_cells()
        if not empty:
            return None
        return empty[int(self.rng.integers(len(empty)))]
