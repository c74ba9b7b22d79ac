"""Occupancy raster used for free-cell queries."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

from snake_arena.snake import Position

if TYPE_CHECKING:
    from snake_arena.food import Food


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """NumPy-backed occupancy grid.

    The grid is a throwaway raster painted from the current snakes and foods
    so that neighbourhood and free-cell queries are O(1) per cell. Cells are
    indexed ``cells[y, x]``; out-of-bounds segments (a snake that died in
    the wall) are never painted.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be positive.")
        self.width = width
        self.height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    @classmethod
    def from_state(
        cls,
        width: int,
        height: int,
        bodies: Iterable[Iterable[Position]],
        foods: Iterable[Food] = (),
    ) -> Grid:
        """Build a grid with every body segment and food painted in."""
        grid = cls(width, height)
        for body in bodies:
            for x, y in body:
                if grid.in_bounds(x, y):
                    grid.cells[y, x] = CellType.SNAKE
        for food in foods:
            x, y = food.position
            if grid.in_bounds(x, y) and grid.cells[y, x] == CellType.EMPTY:
                grid.cells[y, x] = CellType.FOOD
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellType:
        """Return the cell type at the given coordinate."""
        return CellType(self.cells[y, x])

    def is_free(self, x: int, y: int) -> bool:
        """True for in-bounds cells that hold no snake segment."""
        return self.in_bounds(x, y) and self.get(x, y) != CellType.SNAKE

    def is_empty(self, x: int, y: int) -> bool:
        """True for in-bounds cells holding neither snake nor food."""
        return self.in_bounds(x, y) and self.get(x, y) == CellType.EMPTY

    def empty_cells(self) -> list[Position]:
        """Return all empty cell coordinates in row-major order."""
        ys, xs = np.where(self.cells == CellType.EMPTY)
        return [
            Position(x, y)
            for x, y in zip(xs.tolist(), ys.tolist(), strict=True)
        ]
