"""Greedy one-step heuristic opponent."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple, Protocol

import numpy as np

from snake_arena import rules
from snake_arena.ai.config import HeuristicWeights
from snake_arena.ai.difficulty import (
    DEFAULT_TIERS,
    DifficultyTier,
    TierConfig,
    parse_tier,
    select_direction,
)
from snake_arena.grid import Grid
from snake_arena.snake import Direction, Position

if TYPE_CHECKING:
    from snake_arena.config import GameConfig
    from snake_arena.food import Food
    from snake_arena.snake import SnakeState

logger = logging.getLogger(__name__)


class Agent(Protocol):
    """Anything that can steer a snake one tick at a time."""

    def decide(
        self,
        snake: SnakeState,
        foods: Sequence[Food],
        snakes: Sequence[SnakeState],
    ) -> Direction: ...


class _Projection(NamedTuple):
    """The moving snake as it would look after one un-truncated step."""

    id: str
    body: tuple[Position, ...]
    direction: Direction


class HeuristicAgent:
    """Scores each valid move and picks one through a difficulty gate.

    A move is vetoed when it leaves the board or runs into a snake body;
    safe moves earn points for closing in on the nearest food, for free
    neighbouring cells, and for staying near the board centre. The
    best-first ranking then goes through the tier's random gate, so weaker
    tiers blunder more often.
    """

    def __init__(
        self,
        config: GameConfig,
        tier: DifficultyTier | str = DifficultyTier.MEDIUM,
        *,
        rng: np.random.Generator | None = None,
        weights: HeuristicWeights | None = None,
        tier_config: TierConfig | None = None,
    ) -> None:
        self.config = config
        self.tier = parse_tier(tier)
        self.tier_config = tier_config or DEFAULT_TIERS[self.tier]
        self.weights = weights or HeuristicWeights()
        self.rng = rng if rng is not None else np.random.default_rng()
        self._center = Position(
            config.board_width // 2, config.board_height // 2,
        )

    def decide(
        self,
        snake: SnakeState,
        foods: Sequence[Food],
        snakes: Sequence[SnakeState],
    ) -> Direction:
        """Return the next direction for *snake*."""
        valid = rules.valid_directions(snake)
        if not valid:
            return snake.direction

        target = self.nearest_food(snake.body[0], foods)
        if target is None:
            return valid[int(self.rng.integers(len(valid)))]

        grid = Grid.from_state(
            self.config.board_width,
            self.config.board_height,
            (s.body for s in snakes),
        )
        scores = {
            d: self.score_move(snake, d, target, snakes, grid) for d in valid
        }
        # sorted() is stable, so equal scores keep the candidate order.
        ranked = sorted(valid, key=lambda d: -scores[d])
        choice = select_direction(ranked, valid, self.tier_config, self.rng)
        logger.debug(
            "%s (%s) scores=%s -> %s",
            snake.id, self.tier.value,
            {d.name: s for d, s in scores.items()}, choice.name,
        )
        return choice

    @staticmethod
    def nearest_food(head: Position, foods: Sequence[Food]) -> Position | None:
        """Closest food by Manhattan distance; the first one wins ties."""
        best: Position | None = None
        best_distance = 0
        for food in foods:
            d = rules.distance(head, food.position)
            if best is None or d < best_distance:
                best, best_distance = food.position, d
        return best

    def score_move(
        self,
        snake: SnakeState,
        direction: Direction,
        target: Position,
        snakes: Sequence[SnakeState],
        grid: Grid | None = None,
    ) -> float:
        """Score one candidate move; higher is better."""
        w = self.weights
        candidate = rules.step(snake.body[0], direction)

        if rules.wall_collision(candidate, self.config):
            return w.wall_penalty

        projected = _Projection(
            snake.id, (candidate, *snake.body), direction,
        )
        if rules.self_collision(projected):
            return w.self_penalty

        others = [s for s in snakes if s.id != snake.id]
        if rules.snake_collision(projected, others):
            return w.snake_penalty

        if grid is None:
            grid = Grid.from_state(
                self.config.board_width,
                self.config.board_height,
                (s.body for s in snakes),
            )

        score = max(0.0, w.food_reach - rules.distance(candidate, target))
        score += w.open_cell_bonus * self._open_neighbours(candidate, grid)
        score += max(0.0, w.center_reach - rules.distance(candidate, self._center))
        return score

    @staticmethod
    def _open_neighbours(position: Position, grid: Grid) -> int:
        count = 0
        for d in rules.ALL_DIRECTIONS:
            x, y = rules.step(position, d)
            if grid.is_free(x, y):
                count += 1
        return count
