"""Immutable game-state snapshots handed to observers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snake_arena.config import GameConfig
    from snake_arena.food import Food
    from snake_arena.snake import SnakeState


class GameStatus(str, enum.Enum):
    """Lifecycle states of a game."""

    WAITING = "waiting"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameOver"


@dataclass(frozen=True)
class GameState:
    """A complete, self-contained snapshot of one game at a tick boundary."""

    snakes: tuple[SnakeState, ...]
    foods: tuple[Food, ...]
    status: GameStatus
    config: GameConfig
    winner: str | None = None
    tick: int = 0

    @property
    def alive_snakes(self) -> tuple[SnakeState, ...]:
        return tuple(s for s in self.snakes if s.alive)

    @property
    def total_score(self) -> int:
        return sum(s.score for s in self.snakes)

    def get_snake(self, snake_id: str) -> SnakeState | None:
        for snake in self.snakes:
            if snake.id == snake_id:
                return snake
        return None

    def standings(self) -> list[SnakeState]:
        """Snakes ranked by score, highest first; ties keep roster order."""
        return sorted(self.snakes, key=lambda s: -s.score)

    def to_dict(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "status": self.status.value,
            "winner": self.winner,
            "snakes": [s.to_dict() for s in self.snakes],
            "standings": [s.id for s in self.standings()],
            "foods": [f.to_dict() for f in self.foods],
            "config": self.config.to_dict(),
        }
