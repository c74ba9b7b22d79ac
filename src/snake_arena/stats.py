"""In-memory statistics across the games of one session."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from snake_arena.state import GameState

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Running totals over finished games.

    Game time is simulated time: ticks played times the tick period.
    """

    total_games: int = 0
    longest_snake: int = 0
    highest_score: int = 0
    total_game_time: float = 0.0

    @property
    def average_game_time(self) -> float:
        if self.total_games == 0:
            return 0.0
        return self.total_game_time / self.total_games

    def record(self, state: GameState) -> None:
        """Fold one finished game into the totals."""
        self.total_games += 1
        if state.snakes:
            self.longest_snake = max(
                self.longest_snake, max(s.length for s in state.snakes),
            )
            leader = state.standings()[0]
            self.highest_score = max(self.highest_score, leader.score)
        self.total_game_time += state.tick * state.config.tick_interval
        logger.info(
            "Recorded game %d: %d ticks, winner %s, %d survivors, %d points.",
            self.total_games, state.tick, state.winner or "none",
            len(state.alive_snakes), state.total_score,
        )

    def to_dict(self) -> dict:
        return {
            "total_games": self.total_games,
            "longest_snake": self.longest_snake,
            "highest_score": self.highest_score,
            "average_game_time": self.average_game_time,
        }
