"""Headless game runs for batch play and throughput measurement."""

from __future__ import annotations

import dataclasses
import logging
import time
from collections import Counter
from dataclasses import dataclass, field

import numpy as np

from snake_arena.ai.difficulty import DifficultyTier
from snake_arena.ai.heuristic import HeuristicAgent
from snake_arena.config import PLAYER_ID, GameConfig
from snake_arena.engine import GameEngine
from snake_arena.state import GameState, GameStatus
from snake_arena.stats import SessionStats

logger = logging.getLogger(__name__)

UNFINISHED = "unfinished"
NO_WINNER = "none"


@dataclass
class SimulationResult:
    """Outcome of a batch of headless games."""

    games: int
    total_ticks: int
    wall_time_seconds: float
    wins: dict[str, int] = field(default_factory=dict)
    stats: SessionStats = field(default_factory=SessionStats)

    @property
    def ticks_per_second(self) -> float:
        return self.total_ticks / max(self.wall_time_seconds, 1e-9)

    def summary(self) -> str:
        wins = ", ".join(f"{k}={v}" for k, v in sorted(self.wins.items()))
        return (
            f"Simulation: {self.games} games, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s "
            f"({self.ticks_per_second:.1f} ticks/s) | wins: {wins or '-'} | "
            f"highest score {self.stats.highest_score}, "
            f"longest snake {self.stats.longest_snake}"
        )

    def to_dict(self) -> dict:
        return {
            "games": self.games,
            "total_ticks": self.total_ticks,
            "wall_time_seconds": self.wall_time_seconds,
            "ticks_per_second": self.ticks_per_second,
            "wins": dict(self.wins),
            "stats": self.stats.to_dict(),
        }


def run_game(
    config: GameConfig,
    *,
    autopilot: bool = True,
    max_ticks: int = 10_000,
) -> GameState:
    """Play one game without a timer and return its last snapshot.

    With *autopilot* the player snake is steered by a hard-tier heuristic
    agent; otherwise it keeps its starting heading.
    """
    engine = GameEngine(config)
    pilot = (
        HeuristicAgent(config, DifficultyTier.HARD, rng=engine.rng)
        if autopilot else None
    )
    engine.start()
    state = engine.snapshot()
    while state.status == GameStatus.PLAYING and state.tick < max_ticks:
        if pilot is not None:
            player = state.get_snake(PLAYER_ID)
            if player is not None and player.alive:
                engine.change_direction(
                    PLAYER_ID, pilot.decide(player, state.foods, state.snakes),
                )
        state = engine.step()
    return state


def run_batch(
    config: GameConfig,
    games: int = 10,
    *,
    autopilot: bool = True,
    max_ticks: int = 10_000,
) -> SimulationResult:
    """Play *games* games with seeds derived from ``config.seed``."""
    if games < 1:
        raise ValueError("games must be at least 1.")
    seeds = np.random.default_rng(config.seed).integers(2**31, size=games)
    wins: Counter[str] = Counter()
    stats = SessionStats()
    total_ticks = 0

    start = time.perf_counter()
    for seed in seeds.tolist():
        game_config = dataclasses.replace(config, seed=seed)
        state = run_game(game_config, autopilot=autopilot, max_ticks=max_ticks)
        total_ticks += state.tick
        if state.status == GameStatus.GAME_OVER:
            wins[state.winner or NO_WINNER] += 1
            stats.record(state)
        else:
            wins[UNFINISHED] += 1
    elapsed = time.perf_counter() - start

    result = SimulationResult(
        games=games,
        total_ticks=total_ticks,
        wall_time_seconds=elapsed,
        wins=dict(wins),
        stats=stats,
    )
    logger.info(result.summary())
    return result
