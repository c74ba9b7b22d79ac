"""Heuristic AI opponents for Snake Arena."""

from snake_arena.ai.config import HeuristicWeights
from snake_arena.ai.difficulty import (
    ALL_TIERS,
    DEFAULT_TIERS,
    DifficultyTier,
    TierConfig,
    default_tier,
    parse_tier,
    select_direction,
)
from snake_arena.ai.heuristic import Agent, HeuristicAgent

__all__ = [
    "ALL_TIERS",
    "DEFAULT_TIERS",
    "Agent",
    "DifficultyTier",
    "HeuristicAgent",
    "HeuristicWeights",
    "TierConfig",
    "default_tier",
    "parse_tier",
    "select_direction",
]
