"""Difficulty tier system mapping skill levels to move-selection noise."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from snake_arena.snake import Direction


class DifficultyTier(enum.Enum):
    """Skill tiers for AI opponents, ordered by difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


ALL_TIERS: list[DifficultyTier] = list(DifficultyTier)


@dataclass(frozen=True)
class TierConfig:
    """How often a tier plays its best-ranked move, and what it does otherwise.

    With probability ``best_move_prob`` the top-ranked direction is taken.
    Otherwise a tier with ``runner_up_fallback`` takes the second-ranked
    direction when there is one; every other case picks uniformly among the
    valid directions.
    """

    best_move_prob: float
    runner_up_fallback: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.best_move_prob <= 1.0:
            raise ValueError("best_move_prob must be within [0, 1].")


DEFAULT_TIERS: dict[DifficultyTier, TierConfig] = {
    DifficultyTier.EASY: TierConfig(best_move_prob=0.70),
    DifficultyTier.MEDIUM: TierConfig(
        best_move_prob=0.85, runner_up_fallback=True,
    ),
    DifficultyTier.HARD: TierConfig(
        best_move_prob=0.95, runner_up_fallback=True,
    ),
}


def parse_tier(tier: DifficultyTier | str) -> DifficultyTier:
    """Accept a tier or its string value."""
    if isinstance(tier, DifficultyTier):
        return tier
    if not isinstance(tier, str):
        raise ValueError(f"Unknown difficulty tier {tier!r}.")
    try:
        return DifficultyTier(tier.lower())
    except ValueError:
        raise ValueError(f"Unknown difficulty tier {tier!r}.") from None


def default_tier(ai_index: int) -> DifficultyTier:
    """Tier given to the *ai_index*-th opponent when none is configured."""
    if ai_index == 0:
        return DifficultyTier.HARD
    if ai_index == 1:
        return DifficultyTier.MEDIUM
    return DifficultyTier.EASY


def select_direction(
    ranked: Sequence[Direction],
    valid: Sequence[Direction],
    tier: TierConfig,
    rng: np.random.Generator,
) -> Direction:
    """Apply the tier's random gate to a best-first ranking."""
    if rng.random() < tier.best_move_prob:
        return ranked[0]
    if tier.runner_up_fallback and len(ranked) > 1:
        return ranked[1]
    return valid[int(rng.integers(len(valid)))]
