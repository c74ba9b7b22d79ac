"""Scoring weights for the heuristic opponent."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class HeuristicWeights:
    """Configurable weights for one-step move scoring.

    Penalties replace the whole score of a move; the remaining terms are
    summed for safe moves.
    """

    # Vetoes
    wall_penalty: float = -1000.0
    self_penalty: float = -1000.0
    snake_penalty: float = -800.0

    # Safe-move terms
    food_reach: float = 50.0
    open_cell_bonus: float = 10.0
    center_reach: float = 20.0

    def __post_init__(self) -> None:
        for name in ("wall_penalty", "self_penalty", "snake_penalty"):
            if getattr(self, name) >= 0:
                raise ValueError(f"{name} must be negative.")
        for name in ("food_reach", "open_cell_bonus", "center_reach"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative.")

    def to_dict(self) -> dict:
        return asdict(self)
