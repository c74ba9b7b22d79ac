"""Game configuration and the starting layout it implies."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import NamedTuple

from snake_arena.ai.difficulty import DifficultyTier, default_tier, parse_tier
from snake_arena.snake import Direction, Position

logger = logging.getLogger(__name__)

PLAYER_ID = "player"
PLAYER_START = Position(5, 5)
DEFAULT_SKIN_ID = "classic"
INITIAL_SNAKE_LENGTH = 3
MAX_AI_COUNT = 5
_INT_FIELDS = (
    "board_width", "board_height", "player_count",
    "ai_count", "game_speed", "food_count",
)

# Player first, then one color per AI slot.
SNAKE_COLORS: tuple[str, ...] = (
    "#b91c1c",
    "#1d4ed8",
    "#047857",
    "#b45309",
    "#6d28d9",
    "#be185d",
)


class SpawnSlot(NamedTuple):
    """Where and how one snake enters the board."""

    snake_id: str
    head: Position
    direction: Direction
    color: str
    is_ai: bool
    skin_id: str | None


def ai_snake_id(index: int) -> str:
    return f"ai-{index}"


@dataclass(frozen=True)
class GameConfig:
    """Configuration for one game; changing it means creating a new game.

    ``game_speed`` is the tick period in milliseconds. ``ai_difficulties``
    optionally lists one tier per AI snake; by default the first opponent
    is hard, the second medium and the rest easy.
    """

    board_width: int = 30
    board_height: int = 30
    player_count: int = 1
    ai_count: int = 3
    game_speed: int = 200
    food_count: int = 5
    ai_difficulties: tuple[DifficultyTier, ...] | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.player_count != 1:
            raise ValueError("player_count must be 1.")
        if not 1 <= self.ai_count <= MAX_AI_COUNT:
            raise ValueError(f"ai_count must be between 1 and {MAX_AI_COUNT}.")
        if self.game_speed <= 0:
            raise ValueError("game_speed must be positive.")
        if self.food_count < 1:
            raise ValueError("food_count must be at least 1.")

        if self.ai_difficulties is not None:
            tiers = tuple(parse_tier(t) for t in self.ai_difficulties)
            if len(tiers) != self.ai_count:
                raise ValueError(
                    "ai_difficulties must list one tier per AI snake "
                    f"({len(tiers)} given, ai_count={self.ai_count})."
                )
            object.__setattr__(self, "ai_difficulties", tiers)

        occupied: set[Position] = set()
        for slot in self.spawn_layout():
            dx, dy = slot.direction.value
            for seg in range(INITIAL_SNAKE_LENGTH):
                cell = Position(slot.head.x - dx * seg, slot.head.y - dy * seg)
                if not (
                    0 <= cell.x < self.board_width
                    and 0 <= cell.y < self.board_height
                ):
                    raise ValueError(
                        f"Board {self.board_width}x{self.board_height} is too "
                        f"small for snake {slot.snake_id!r}; increase the "
                        "board size or reduce ai_count."
                    )
                if cell in occupied:
                    raise ValueError(
                        f"Starting position of snake {slot.snake_id!r} "
                        "overlaps another snake; increase the board size."
                    )
                occupied.add(cell)

        free_cells = self.board_width * self.board_height - len(occupied)
        if self.food_count > free_cells:
            logger.warning(
                "food_count=%d exceeds the free cells of a %dx%d board.",
                self.food_count, self.board_width, self.board_height,
            )

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.game_speed / 1000.0

    def difficulty_for(self, ai_index: int) -> DifficultyTier:
        """Tier of the *ai_index*-th AI snake."""
        if self.ai_difficulties is not None:
            return self.ai_difficulties[ai_index]
        return default_tier(ai_index)

    def spawn_layout(self) -> list[SpawnSlot]:
        """Starting slot of every snake, player first.

        AI snakes line up two rows apart near the bottom-right corner,
        facing left with their bodies trailing towards the right wall.
        """
        slots = [
            SpawnSlot(
                PLAYER_ID, PLAYER_START, Direction.RIGHT,
                SNAKE_COLORS[0], False, DEFAULT_SKIN_ID,
            ),
        ]
        for i in range(self.ai_count):
            head = Position(self.board_width - 3, self.board_height - 3 - 2 * i)
            slots.append(
                SpawnSlot(
                    ai_snake_id(i), head, Direction.LEFT,
                    SNAKE_COLORS[i + 1], True, None,
                )
            )
        return slots

    def to_dict(self) -> dict:
        """Serialize to a plain, JSON-friendly dict."""
        d = asdict(self)
        if self.ai_difficulties is not None:
            d["ai_difficulties"] = [t.value for t in self.ai_difficulties]
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, data: dict) -> GameConfig:
        """Build a config from a parsed JSON object.

        Raises ValueError for unknown keys or wrongly typed values.
        """
        if not isinstance(data, dict):
            raise ValueError("Config must be a JSON object.")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}.")

        d = dict(data)
        for name in _INT_FIELDS:
            if name in d and (
                not isinstance(d[name], int) or isinstance(d[name], bool)
            ):
                raise ValueError(f"{name} must be an integer.")
        seed = d.get("seed")
        if seed is not None and (
            not isinstance(seed, int) or isinstance(seed, bool)
        ):
            raise ValueError("seed must be an integer or null.")
        tiers = d.get("ai_difficulties")
        if tiers is not None:
            if not isinstance(tiers, (list, tuple)):
                raise ValueError("ai_difficulties must be a list of tiers.")
            d["ai_difficulties"] = tuple(tiers)
        return cls(**d)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
