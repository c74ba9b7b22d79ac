"""Snake Arena: a tick-based snake game engine with AI opponents."""

from snake_arena.config import GameConfig
from snake_arena.engine import GameEngine
from snake_arena.food import Food, FoodSpawner, FoodType
from snake_arena.loop import GameLoop
from snake_arena.snake import Direction, Position, Snake, SnakeState
from snake_arena.state import GameState, GameStatus
from snake_arena.stats import SessionStats

__all__ = [
    "Direction",
    "Food",
    "FoodSpawner",
    "FoodType",
    "GameConfig",
    "GameEngine",
    "GameLoop",
    "GameState",
    "GameStatus",
    "Position",
    "SessionStats",
    "Snake",
    "SnakeState",
]
