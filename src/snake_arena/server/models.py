"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from snake_arena.state import GameStatus


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    board_width: int = Field(default=30, ge=6, le=100)
    board_height: int = Field(default=30, ge=6, le=100)
    ai_count: int = Field(default=3, ge=1, le=5)
    game_speed: int = Field(default=200, ge=50, le=2000)
    food_count: int = Field(default=5, ge=1, le=50)
    ai_difficulties: list[Literal["easy", "medium", "hard"]] | None = None
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /games/{game_id}/direction."""

    direction: Literal["up", "down", "left", "right", "UP", "DOWN", "LEFT", "RIGHT"]
    snake_id: str = "player"


class SkinRequest(BaseModel):
    """Request body for POST /games/{game_id}/skin."""

    skin_id: str = Field(min_length=1, max_length=32)
    snake_id: str = "player"


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: GameStatus
    tick: int
    ai_count: int
    game_speed: int


class CommandResponse(BaseModel):
    """Outcome of a steering or skin command."""

    accepted: bool
    state: dict
