"""REST API route handlers for game lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from snake_arena.server.game_manager import GameManager, GameSession
from snake_arena.server.models import (
    CommandResponse,
    CreateGameRequest,
    DirectionRequest,
    GameSummary,
    SkinRequest,
)
from snake_arena.snake import Direction

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request) -> GameManager:
    return request.app.state.game_manager


def _get_session(request: Request, game_id: str) -> GameSession:
    try:
        return _get_manager(request).require_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found.") from exc


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create a new game in the waiting state."""
    manager = _get_manager(request)
    try:
        session = manager.create_game(
            board_width=body.board_width,
            board_height=body.board_height,
            ai_count=body.ai_count,
            game_speed=body.game_speed,
            food_count=body.food_count,
            ai_difficulties=body.ai_difficulties,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List every hosted game."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get the current snapshot of a game."""
    session = _get_session(request, game_id)
    return {"game_id": session.game_id, "state": session.loop.snapshot().to_dict()}


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, request: Request) -> Response:
    """Stop and discard a game."""
    try:
        _get_manager(request).delete_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found.") from exc
    return Response(status_code=204)


@router.post("/{game_id}/start")
async def start_game(game_id: str, request: Request) -> dict:
    """Start a waiting game or resume a paused one."""
    session = _get_session(request, game_id)
    session.loop.start()
    return session.loop.snapshot().to_dict()


@router.post("/{game_id}/pause")
async def pause_game(game_id: str, request: Request) -> dict:
    session = _get_session(request, game_id)
    session.loop.pause()
    return session.loop.snapshot().to_dict()


@router.post("/{game_id}/resume")
async def resume_game(game_id: str, request: Request) -> dict:
    session = _get_session(request, game_id)
    session.loop.resume()
    return session.loop.snapshot().to_dict()


@router.post("/{game_id}/reset")
async def reset_game(game_id: str, request: Request) -> dict:
    """Put the game back into its starting layout."""
    session = _get_session(request, game_id)
    session.loop.reset()
    return session.loop.snapshot().to_dict()


@router.post("/{game_id}/direction")
async def change_direction(
    game_id: str, body: DirectionRequest, request: Request,
) -> CommandResponse:
    """Steer a snake; reversals are reported as not accepted."""
    session = _get_session(request, game_id)
    accepted = session.loop.change_direction(
        body.snake_id, Direction.parse(body.direction),
    )
    return CommandResponse(
        accepted=accepted, state=session.loop.snapshot().to_dict(),
    )


@router.post("/{game_id}/skin")
async def change_skin(
    game_id: str, body: SkinRequest, request: Request,
) -> CommandResponse:
    session = _get_session(request, game_id)
    accepted = session.loop.change_skin(body.snake_id, body.skin_id)
    return CommandResponse(
        accepted=accepted, state=session.loop.snapshot().to_dict(),
    )


@router.get("/{game_id}/stats")
async def get_stats(game_id: str, request: Request) -> dict:
    """Statistics over the finished games of this session."""
    session = _get_session(request, game_id)
    return session.loop.stats.to_dict()
