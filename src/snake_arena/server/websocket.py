"""WebSocket handlers for real-time play and spectating."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_arena.config import PLAYER_ID
from snake_arena.server.game_manager import GameManager, GameSession, encode_state
from snake_arena.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_COMMANDS = ("start", "pause", "resume", "reset")


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


async def _pump(websocket: WebSocket, queue: asyncio.Queue) -> None:
    """Forward queued snapshots to the socket until cancelled."""
    while True:
        state = await queue.get()
        await websocket.send_text(encode_state(state))


def _handle_message(session: GameSession, raw: str) -> None:
    """Apply one client message; anything malformed is ignored."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return
    if not isinstance(msg, dict):
        return

    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        try:
            direction = Direction.parse(direction_str)
        except ValueError:
            return
        session.loop.change_direction(PLAYER_ID, direction)
        return

    command = msg.get("command")
    if command in _COMMANDS:
        getattr(session.loop, command)()


async def _stream(
    websocket: WebSocket, session: GameSession, *, interactive: bool,
) -> None:
    queue = session.subscribe()
    sender = asyncio.create_task(_pump(websocket, queue))
    try:
        while True:
            raw = await websocket.receive_text()
            if interactive:
                _handle_message(session, raw)
    finally:
        session.unsubscribe(queue)
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.warning(
                "Snapshot stream for game %s ended with an error.",
                session.game_id,
            )


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Player WebSocket: send directions and commands, receive snapshots."""
    session = _get_manager(websocket).get_game(game_id)
    if session is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    logger.info("Player connected to game %s.", game_id)

    # Send the current snapshot so the client renders immediately.
    await websocket.send_text(encode_state(session.loop.snapshot()))

    try:
        await _stream(websocket, session, interactive=True)
    except WebSocketDisconnect:
        logger.info("Player disconnected from game %s.", game_id)


@ws_router.websocket("/games/{game_id}/spectate")
async def spectate(websocket: WebSocket, game_id: str) -> None:
    """Spectator WebSocket: receive-only snapshot stream."""
    session = _get_manager(websocket).get_game(game_id)
    if session is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    logger.info("Spectator connected to game %s.", game_id)
    await websocket.send_text(encode_state(session.loop.snapshot()))

    try:
        await _stream(websocket, session, interactive=False)
    except WebSocketDisconnect:
        logger.info("Spectator disconnected from game %s.", game_id)
