"""In-memory game registry, session lifecycle and snapshot fan-out."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from snake_arena.config import GameConfig
from snake_arena.engine import GameEngine
from snake_arena.loop import GameLoop
from snake_arena.server.models import GameSummary
from snake_arena.state import GameState, GameStatus

logger = logging.getLogger(__name__)

_MAX_FINISHED_GAMES = 100
_SUBSCRIBER_QUEUE_SIZE = 64


def encode_state(state: GameState) -> str:
    """Compact JSON payload for one snapshot."""
    return json.dumps(state.to_dict(), separators=(",", ":"))


@dataclass
class GameSession:
    """All state for a single hosted game."""

    game_id: str
    loop: GameLoop
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    subscribers: list[asyncio.Queue] = field(default_factory=list)

    @property
    def engine(self) -> GameEngine:
        return self.loop.engine

    @property
    def status(self) -> GameStatus:
        return self.loop.engine.status

    def subscribe(self) -> asyncio.Queue:
        """Open a snapshot stream for one connection."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=_SUBSCRIBER_QUEUE_SIZE)
        self.subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self.subscribers:
            self.subscribers.remove(queue)

    def publish(self, state: GameState) -> None:
        """Push a snapshot to every stream, dropping the oldest when full."""
        if state.status == GameStatus.GAME_OVER and self.finished_at is None:
            self.finished_at = time.monotonic()
        elif state.status != GameStatus.GAME_OVER:
            self.finished_at = None

        # Iterate over a copy so disconnect handlers can mutate the live list.
        for queue in list(self.subscribers):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(state)

    def summary(self) -> GameSummary:
        config = self.engine.config
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            tick=self.engine.tick,
            ai_count=config.ai_count,
            game_speed=config.game_speed,
        )


class GameManager:
    """Central registry managing all game sessions."""

    def __init__(self, max_finished_games: int = _MAX_FINISHED_GAMES) -> None:
        if max_finished_games < 0:
            raise ValueError("max_finished_games must be >= 0.")
        self._games: dict[str, GameSession] = {}
        self._max_finished_games = max_finished_games

    def create_game(
        self,
        board_width: int = 30,
        board_height: int = 30,
        ai_count: int = 3,
        game_speed: int = 200,
        food_count: int = 5,
        ai_difficulties: list[str] | None = None,
        seed: int | None = None,
    ) -> GameSession:
        """Create a new game in the waiting state and return its session."""
        config = GameConfig(
            board_width=board_width,
            board_height=board_height,
            ai_count=ai_count,
            game_speed=game_speed,
            food_count=food_count,
            ai_difficulties=(
                tuple(ai_difficulties) if ai_difficulties is not None else None
            ),
            seed=seed,
        )

        self._prune_finished_games()
        game_id = uuid.uuid4().hex[:12]
        session = GameSession(game_id=game_id, loop=GameLoop(GameEngine(config)))
        session.engine.subscribe(session.publish)
        self._games[game_id] = session
        logger.info(
            "Game %s created (%dx%d, ai=%d).",
            game_id, board_width, board_height, ai_count,
        )
        return session

    def get_game(self, game_id: str) -> GameSession | None:
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> GameSession:
        session = self._games.get(game_id)
        if session is None:
            raise KeyError(f"Game {game_id} not found.")
        return session

    def list_games(self) -> list[GameSummary]:
        """Return summaries of every registered game."""
        return [g.summary() for g in self._games.values()]

    def delete_game(self, game_id: str) -> None:
        """Stop a game's timer and forget it."""
        session = self._games.pop(game_id, None)
        if session is None:
            raise KeyError(f"Game {game_id} not found.")
        session.loop.stop()
        logger.info("Game %s deleted.", game_id)

    def _prune_finished_games(self) -> None:
        """Bound retained finished games to avoid unbounded registry growth."""
        finished = [
            g for g in self._games.values()
            if g.status == GameStatus.GAME_OVER
        ]
        overflow = len(finished) - self._max_finished_games
        if overflow <= 0:
            return

        finished.sort(
            key=lambda g: g.finished_at if g.finished_at is not None else g.created_at,
        )
        for stale in finished[:overflow]:
            stale.loop.stop()
            self._games.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished games (retaining up to %d).",
            overflow,
            self._max_finished_games,
        )

    async def cleanup(self) -> None:
        """Cancel every running tick loop."""
        current = asyncio.get_running_loop()
        tasks = [
            g.loop.task for g in self._games.values()
            if g.loop.running and g.loop.task.get_loop() is current
        ]
        for session in self._games.values():
            session.loop.stop()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("GameManager cleanup complete.")
