"""Fixed-period asyncio scheduler driving a :class:`GameEngine`."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from snake_arena.engine import GameEngine
from snake_arena.snake import Direction
from snake_arena.state import GameState, GameStatus
from snake_arena.stats import SessionStats

logger = logging.getLogger(__name__)


class GameLoop:
    """Ticks an engine every ``config.game_speed`` milliseconds while playing.

    The loop owns a single timer handle (an :class:`asyncio.Task`). Every
    lifecycle command cancels the armed handle before arming a new one, so
    at most one tick is ever pending. :meth:`start` must be called from a
    running event loop.
    """

    def __init__(
        self,
        engine: GameEngine,
        stats: SessionStats | None = None,
    ) -> None:
        self.engine = engine
        self.stats = stats if stats is not None else SessionStats()
        self._task: asyncio.Task | None = None
        self._last_status = engine.status
        self._unsubscribe = engine.subscribe(self._on_state)

    @property
    def running(self) -> bool:
        """True while a tick loop is armed."""
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self) -> None:
        """Start or resume the game and arm the timer."""
        self.engine.start()
        if self.engine.status == GameStatus.PLAYING and not self.running:
            self._arm()

    def pause(self) -> None:
        self._disarm()
        self.engine.pause()

    def resume(self) -> None:
        if self.engine.status == GameStatus.PAUSED:
            self.start()

    def reset(self) -> None:
        self._disarm()
        self.engine.reset()

    def change_direction(self, snake_id: str, direction: Direction) -> bool:
        return self.engine.change_direction(snake_id, direction)

    def change_skin(self, snake_id: str, skin_id: str | None) -> bool:
        return self.engine.change_skin(snake_id, skin_id)

    def snapshot(self) -> GameState:
        return self.engine.snapshot()

    def stop(self) -> None:
        """Cancel the timer without touching the game state."""
        self._disarm()

    async def aclose(self) -> None:
        """Cancel the timer, wait for it to unwind and detach from the engine."""
        task = self._task
        self._disarm()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._unsubscribe()

    def _arm(self) -> None:
        self._disarm()
        self._task = asyncio.get_running_loop().create_task(self._tick_loop())

    def _disarm(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _tick_loop(self) -> None:
        """Step the engine once per period until it leaves the playing state."""
        interval = self.engine.config.tick_interval
        try:
            while self.engine.status == GameStatus.PLAYING:
                await asyncio.sleep(interval)
                if self.engine.status != GameStatus.PLAYING:
                    break
                self.engine.step()
        except asyncio.CancelledError:
            logger.debug("Tick loop cancelled at tick %d.", self.engine.tick)
            raise
        except Exception:
            logger.exception("Tick loop error at tick %d.", self.engine.tick)
            try:
                self.engine.pause()
            except Exception:
                logger.exception("Could not pause game after tick error.")
        finally:
            if self._task is asyncio.current_task():
                self._task = None

    def _on_state(self, state: GameState) -> None:
        """Record each finished game once, on entering game over."""
        if (
            state.status == GameStatus.GAME_OVER
            and self._last_status != GameStatus.GAME_OVER
        ):
            self.stats.record(state)
        self._last_status = state.status
