"""Tests for the asyncio tick scheduler."""

from __future__ import annotations

import asyncio
import logging
from collections import deque

import pytest

from snake_arena.config import GameConfig
from snake_arena.engine import GameEngine
from snake_arena.loop import GameLoop
from snake_arena.snake import Direction, Position
from snake_arena.state import GameStatus
from snake_arena.stats import SessionStats


class _ScriptedAgent:
    def __init__(self, direction):
        self.direction = direction

    def decide(self, snake, foods, snakes):
        return self.direction


class _BrokenAgent:
    def decide(self, snake, foods, snakes):
        raise RuntimeError("agent crashed")


def _loop(agent=None, stats=None, **kwargs) -> GameLoop:
    kwargs.setdefault("game_speed", 10)
    config = GameConfig(board_width=10, board_height=10, ai_count=1, seed=3, **kwargs)
    engine = GameEngine(
        config, agents={"ai-0": agent or _ScriptedAgent(Direction.LEFT)},
    )
    return GameLoop(engine, stats)


def _send_player_into_wall(loop: GameLoop) -> None:
    player = loop.engine._find("player")
    player.body = deque([Position(0, 5), Position(1, 5), Position(2, 5)])
    player.direction = Direction.LEFT


async def _wait_for(predicate, timeout=2.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


class TestScheduling:
    @pytest.mark.asyncio
    async def test_ticks_while_playing(self):
        loop = _loop()
        loop.start()
        assert loop.running
        await _wait_for(lambda: loop.engine.tick >= 2)
        await loop.aclose()
        assert not loop.running

    @pytest.mark.asyncio
    async def test_start_arms_a_single_timer(self):
        loop = _loop()
        loop.start()
        task = loop.task
        loop.start()
        assert loop.task is task
        await loop.aclose()

    @pytest.mark.asyncio
    async def test_pause_stops_ticking(self):
        loop = _loop()
        loop.start()
        await _wait_for(lambda: loop.engine.tick >= 1)
        loop.pause()
        frozen = loop.engine.tick
        await asyncio.sleep(0.05)
        assert loop.engine.tick == frozen
        assert loop.engine.status == GameStatus.PAUSED
        assert not loop.running

    @pytest.mark.asyncio
    async def test_resume_rearms(self):
        loop = _loop()
        loop.start()
        loop.pause()
        loop.resume()
        assert loop.running
        await _wait_for(lambda: loop.engine.tick >= 1)
        await loop.aclose()

    @pytest.mark.asyncio
    async def test_resume_ignored_unless_paused(self):
        loop = _loop()
        loop.resume()
        assert not loop.running
        assert loop.engine.status == GameStatus.WAITING

    @pytest.mark.asyncio
    async def test_reset_disarms(self):
        loop = _loop()
        loop.start()
        await _wait_for(lambda: loop.engine.tick >= 1)
        loop.reset()
        assert not loop.running
        assert loop.engine.status == GameStatus.WAITING
        assert loop.engine.tick == 0
        await asyncio.sleep(0.05)
        assert loop.engine.tick == 0

    @pytest.mark.asyncio
    async def test_game_over_stops_ticking(self):
        loop = _loop()
        _send_player_into_wall(loop)
        loop.start()
        await _wait_for(lambda: not loop.running)
        assert loop.engine.status == GameStatus.GAME_OVER
        assert loop.engine.tick == 1
        await asyncio.sleep(0.05)
        assert loop.engine.tick == 1

    @pytest.mark.asyncio
    async def test_tick_error_pauses_game(self, caplog):
        loop = _loop(agent=_BrokenAgent())
        with caplog.at_level(logging.ERROR):
            loop.start()
            await _wait_for(lambda: not loop.running)
        assert loop.engine.status == GameStatus.PAUSED
        assert "Tick loop error" in caplog.text

    @pytest.mark.asyncio
    async def test_observer_error_still_pauses_and_ends_task(self, caplog):
        loop = _loop()

        def failing_observer(state):
            if state.tick >= 1:
                raise RuntimeError("observer crashed")

        loop.engine.subscribe(failing_observer)
        with caplog.at_level(logging.ERROR):
            loop.start()
            task = loop.task
            await _wait_for(lambda: not loop.running)
        assert task.done()
        assert task.exception() is None
        assert loop.engine.status == GameStatus.PAUSED
        assert "Tick loop error" in caplog.text
        assert "Could not pause game" in caplog.text

    def test_commands_pass_through(self):
        loop = _loop()
        assert loop.change_direction("player", Direction.UP)
        assert not loop.change_direction("player", Direction.DOWN)
        assert loop.change_skin("player", "neon")
        snap = loop.snapshot()
        assert snap.get_snake("player").direction == Direction.UP
        assert snap.get_snake("player").skin_id == "neon"


class TestSessionStats:
    @pytest.mark.asyncio
    async def test_game_recorded_once(self):
        loop = _loop()
        _send_player_into_wall(loop)
        loop.start()
        await _wait_for(lambda: loop.engine.status == GameStatus.GAME_OVER)
        loop.change_skin("player", "neon")
        assert loop.stats.total_games == 1
        assert loop.stats.longest_snake == 4
        assert loop.stats.total_game_time == pytest.approx(0.01)

    @pytest.mark.asyncio
    async def test_stats_accumulate_across_resets(self):
        stats = SessionStats()
        loop = _loop(stats=stats)
        _send_player_into_wall(loop)
        loop.start()
        await _wait_for(lambda: loop.engine.status == GameStatus.GAME_OVER)
        loop.reset()
        loop.start()
        await _wait_for(lambda: loop.engine.status == GameStatus.GAME_OVER)
        assert stats.total_games == 2
        assert stats.average_game_time == pytest.approx((0.01 + 0.05) / 2)
