"""Tests for headless simulation."""

import pytest

from snake_arena.config import GameConfig
from snake_arena.simulate import UNFINISHED, SimulationResult, run_batch, run_game
from snake_arena.state import GameStatus


@pytest.fixture()
def config():
    return GameConfig(board_width=14, board_height=14, ai_count=2, seed=5)


class TestRunGame:
    def test_without_autopilot_ends_quickly(self):
        config = GameConfig(board_width=30, board_height=30, ai_count=1, seed=1)
        state = run_game(config, autopilot=False)
        assert state.status == GameStatus.GAME_OVER
        # The player runs straight into the right wall by tick 25.
        assert state.tick <= 25

    def test_max_ticks_caps_the_game(self, config):
        state = run_game(config, max_ticks=3)
        assert state.tick <= 3

    def test_deterministic(self, config):
        assert run_game(config, max_ticks=200) == run_game(config, max_ticks=200)


class TestRunBatch:
    def test_counts_every_game(self, config):
        result = run_batch(config, games=4, max_ticks=300)
        assert isinstance(result, SimulationResult)
        assert result.games == 4
        assert sum(result.wins.values()) == 4
        finished = 4 - result.wins.get(UNFINISHED, 0)
        assert result.stats.total_games == finished
        assert result.total_ticks > 0

    def test_reproducible(self, config):
        a = run_batch(config, games=3, max_ticks=200)
        b = run_batch(config, games=3, max_ticks=200)
        assert a.wins == b.wins
        assert a.total_ticks == b.total_ticks

    def test_needs_a_game(self, config):
        with pytest.raises(ValueError, match="games"):
            run_batch(config, games=0)

    def test_summary_and_dict(self, config):
        result = run_batch(config, games=2, max_ticks=100)
        assert "2 games" in result.summary()
        data = result.to_dict()
        assert data["games"] == 2
        assert "ticks_per_second" in data
        assert data["stats"]["total_games"] == result.stats.total_games
