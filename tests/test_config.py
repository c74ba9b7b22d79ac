"""Tests for game configuration and spawn layout."""

import dataclasses
import json
import logging

import pytest

from snake_arena.ai.difficulty import DifficultyTier
from snake_arena.config import PLAYER_ID, PLAYER_START, GameConfig
from snake_arena.snake import Direction, Position


class TestGameConfigDefaults:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.board_width == 30
        assert cfg.board_height == 30
        assert cfg.player_count == 1
        assert cfg.ai_count == 3
        assert cfg.game_speed == 200
        assert cfg.food_count == 5
        assert cfg.ai_difficulties is None

    def test_tick_interval_in_seconds(self):
        assert GameConfig(game_speed=150).tick_interval == pytest.approx(0.15)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            GameConfig().ai_count = 4


class TestGameConfigValidation:
    def test_single_player_only(self):
        with pytest.raises(ValueError, match="player_count"):
            GameConfig(player_count=2)

    @pytest.mark.parametrize("ai_count", [0, 6])
    def test_ai_count_range(self, ai_count):
        with pytest.raises(ValueError, match="ai_count"):
            GameConfig(ai_count=ai_count)

    def test_game_speed_positive(self):
        with pytest.raises(ValueError, match="game_speed"):
            GameConfig(game_speed=0)

    def test_food_count_positive(self):
        with pytest.raises(ValueError, match="food_count"):
            GameConfig(food_count=0)

    def test_board_too_narrow_for_player(self):
        with pytest.raises(ValueError, match="too small"):
            GameConfig(board_width=5, board_height=10, ai_count=1)

    def test_board_too_short_for_ai_column(self):
        with pytest.raises(ValueError, match="too small"):
            GameConfig(board_width=12, board_height=8, ai_count=5)

    def test_overlapping_spawns(self):
        with pytest.raises(ValueError, match="overlaps"):
            GameConfig(board_width=8, board_height=8, ai_count=2)

    def test_food_beyond_free_cells_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            GameConfig(board_width=6, board_height=6, ai_count=1, food_count=40)
        assert "food_count" in caplog.text


class TestDifficulties:
    def test_default_tiers(self):
        cfg = GameConfig(ai_count=4)
        assert cfg.difficulty_for(0) == DifficultyTier.HARD
        assert cfg.difficulty_for(1) == DifficultyTier.MEDIUM
        assert cfg.difficulty_for(2) == DifficultyTier.EASY
        assert cfg.difficulty_for(3) == DifficultyTier.EASY

    def test_strings_normalized(self):
        cfg = GameConfig(ai_count=2, ai_difficulties=("easy", "HARD"))
        assert cfg.ai_difficulties == (DifficultyTier.EASY, DifficultyTier.HARD)
        assert cfg.difficulty_for(1) == DifficultyTier.HARD

    def test_length_must_match(self):
        with pytest.raises(ValueError, match="ai_difficulties"):
            GameConfig(ai_count=2, ai_difficulties=("easy",))

    def test_unknown_tier(self):
        with pytest.raises(ValueError, match="Unknown difficulty"):
            GameConfig(ai_count=1, ai_difficulties=("brutal",))

    def test_non_string_tier(self):
        with pytest.raises(ValueError, match="Unknown difficulty"):
            GameConfig(ai_count=1, ai_difficulties=(1,))


class TestSpawnLayout:
    def test_player_first(self):
        layout = GameConfig().spawn_layout()
        player = layout[0]
        assert player.snake_id == PLAYER_ID
        assert player.head == PLAYER_START
        assert player.direction == Direction.RIGHT
        assert not player.is_ai
        assert player.skin_id == "classic"

    def test_ai_slots(self):
        layout = GameConfig(ai_count=2).spawn_layout()
        assert [s.snake_id for s in layout] == ["player", "ai-0", "ai-1"]
        assert layout[1].head == Position(27, 27)
        assert layout[2].head == Position(27, 25)
        assert all(s.direction == Direction.LEFT for s in layout[1:])
        assert all(s.is_ai for s in layout[1:])

    def test_distinct_colors(self):
        layout = GameConfig(ai_count=5).spawn_layout()
        assert len({s.color for s in layout}) == 6


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(
            board_width=20, board_height=16, ai_count=2,
            ai_difficulties=("hard", "easy"), seed=7,
        )
        path = tmp_path / "nested" / "game.json"
        cfg.save(path)
        assert GameConfig.load(path) == cfg

    def test_to_dict_is_json_friendly(self):
        cfg = GameConfig(ai_count=1, ai_difficulties=("medium",))
        data = json.loads(json.dumps(cfg.to_dict()))
        assert data["ai_difficulties"] == ["medium"]
        assert data["game_speed"] == 200

    def test_load_rejects_non_string_tier(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"ai_count": 1, "ai_difficulties": [1]}))
        with pytest.raises(ValueError, match="Unknown difficulty"):
            GameConfig.load(path)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="Unknown config keys"):
            GameConfig.from_dict({"ai_count": 1, "lives": 3})

    @pytest.mark.parametrize("data", [
        {"board_width": "wide"},
        {"food_count": True},
        {"seed": 1.5},
        {"ai_count": 1, "ai_difficulties": "easy"},
    ])
    def test_badly_typed_values_rejected(self, data):
        with pytest.raises(ValueError):
            GameConfig.from_dict(data)

    def test_non_object_rejected(self):
        with pytest.raises(ValueError, match="JSON object"):
            GameConfig.from_dict([1, 2])
