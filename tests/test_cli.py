"""Tests for the command-line interface."""

import json

from snake_arena.cli import _build_parser, _config_from_args, main
from snake_arena.config import GameConfig


class TestParser:
    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.games == 10
        assert args.max_ticks == 10_000
        assert not args.no_autopilot
        assert args.board_width is None

    def test_flags_override_defaults(self):
        args = _build_parser().parse_args([
            "simulate", "--board-width", "20", "--ai-count", "2",
            "--difficulty", "easy", "--difficulty", "hard",
        ])
        config = _config_from_args(args)
        assert config.board_width == 20
        assert config.board_height == 30
        assert config.ai_count == 2
        assert [t.value for t in config.ai_difficulties] == ["easy", "hard"]

    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / "game.json"
        GameConfig(board_width=20, board_height=20, food_count=2).save(path)
        args = _build_parser().parse_args([
            "simulate", "--config", str(path), "--food-count", "7",
        ])
        config = _config_from_args(args)
        assert config.board_width == 20
        assert config.food_count == 7


class TestMain:
    def test_no_command(self):
        assert main([]) == 1

    def test_simulate(self, capsys):
        code = main([
            "simulate", "--games", "2", "--max-ticks", "100",
            "--board-width", "14", "--board-height", "14",
            "--ai-count", "1", "--seed", "3",
        ])
        assert code == 0
        assert "Simulation: 2 games" in capsys.readouterr().out

    def test_config_written(self, tmp_path):
        out = tmp_path / "cfg.json"
        assert main(["config", str(out), "--ai-count", "2", "--seed", "9"]) == 0
        data = json.loads(out.read_text())
        assert data["ai_count"] == 2
        assert data["seed"] == 9

    def test_invalid_config_exits_2(self, tmp_path):
        out = tmp_path / "cfg.json"
        assert main(["config", str(out), "--ai-count", "9"]) == 2
        assert not out.exists()

    def test_malformed_config_file_exits_2(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"ai_count": 1, "ai_difficulties": [1]}))
        assert main(["simulate", "--config", str(path), "--games", "1"]) == 2

    def test_unknown_config_key_exits_2(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"ai_count": 1, "lives": 3}))
        assert main(["simulate", "--config", str(path), "--games", "1"]) == 2
