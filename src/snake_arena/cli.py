"""Command-line tools for Snake Arena."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

logger = logging.getLogger(__name__)

# CLI flag -> GameConfig field.
_CONFIG_FLAGS = {
    "board_width": "board_width",
    "board_height": "board_height",
    "ai_count": "ai_count",
    "food_count": "food_count",
    "game_speed": "game_speed",
    "seed": "seed",
}


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    parser.add_argument("--board-width", type=int, default=None)
    parser.add_argument("--board-height", type=int, default=None)
    parser.add_argument("--ai-count", type=int, default=None)
    parser.add_argument("--food-count", type=int, default=None)
    parser.add_argument("--game-speed", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--difficulty", type=str, action="append", default=None,
        choices=["easy", "medium", "hard"],
        help="Tier per AI snake, repeat once per opponent.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-arena",
        description="Snake Arena headless simulation and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser("simulate", help="Play games without a display.")
    _add_config_flags(sim_p)
    sim_p.add_argument("--games", type=int, default=10)
    sim_p.add_argument("--max-ticks", type=int, default=10_000)
    sim_p.add_argument(
        "--no-autopilot", action="store_true",
        help="Leave the player snake on its starting heading.",
    )

    # --- config ---
    cfg_p = sub.add_parser("config", help="Write a game config JSON file.")
    _add_config_flags(cfg_p)
    cfg_p.add_argument("output", help="Destination JSON path.")

    return parser


def _config_from_args(args: argparse.Namespace):
    from snake_arena.config import GameConfig

    config = GameConfig.load(args.config) if args.config else GameConfig()

    overrides: dict = {}
    for cli_name, cfg_name in _CONFIG_FLAGS.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    if args.difficulty:
        overrides["ai_difficulties"] = tuple(args.difficulty)

    if overrides:
        config = dataclasses.replace(config, **overrides)
    return config


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_arena.simulate import run_batch

    config = _config_from_args(args)
    result = run_batch(
        config,
        args.games,
        autopilot=not args.no_autopilot,
        max_ticks=args.max_ticks,
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    config.save(args.output)
    print(f"Wrote config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-arena`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
