"""Entry point: ``python -m tactics``.

Supports two modes:
  - ``python -m tactics``            → Launch the FastAPI server (player-driven allies)
  - ``python -m tactics cli``        → Headless auto-battle of the sample skirmish
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic Grid Tactics Combat Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI combat server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--width", type=int, default=12)
    srv.add_argument("--height", type=int, default=12)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless AI-vs-AI encounter")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--width", type=int, default=12)
    cli.add_argument("--height", type=int, default=12)
    cli.add_argument("--max-rounds", type=int, default=100)
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from tactics.api.app import create_app
    from tactics.config import CombatConfig

    config = CombatConfig(
        seed=args.seed,
        grid_width=args.width,
        grid_height=args.height,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from tactics.ai.brain import CombatBrain
    from tactics.config import CombatConfig
    from tactics.core.enums import Faction
    from tactics.core.roster import sample_skirmish
    from tactics.engine.encounter import EncounterCoordinator
    from tactics.engine.runner import EncounterRunner
    from tactics.systems.rng import EncounterRNG
    from tactics.utils.logging import setup_logging
    from tactics.utils.replay import ReplayRecorder

    config = CombatConfig(
        seed=args.seed,
        grid_width=args.width,
        grid_height=args.height,
        max_rounds=args.max_rounds,
        replay_file=args.replay,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    encounter = EncounterCoordinator(config=config, rng=EncounterRNG(config.seed))
    allies, enemies = sample_skirmish()
    if not encounter.start_combat(allies, enemies):
        logger.info("Encounter did not start: %s", encounter.outcome.name)
        return

    brain = CombatBrain()
    recorder = ReplayRecorder(config.replay_file, config.seed)
    runner = EncounterRunner(
        encounter, {Faction.ALLY: brain, Faction.ENEMY: brain}, recorder=recorder,
    )
    try:
        summary = runner.run()
    finally:
        recorder.flush()

    logger.info(
        "Done: %s in %d rounds. Replay written to %s",
        summary.outcome.name, summary.rounds, config.replay_file,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
