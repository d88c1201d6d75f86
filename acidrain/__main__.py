"""Entry point for ``python -m acidrain``.

Loads the YAML config, builds a demo server with a handful of players,
and either runs it headless and prints the chat log or opens a Pygame
window to watch the storms roll over them.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from acidrain.messaging.lang import Translator
from acidrain.simulation.config import SimulationConfig, load_hazard_config
from acidrain.simulation.engine import ServerSimulation

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acidrain",
        description="Acid rain - hazardous weather for a block world server",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--hazard-config",
        type=pathlib.Path,
        default=None,
        help="Separate acid-rain config; created with defaults if missing",
    )
    parser.add_argument(
        "--lang",
        type=pathlib.Path,
        default=None,
        help="YAML language file overriding the built-in English strings",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and print the chat log",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=3000,
        help="Frames to simulate in headless mode (default: 3000)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=14,
        help="Pixel size per map column (default: 14)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=25.0,
        help="Server frames per second (default: 25)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create the server, run it."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.hazard_config is not None:
        config.hazard = load_hazard_config(args.hazard_config)
    translator = Translator.from_yaml(args.lang) if args.lang else Translator()
    server = ServerSimulation(config=config, translator=translator)

    if args.headless:
        server.run(args.frames)
        for message in server.chat.messages:
            target = message.recipient or "all"
            print(f"{message.world_ms / 1000:8.1f}s  [{target}] {message.text}")
        return

    from acidrain.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        server=server,
        cell_size=args.cell_size,
        frames_per_second=args.speed,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
