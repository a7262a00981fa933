#!/usr/bin/env python3
"""
Run a command whenever watched files are modified.

Usage:
    watchrun make
    watchrun -w -d src tests -- pytest -x
    watchrun -c -x build -- ./build.sh
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import WatchConfig, env_flag, ENV_COALESCE, ENV_WAIT
from .exceptions import ConfigError
from .process import WatchRunProcess


logger = logging.getLogger("watchrun")


def _load_env() -> None:
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watchrun",
        description="Run a command whenever watched files are modified",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rebuild on every save under the current directory
  watchrun make

  # Run tests, waiting for each run to finish before watching again
  watchrun -w -d src tests -- pytest -x

  # One reaction per batch of changes, skipping the build directory
  watchrun -c -x build -- ./build.sh

Use -- to end option lists before the command.
        """,
    )
    parser.add_argument("-w", "--wait", action="store_true", default=env_flag(ENV_WAIT),
                        help="Wait for the command to exit before watching again")
    parser.add_argument("-c", "--coalesce", action="store_true", default=env_flag(ENV_COALESCE),
                        help="Run the command once per batch of simultaneous changes")
    parser.add_argument("-d", "--dir", dest="watch_entries", nargs="+", action="extend", default=[],
                        metavar="PATH", help="Files or directories to watch (default: current directory)")
    parser.add_argument("-x", "--exclude", dest="exclude_entries", nargs="+", action="extend", default=[],
                        metavar="PATH", help="Paths to exclude (exact match after resolving)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run on change")
    return parser


def parse_config(argv: Optional[List[str]] = None) -> WatchConfig:
    """
    Parse command-line arguments into a WatchConfig.

    Exits with status 2 on bad flags or a missing command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        parser.error("no command.")

    config = WatchConfig.from_env(
        command=command,
        watch_entries=args.watch_entries,
        exclude_entries=args.exclude_entries,
        wait=args.wait,
        coalesce=args.coalesce,
        verbose=args.verbose,
    )
    return config


def main(argv: Optional[List[str]] = None) -> int:
    _load_env()
    config = parse_config(argv)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        process = WatchRunProcess(config)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Running {' '.join(config.command)!r} on change (wait={config.wait}, coalesce={config.coalesce})")

    try:
        process.start()
    except KeyboardInterrupt:
        logger.info("Stopped watching")
    return 0


if __name__ == "__main__":
    sys.exit(main())
