#!/usr/bin/env python3
"""
fancierlog - command-line entry point.

Responsibilities:
    - Load environment overrides from .env
    - Load config.txt, generating it with defaults when missing
    - Wire the config, color rules, reformatter, renderer, process monitor
      and session log into a FileTailer and run it forever
    - Regenerate a default config on request (--init-config)

Usage:
    python -m fancierlog [--config PATH] [--init-config]

Examples:
    python -m fancierlog
    python -m fancierlog --config D:\\servers\\valheim\\config.txt
    python -m fancierlog --init-config

Exit Codes:
    0: Normal exit (Ctrl+C, or --init-config done)
    1: The log file could not be opened at startup
"""

import argparse
import os
import sys
from pathlib import Path

from . import __version__
from .errors import FileAccessError
from .tui.reformat import LineReformatter
from .tui.tailer import FileTailer
from .tui.views import AnsiRenderer
from .utils.config import ViewerConfig, load_or_init_config, write_config
from .utils.paths import app_dir, config_path
from .utils.producer import ProcessMonitor
from .utils.sessionlog import SessionLogger


def load_dotenv() -> None:
    """
    Load <app dir>/.env into os.environ if present.

    Existing environment variables win (setdefault), so a .env file only
    fills in what is not already configured.
    """
    env_path = app_dir() / ".env"

    if not env_path.exists():
        return

    with env_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            # Split on first = only (value might contain =)
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fancierlog",
        description="Follow a server log file and print it reformatted and colored.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.txt (default: ./config.txt or $FANCIERLOG_HOME/config.txt)",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a config file with default settings and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_tailer(config: ViewerConfig, renderer=None) -> tuple:
    """
    Assemble a FileTailer from a config.

    Returns:
        Tuple of (tailer, notices about dropped color rules).
    """
    rules, problems = config.build_rule_set()
    renderer = renderer or AnsiRenderer(background=config.background)
    tailer = FileTailer(
        config,
        rules,
        LineReformatter(config.timestamp_format),
        renderer,
        monitor=ProcessMonitor(),
        session_log=SessionLogger(config.producer_name),
    )
    return tailer, problems


def main(argv=None) -> None:
    """
    Main entry point for the fancierlog CLI.

    Exit Codes:
        0: Success
        1: The log file could not be opened
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    path = args.config or config_path()

    if args.init_config:
        write_config(ViewerConfig(), path)
        print(f"Wrote default config to {path}")
        sys.exit(0)

    config, notices = load_or_init_config(path)
    tailer, problems = build_tailer(config)

    try:
        tailer.run(notices + problems)
    except FileAccessError as exc:
        print(f"fancierlog: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
