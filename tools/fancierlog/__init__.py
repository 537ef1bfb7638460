"""
fancierlog - a colorizing live viewer for game server logs.

This package follows the console log of a dedicated server (Valheim with
BepInEx by default), rewrites every new line in one consistent
"[time]: (source) message" shape, colors it by pattern and prints it to the
terminal as it is written.

Purpose:
    Raw server logs mix several timestamp styles and bracketed prefixes,
    which makes them hard to scan while the server runs. fancierlog gives
    the operator a clean, colored live view, waits for the server to start,
    and clears the log when the server stops.

Package Structure:
    - cli.py: Command-line entry point
    - errors.py: Exception types
    - tui/: The tail loop, line reformatting, color rules and rendering
    - utils/: Config file, paths, session log and process detection

Usage:
    Run as a module: python -m fancierlog [--config PATH]
"""

__version__ = "1.1"
