"""
Filesystem locations used by fancierlog.

All path logic lives here so the CLI, the config loader and the session log
agree on where things are.

Design Decisions:
    - Everything is resolved relative to a single base directory, which
      defaults to the current working directory (where the viewer is run
      from, next to its config.txt)
    - FANCIERLOG_HOME overrides the base directory
    - All functions return pathlib.Path objects
"""

import os
from pathlib import Path

CONFIG_FILENAME = "config.txt"
DEFAULT_LOG_FILENAME = "LogOutput.log"


def app_dir() -> Path:
    """
    Return the base directory for config and default log files.

    Returns:
        Path: FANCIERLOG_HOME if set, otherwise the current directory.

    Example:
        >>> os.environ["FANCIERLOG_HOME"] = "/srv/valheim"
        >>> app_dir()
        PosixPath('/srv/valheim')
    """
    home = os.environ.get("FANCIERLOG_HOME")
    if home:
        return Path(home).expanduser()
    return Path.cwd()


def config_path() -> Path:
    """Return the default location of config.txt."""
    return app_dir() / CONFIG_FILENAME


def default_log_path() -> Path:
    """
    Return the log file tailed when the config does not name one.

    This is where a BepInEx-style server is typically pointed to write its
    console output.
    """
    return app_dir() / DEFAULT_LOG_FILENAME
