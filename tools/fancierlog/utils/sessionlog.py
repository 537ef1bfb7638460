"""
Append-only session log for the viewer.

Everything the viewer says about itself (config problems, producer start and
stop, truncation, read errors) is shown on screen and also appended here, so
what happened while nobody was watching the terminal can be checked later.

Design Decisions:
    - One log file, append-only, shared by every run
    - Human-readable format with timestamps and structured fields
    - UTC timestamps so entries sort the same on every machine
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path

from .paths import app_dir

SESSION_LOG_FILENAME = "fancierlog.log"


def log_root() -> Path:
    """
    Return the directory holding the session log.

    Uses FANCIERLOG_LOG_ROOT if set, otherwise <app dir>/logs.
    """
    root = os.environ.get("FANCIERLOG_LOG_ROOT")
    if root:
        return Path(root)
    return app_dir() / "logs"


def session_log_path() -> Path:
    return log_root() / SESSION_LOG_FILENAME


class SessionLogger:
    """
    Minimal append-only logger.

    Attributes:
        producer: Name of the watched producer, recorded on every line.
        path: The filesystem path to the log file.

    Log Line Format:
        <timestamp> [producer=<name>] <LEVEL> <message>

    Example:
        >>> logger = SessionLogger("valheim")
        >>> logger.log("INFO", "Tailing LogOutput.log")
        # Writes: 2024-01-15T12:00:00Z [producer=valheim] INFO Tailing LogOutput.log
    """

    def __init__(self, producer: str, path: Path | None = None) -> None:
        self.producer = producer
        self.path = path or session_log_path()

    def _ts(self) -> str:
        return (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat(timespec="seconds")
            .replace("+00:00", "Z")
        )

    def log(self, level: str, message: str) -> None:
        """
        Append one line per message line to the session log.

        Args:
            level: Severity such as "INFO", "WARN" or "ERROR".
            message: Text to record; embedded newlines become separate lines.

        Raises:
            OSError: If the log directory or file cannot be written.
        """
        # Construction never touches the disk; the directory appears here
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            for part in message.split("\n"):
                f.write(f"{self._ts()} [producer={self.producer}] {level.upper()} {part}\n")
