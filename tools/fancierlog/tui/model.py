"""
Data models for the log viewer.

This module defines the data structures shared by the tailer, the rule set,
the reformatter and the renderer, plus the two collaborator interfaces the
tailer depends on.

Purpose:
    The tail loop needs a common vocabulary for colors, rules and reformatted
    lines. Keeping these types in one place lets the core be tested with
    fakes (in-memory display, fixed clock, scripted liveness) without pulling
    in the terminal or the process table.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol


class ConsoleColor(Enum):
    """
    The sixteen classic console colors.

    Names match the ones written in config files (e.g. "DarkYellow").
    """
    BLACK = "Black"
    DARK_BLUE = "DarkBlue"
    DARK_GREEN = "DarkGreen"
    DARK_CYAN = "DarkCyan"
    DARK_RED = "DarkRed"
    DARK_MAGENTA = "DarkMagenta"
    DARK_YELLOW = "DarkYellow"
    GRAY = "Gray"
    DARK_GRAY = "DarkGray"
    BLUE = "Blue"
    GREEN = "Green"
    CYAN = "Cyan"
    RED = "Red"
    MAGENTA = "Magenta"
    YELLOW = "Yellow"
    WHITE = "White"

    @classmethod
    def parse(cls, name: str) -> "ConsoleColor":
        """
        Look up a color by its config-file name, ignoring case.

        Args:
            name: Color name such as "Yellow" or "darkred".

        Returns:
            ConsoleColor: The matching color.

        Raises:
            ValueError: If the name is not one of the sixteen colors.
        """
        wanted = name.strip().lower()
        for color in cls:
            if color.value.lower() == wanted:
                return color
        raise ValueError(f"unknown color {name.strip()!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DisplayColors:
    """The foreground/background pair used to render one line."""
    foreground: ConsoleColor
    background: ConsoleColor


@dataclass(frozen=True)
class ColorRule:
    """
    A single pattern -> color mapping.

    Attributes:
        pattern: Compiled regular expression searched against the raw line.
        foreground: Color applied to matching lines.
        background: Optional background that replaces the configured default
                    background for matching lines.
    """
    pattern: re.Pattern
    foreground: ConsoleColor
    background: Optional[ConsoleColor] = None


@dataclass(frozen=True)
class FormattedLine:
    """
    A raw log line after reformatting.

    Attributes:
        timestamp: Fresh timestamp rendered with the configured format.
        tag: Label extracted from a "[prefix: Tag]" segment, if any.
        body: The cleaned message text.
    """
    timestamp: str
    tag: Optional[str]
    body: str

    @property
    def text(self) -> str:
        """The canonical display form: "[timestamp]: (tag) body"."""
        if self.tag:
            return f"[{self.timestamp}]: ({self.tag}) {self.body}"
        return f"[{self.timestamp}]: {self.body}"


@dataclass
class TailState:
    """
    Read position bookkeeping for the tailed file.

    Attributes:
        path: The file being tailed.
        read_cursor: Byte offset of the first unread byte.
        last_known_length: File size observed at the previous poll.
    """
    path: Path
    read_cursor: int = 0
    last_known_length: int = 0

    def rewind(self) -> None:
        """Reset to the start of the file."""
        self.read_cursor = 0
        self.last_known_length = 0


class TailerState(Enum):
    """States of the FileTailer state machine."""
    WAITING_FOR_PRODUCER = "waiting-for-producer"
    TAILING = "tailing"
    PRODUCER_EXITED = "producer-exited"


class ProducerMonitor(Protocol):
    """Anything that can tell whether the log's producer is alive."""

    def is_running(self, process_name: str) -> bool:
        ...


class Renderer(Protocol):
    """Anything that can display colored lines and header banners."""

    def clear(self) -> None:
        ...

    def draw_header(self, text: str) -> None:
        ...

    def write_line(self, text: str, foreground: ConsoleColor,
                   background: ConsoleColor) -> None:
        ...
