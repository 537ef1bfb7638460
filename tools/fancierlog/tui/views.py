"""
Terminal rendering for the log viewer.

The tailer hands every line to a renderer together with a foreground and a
background color. AnsiRenderer turns those into ANSI escape sequences using
colorama, which also makes the escapes work in classic Windows consoles
where dedicated game servers are usually run.

Purpose:
    Keeping terminal output behind a small object (clear, draw_header,
    write_line) lets the tail loop be tested with an in-memory display.
"""

import shutil
import sys

import colorama
from colorama import Back, Cursor, Fore, Style
from colorama.ansi import clear_screen

from .model import ConsoleColor

FOREGROUND_CODES = {
    ConsoleColor.BLACK: Fore.BLACK,
    ConsoleColor.DARK_BLUE: Fore.BLUE,
    ConsoleColor.DARK_GREEN: Fore.GREEN,
    ConsoleColor.DARK_CYAN: Fore.CYAN,
    ConsoleColor.DARK_RED: Fore.RED,
    ConsoleColor.DARK_MAGENTA: Fore.MAGENTA,
    ConsoleColor.DARK_YELLOW: Fore.YELLOW,
    ConsoleColor.GRAY: Fore.WHITE,
    ConsoleColor.DARK_GRAY: Fore.LIGHTBLACK_EX,
    ConsoleColor.BLUE: Fore.LIGHTBLUE_EX,
    ConsoleColor.GREEN: Fore.LIGHTGREEN_EX,
    ConsoleColor.CYAN: Fore.LIGHTCYAN_EX,
    ConsoleColor.RED: Fore.LIGHTRED_EX,
    ConsoleColor.MAGENTA: Fore.LIGHTMAGENTA_EX,
    ConsoleColor.YELLOW: Fore.LIGHTYELLOW_EX,
    ConsoleColor.WHITE: Fore.LIGHTWHITE_EX,
}

BACKGROUND_CODES = {
    ConsoleColor.BLACK: Back.BLACK,
    ConsoleColor.DARK_BLUE: Back.BLUE,
    ConsoleColor.DARK_GREEN: Back.GREEN,
    ConsoleColor.DARK_CYAN: Back.CYAN,
    ConsoleColor.DARK_RED: Back.RED,
    ConsoleColor.DARK_MAGENTA: Back.MAGENTA,
    ConsoleColor.DARK_YELLOW: Back.YELLOW,
    ConsoleColor.GRAY: Back.WHITE,
    ConsoleColor.DARK_GRAY: Back.LIGHTBLACK_EX,
    ConsoleColor.BLUE: Back.LIGHTBLUE_EX,
    ConsoleColor.GREEN: Back.LIGHTGREEN_EX,
    ConsoleColor.CYAN: Back.LIGHTCYAN_EX,
    ConsoleColor.RED: Back.LIGHTRED_EX,
    ConsoleColor.MAGENTA: Back.LIGHTMAGENTA_EX,
    ConsoleColor.YELLOW: Back.LIGHTYELLOW_EX,
    ConsoleColor.WHITE: Back.LIGHTWHITE_EX,
}

# Erase the screen and home the cursor
CLEAR_SCREEN = clear_screen() + Cursor.POS(1, 1)


class AnsiRenderer:
    """
    Write colored lines to a text stream with ANSI escapes.

    Attributes:
        stream: Where output goes (stdout by default).
        header_color: Color of the centered header banner.
        background: Background behind the header banner.
    """

    def __init__(self, stream=None, header_color: ConsoleColor = ConsoleColor.YELLOW,
                 background: ConsoleColor = ConsoleColor.BLACK):
        # Enable VT processing on Windows consoles; no-op elsewhere
        colorama.just_fix_windows_console()
        self.stream = stream or sys.stdout
        self.header_color = header_color
        self.background = background

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def clear(self) -> None:
        self._write(CLEAR_SCREEN)

    def draw_header(self, text: str) -> None:
        """Write text centered on the terminal width, then a blank line."""
        width = shutil.get_terminal_size().columns
        padding = " " * max(0, (width - len(text)) // 2)
        self.write_line(padding + text, self.header_color, self.background)
        self._write("\n")

    def write_line(self, text: str, foreground: ConsoleColor,
                   background: ConsoleColor) -> None:
        self._write(
            f"{FOREGROUND_CODES[foreground]}{BACKGROUND_CODES[background]}"
            f"{text}{Style.RESET_ALL}\n"
        )
