"""
Pattern-based color selection for log lines.

A ColorRuleSet is an ordered list of (pattern, colors) rules. Each raw log
line is searched against the patterns in order and the first match decides
its colors; later rules are never consulted once one matches.

Design Decisions:
    - Insertion order is priority order, so the config file reads top-down
    - Patterns use re.search (match anywhere), not a full match
    - A rule can carry its own background, replacing the default background
      for matching lines (used for the AzuAntiCheat highlight)
    - Bad patterns are dropped individually; the rest of the set still loads
"""

import re
from typing import Iterable, List, Optional, Tuple

from ..errors import PatternInvalidError
from .model import ColorRule, ConsoleColor, DisplayColors


# Rules written to a fresh config file, highest priority first.
DEFAULT_RULES: List[Tuple[str, str]] = [
    ("Error|Failed", "Red"),
    ("AzuAntiCheat", "Black on Red"),
    ("Warning", "Yellow"),
    ("Steam game server initialized", "Blue"),
    ("Message", "Cyan"),
    ("Unity Log", "Magenta"),
    ("BepInEx", "Green"),
]


def parse_colors(text: str) -> Tuple[ConsoleColor, Optional[ConsoleColor]]:
    """
    Parse a rule's color setting.

    Accepts either a single color ("Yellow") or a foreground with a
    background override ("Black on Red").

    Args:
        text: Color setting from the config file.

    Returns:
        Tuple of (foreground, background or None).

    Raises:
        ValueError: If either color name is unknown.
    """
    parts = re.split(r"\s+on\s+", text.strip(), maxsplit=1, flags=re.IGNORECASE)
    foreground = ConsoleColor.parse(parts[0])
    background = ConsoleColor.parse(parts[1]) if len(parts) > 1 else None
    return foreground, background


class ColorRuleSet:
    """
    Ordered pattern -> color rules with first-match-wins lookup.

    Attributes:
        default_foreground: Foreground used when no rule matches.
        default_background: Background used unless a matching rule
                            overrides it.

    Example:
        >>> rules = ColorRuleSet(ConsoleColor.WHITE, ConsoleColor.BLACK)
        >>> rule = rules.add("Warning", ConsoleColor.YELLOW)
        >>> rules.classify("[Mod: Warning] Low durability").foreground
        <ConsoleColor.YELLOW: 'Yellow'>
    """

    def __init__(self, default_foreground: ConsoleColor = ConsoleColor.WHITE,
                 default_background: ConsoleColor = ConsoleColor.BLACK):
        self.default_foreground = default_foreground
        self.default_background = default_background
        self._rules: List[ColorRule] = []

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def defaults(self) -> DisplayColors:
        """The colors used for lines that match no rule."""
        return DisplayColors(self.default_foreground, self.default_background)

    def add(self, pattern: str, foreground: ConsoleColor,
            background: Optional[ConsoleColor] = None) -> ColorRule:
        """
        Append a rule at the lowest priority.

        Args:
            pattern: Regular expression searched against raw lines.
            foreground: Color for matching lines.
            background: Optional background override for matching lines.

        Returns:
            ColorRule: The rule that was added.

        Raises:
            PatternInvalidError: If the pattern does not compile.
        """
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise PatternInvalidError(pattern, str(exc)) from exc

        rule = ColorRule(compiled, foreground, background)
        self._rules.append(rule)
        return rule

    def clear(self) -> None:
        self._rules.clear()

    def load(self, entries: Iterable[Tuple[str, ConsoleColor, Optional[ConsoleColor]]]) -> List[str]:
        """
        Replace every rule with the given entries, in order.

        Invalid patterns are skipped so one typo in the config file does not
        cost the user the whole color scheme.

        Args:
            entries: (pattern, foreground, background) tuples in priority order.

        Returns:
            List[str]: One message per rule that was dropped.
        """
        self.clear()
        problems = []
        for pattern, foreground, background in entries:
            try:
                self.add(pattern, foreground, background)
            except PatternInvalidError as exc:
                problems.append(f"{exc}; rule dropped")
        return problems

    def classify(self, raw_line: str) -> DisplayColors:
        """
        Pick display colors for a raw log line.

        Args:
            raw_line: The line as read from the file, before reformatting.

        Returns:
            DisplayColors: Colors of the first matching rule, or the defaults.
        """
        for rule in self._rules:
            if rule.pattern.search(raw_line):
                background = rule.background
                if background is None:
                    background = self.default_background
                return DisplayColors(rule.foreground, background)
        return self.defaults
