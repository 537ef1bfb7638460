"""
Per-line text surgery for tailed log output.

Producers write lines in a handful of shapes, for example:

    [Info   : BepInEx] Loading plugins
    [Warning: Mod Name] 03/14/2023 18:22:01: Something odd
    2021/01/01 00:00:00: [Mod: Warning] Low durability

LineReformatter strips the producer's own prefix and timestamp, keeps the
label from the bracketed prefix (the "tag"), and rebuilds every line in one
canonical shape with a fresh timestamp:

    [06:22:01.123456 PM]: (BepInEx) Loading plugins

The original timestamp is discarded on purpose; the viewer shows when a
line was surfaced, not when it was written.
"""

import re
from datetime import datetime
from typing import Optional

from .model import FormattedLine


# Output of this very module: "[ts]: " optionally followed by "(tag) ".
# Re-tailing a file of our own output must not nest prefixes.
CANONICAL_PREFIX = re.compile(r"^\[(?P<stamp>[^\[\]]*)\]: (?:\((?P<tag>[^()]*)\) )?")

# "[prefix: Tag]" -> "Tag". The label sits after the last colon inside a
# bracketed segment.
TAG_PATTERN = re.compile(r"\[[^\[\]]*:(?P<tag>[^\[\]:]*)\]")

# The first bracketed segment plus the space (or ": ") after it.
BRACKET_SEGMENT = re.compile(r"\[.*?\]:? ")

# Letters before the last colon mean "[Label: Tag]", not a time of day.
LETTERS = re.compile(r"[A-Za-z]")

# "MM/DD/YYYY HH:MM:SS: " and the year-first "YYYY/MM/DD HH:MM:SS: ".
LEGACY_TIMESTAMP = re.compile(
    r"^(?:\d{2}/\d{2}/\d{4}|\d{4}/\d{2}/\d{2}) "
    r"\d{2}:\d{2}:\d{2}:\s"
)

DEFAULT_TIMESTAMP_FORMAT = "%I:%M:%S.%f %p"


def extract_tag(line: str) -> Optional[str]:
    """
    Return the trimmed label of the first "[prefix: Tag]" segment.

    Args:
        line: A raw log line.

    Returns:
        The label, or None when there is no such segment or it is blank.
    """
    match = TAG_PATTERN.search(line)
    if not match:
        return None
    tag = match.group("tag").strip()
    return tag or None


def strip_legacy_prefix(line: str) -> str:
    """Remove the first bracketed segment and a leading legacy timestamp."""
    line = BRACKET_SEGMENT.sub("", line, count=1)
    line = LEGACY_TIMESTAMP.sub("", line, count=1)
    return line.lstrip()


def own_output_prefix(line: str) -> Optional[re.Match]:
    """
    Match the "[ts]: (tag) " prefix this module writes, if the line has it.

    A producer line such as "[Info: Mod]: hello" has the same outline, so
    the bracket only counts as our timestamp when a "(tag) " follows it or
    when nothing before its last colon is a letter.
    """
    match = CANONICAL_PREFIX.match(line)
    if not match:
        return None
    if match.group("tag") is not None:
        return match
    before_last_colon = match.group("stamp").rpartition(":")[0]
    if LETTERS.search(before_last_colon):
        return None
    return match


class LineReformatter:
    """
    Rebuild raw log lines in the canonical "[ts]: (tag) body" form.

    Attributes:
        timestamp_format: strftime format used for the fresh timestamp.

    Example:
        >>> fmt = LineReformatter("%H:%M:%S")
        >>> now = datetime(2024, 1, 1, 12, 0, 0)
        >>> fmt.reformat("[INFO: AzuAntiCheat] kicked", now).text
        '[12:00:00]: (AzuAntiCheat) kicked'
    """

    def __init__(self, timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT):
        self.timestamp_format = timestamp_format

    def timestamp(self, now: datetime) -> str:
        return now.strftime(self.timestamp_format)

    def reformat(self, raw_line: str, now: datetime) -> FormattedLine:
        """
        Reformat a single raw line.

        Steps, in order:
            1. Take the tag from a "[prefix: Tag]" segment
            2. Drop the first "[...] " segment
            3. Drop a leading "MM/DD/YYYY HH:MM:SS: " timestamp
            4. Trim leading whitespace
            5. Stamp with the current time

        A line that already carries our own canonical prefix keeps its tag
        and body; only the timestamp is replaced.

        Args:
            raw_line: One line of producer output, without line terminator.
            now: The time to stamp the line with.

        Returns:
            FormattedLine: Timestamp, tag and cleaned body.
        """
        canonical = own_output_prefix(raw_line)
        if canonical:
            tag = canonical.group("tag")
            tag = tag.strip() if tag else None
            body = raw_line[canonical.end():].lstrip()
            return FormattedLine(self.timestamp(now), tag or None, body)

        tag = extract_tag(raw_line)
        body = strip_legacy_prefix(raw_line)
        return FormattedLine(self.timestamp(now), tag, body)

    def stamp(self, body: str, tag: Optional[str], now: datetime) -> FormattedLine:
        """Build a canonical line for text the viewer itself emits."""
        return FormattedLine(self.timestamp(now), tag, body)
