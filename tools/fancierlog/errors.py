"""
Error types raised by fancierlog.

Every failure the viewer knows how to describe derives from FancierLogError,
so the CLI can catch the whole family in one place. Most of these are
recoverable: the tailer turns them into notices on the display and keeps
polling. Only a FileAccessError raised while opening the target file at
startup is fatal.
"""


class FancierLogError(Exception):
    """Base class for all fancierlog errors."""


class ConfigMissingError(FancierLogError):
    """The configuration file does not exist (defaults are regenerated)."""


class ConfigMalformedError(FancierLogError):
    """
    A configuration value could not be parsed.

    Attributes:
        key: The configuration key (or rule pattern) that was rejected.
        value: The raw value text from the file.
    """

    def __init__(self, key: str, value: str, reason: str = ""):
        self.key = key
        self.value = value
        message = f"Invalid value for {key}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class FileAccessError(FancierLogError):
    """The target log file could not be opened or read."""


class PatternInvalidError(FancierLogError):
    """A color rule pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class ProducerCheckError(FancierLogError):
    """The process table could not be queried for the producer."""
