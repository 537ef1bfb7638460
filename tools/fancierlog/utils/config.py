"""
Loading and saving the viewer configuration file.

The config file is flat text, one directive per line:

    C:\\valheim\\LogOutput.log
    SkipProducerCheck = False
    ProducerName = valheim
    DateTimeFormat = %I:%M:%S.%f %p
    ForegroundColor = White
    BackgroundColor = Black
    PollInterval = 0.05
    Error|Failed = Red
    AzuAntiCheat = Black on Red
    Warning = Yellow

The first line is the log file path. Lines whose key is one of the known
settings are order-insensitive. Every other "Pattern = Color" line becomes
a color rule, in file order.

Design Decisions:
    - Settings live in a ViewerConfig object passed to the tailer, not in
      module globals, so tests can build one directly
    - A value that does not parse keeps its default and yields a notice;
      loading never aborts halfway
    - Rule lines split on the last "=" so patterns may contain "="
    - A missing file is regenerated with defaults
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import ConfigMalformedError, ConfigMissingError
from ..tui.colors import DEFAULT_RULES, ColorRuleSet, parse_colors
from ..tui.model import ConsoleColor
from ..tui.reformat import DEFAULT_TIMESTAMP_FORMAT
from .paths import default_log_path

RuleEntry = Tuple[str, ConsoleColor, Optional[ConsoleColor]]

DEFAULT_PRODUCER = "valheim"
DEFAULT_POLL_INTERVAL = 0.05

# Config keys, lowercased for lookup. SkipValheimCheck is the historical
# name of SkipProducerCheck and is still read.
KEY_SKIP_CHECK = "skipproducercheck"
KEY_SKIP_CHECK_LEGACY = "skipvalheimcheck"
KEY_PRODUCER = "producername"
KEY_TIMESTAMP_FORMAT = "datetimeformat"
KEY_FOREGROUND = "foregroundcolor"
KEY_BACKGROUND = "backgroundcolor"
KEY_POLL_INTERVAL = "pollinterval"

SETTING_KEYS = {
    KEY_SKIP_CHECK,
    KEY_SKIP_CHECK_LEGACY,
    KEY_PRODUCER,
    KEY_TIMESTAMP_FORMAT,
    KEY_FOREGROUND,
    KEY_BACKGROUND,
    KEY_POLL_INTERVAL,
}


def default_rules() -> List[RuleEntry]:
    """Return the built-in color rules as parsed entries."""
    rules = []
    for pattern, colors in DEFAULT_RULES:
        foreground, background = parse_colors(colors)
        rules.append((pattern, foreground, background))
    return rules


@dataclass
class ViewerConfig:
    """
    All runtime settings of the viewer.

    Attributes:
        log_path: The file to tail.
        skip_producer_check: When True, never wait for or react to the
                             producer process.
        producer_name: Process name of the log's producer.
        timestamp_format: strftime format for the canonical timestamp.
        foreground: Default foreground color.
        background: Default background color.
        poll_interval: Seconds to sleep between poll cycles.
        rules: Color rules as (pattern, foreground, background) in priority
               order.
    """
    log_path: Path = field(default_factory=default_log_path)
    skip_producer_check: bool = False
    producer_name: str = DEFAULT_PRODUCER
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    foreground: ConsoleColor = ConsoleColor.WHITE
    background: ConsoleColor = ConsoleColor.BLACK
    poll_interval: float = DEFAULT_POLL_INTERVAL
    rules: List[RuleEntry] = field(default_factory=default_rules)

    def build_rule_set(self) -> Tuple[ColorRuleSet, List[str]]:
        """
        Compile the configured rules.

        Returns:
            Tuple of (rule set, messages for rules that were dropped).
        """
        rule_set = ColorRuleSet(self.foreground, self.background)
        problems = rule_set.load(self.rules)
        return rule_set, problems


def parse_bool(value: str) -> bool:
    """Parse "True"/"False" in any case."""
    text = value.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("expected True or False")


def parse_timestamp_format(value: str) -> str:
    fmt = value.strip()
    if not fmt:
        raise ValueError("format is empty")
    # Some platforms reject unknown directives only when formatting
    datetime.now().strftime(fmt)
    return fmt


def parse_poll_interval(value: str) -> float:
    interval = float(value)
    if interval <= 0:
        raise ValueError("must be greater than zero")
    return interval


def _apply_setting(config: ViewerConfig, key: str, value: str) -> None:
    """Store one keyed setting, raising ValueError if it does not parse."""
    if key in (KEY_SKIP_CHECK, KEY_SKIP_CHECK_LEGACY):
        config.skip_producer_check = parse_bool(value)
    elif key == KEY_PRODUCER:
        name = value.strip()
        if not name:
            raise ValueError("process name is empty")
        config.producer_name = name
    elif key == KEY_TIMESTAMP_FORMAT:
        config.timestamp_format = parse_timestamp_format(value)
    elif key == KEY_FOREGROUND:
        config.foreground = ConsoleColor.parse(value)
    elif key == KEY_BACKGROUND:
        config.background = ConsoleColor.parse(value)
    elif key == KEY_POLL_INTERVAL:
        config.poll_interval = parse_poll_interval(value)


def parse_config(lines: List[str]) -> Tuple[ViewerConfig, List[str]]:
    """
    Build a ViewerConfig from the lines of a config file.

    Args:
        lines: File content split into lines.

    Returns:
        Tuple of (config, notices). Each notice describes a line that was
        skipped; the affected setting keeps its default.
    """
    config = ViewerConfig()
    notices: List[str] = []

    if not lines or not lines[0].strip():
        notices.append(str(ConfigMalformedError(
            "log path", "", "first line must be the log file path")))
    else:
        config.log_path = Path(lines[0].strip()).expanduser()

    rules: List[RuleEntry] = []
    for number, line in enumerate(lines[1:], start=2):
        stripped = line.strip()
        # Skip empty lines and comments
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            notices.append(f"Ignoring config line {number}: {stripped!r}")
            continue

        key, _, value = stripped.partition("=")
        key = key.strip().lower()
        if key in SETTING_KEYS:
            try:
                _apply_setting(config, key, value)
            except ValueError as exc:
                notices.append(str(ConfigMalformedError(key_label(key), value.strip(), str(exc))))
            continue

        pattern, _, colors = stripped.rpartition("=")
        pattern = pattern.strip()
        try:
            foreground, background = parse_colors(colors)
        except ValueError as exc:
            notices.append(str(ConfigMalformedError(pattern, colors.strip(), str(exc))) + "; rule dropped")
            continue
        rules.append((pattern, foreground, background))

    config.rules = rules
    return config, notices


def key_label(key: str) -> str:
    """Return the config-file spelling of a lowercased setting key."""
    labels = {
        KEY_SKIP_CHECK: "SkipProducerCheck",
        KEY_SKIP_CHECK_LEGACY: "SkipValheimCheck",
        KEY_PRODUCER: "ProducerName",
        KEY_TIMESTAMP_FORMAT: "DateTimeFormat",
        KEY_FOREGROUND: "ForegroundColor",
        KEY_BACKGROUND: "BackgroundColor",
        KEY_POLL_INTERVAL: "PollInterval",
    }
    return labels.get(key, key)


def load_config(path: Path) -> Tuple[ViewerConfig, List[str]]:
    """
    Read and parse the config file.

    Raises:
        ConfigMissingError: If the file does not exist.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ConfigMissingError(f"No config found at {path}") from exc
    return parse_config(text.splitlines())


def render_config(config: ViewerConfig) -> str:
    """Serialize a config back into the file format."""
    lines = [
        str(config.log_path),
        f"{key_label(KEY_SKIP_CHECK)} = {config.skip_producer_check}",
        f"{key_label(KEY_PRODUCER)} = {config.producer_name}",
        f"{key_label(KEY_TIMESTAMP_FORMAT)} = {config.timestamp_format}",
        f"{key_label(KEY_FOREGROUND)} = {config.foreground}",
        f"{key_label(KEY_BACKGROUND)} = {config.background}",
        f"{key_label(KEY_POLL_INTERVAL)} = {config.poll_interval}",
    ]
    for pattern, foreground, background in config.rules:
        colors = str(foreground) if background is None else f"{foreground} on {background}"
        lines.append(f"{pattern} = {colors}")
    return "\n".join(lines) + "\n"


def write_config(config: ViewerConfig, path: Path) -> None:
    """Write a config file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_config(config), encoding="utf-8")


def load_or_init_config(path: Path) -> Tuple[ViewerConfig, List[str]]:
    """
    Load the config file, generating one with defaults if it is missing.

    Returns:
        Tuple of (config, notices to show the user).
    """
    try:
        return load_config(path)
    except ConfigMissingError:
        config = ViewerConfig()
        notices = ["No config found", "Initializing config with default settings"]
        try:
            write_config(config, path)
        except OSError as exc:
            notices.append(f"Could not write {path}: {exc}")
        return config, notices
