#!/usr/bin/env python
"""Tests for config.txt loading and generation"""

import tempfile
import unittest
from pathlib import Path

import helpers  # noqa: F401

from fancierlog.errors import ConfigMissingError
from fancierlog.tui.model import ConsoleColor
from fancierlog.utils.config import (
    DEFAULT_POLL_INTERVAL,
    ViewerConfig,
    load_config,
    load_or_init_config,
    parse_config,
    render_config,
)

SAMPLE = """\
/srv/valheim/LogOutput.log
SkipValheimCheck = True
DateTimeFormat = %H:%M:%S
ForegroundColor = Gray
BackgroundColor = DarkBlue
PollInterval = 0.25
Error|Failed = Red
AzuAntiCheat = Black on Red
Warning = Yellow
"""


class TestParseConfig(unittest.TestCase):
    """Test parsing of the flat config format"""

    def test_full_file(self):
        config, notices = parse_config(SAMPLE.splitlines())
        self.assertEqual(notices, [])
        self.assertEqual(config.log_path, Path("/srv/valheim/LogOutput.log"))
        self.assertTrue(config.skip_producer_check)
        self.assertEqual(config.timestamp_format, "%H:%M:%S")
        self.assertEqual(config.foreground, ConsoleColor.GRAY)
        self.assertEqual(config.background, ConsoleColor.DARK_BLUE)
        self.assertEqual(config.poll_interval, 0.25)
        self.assertEqual(config.rules, [
            ("Error|Failed", ConsoleColor.RED, None),
            ("AzuAntiCheat", ConsoleColor.BLACK, ConsoleColor.RED),
            ("Warning", ConsoleColor.YELLOW, None),
        ])

    def test_settings_are_not_rules(self):
        config, _ = parse_config(SAMPLE.splitlines())
        patterns = [pattern for pattern, _, _ in config.rules]
        self.assertNotIn("ForegroundColor", patterns)
        self.assertNotIn("BackgroundColor", patterns)

    def test_malformed_value_keeps_default(self):
        lines = ["log.txt", "SkipProducerCheck = maybe", "PollInterval = -1", "ForegroundColor = Plaid"]
        config, notices = parse_config(lines)
        self.assertFalse(config.skip_producer_check)
        self.assertEqual(config.poll_interval, DEFAULT_POLL_INTERVAL)
        self.assertEqual(config.foreground, ConsoleColor.WHITE)
        self.assertEqual(len(notices), 3)
        self.assertIn("SkipProducerCheck", notices[0])

    def test_pattern_containing_equals(self):
        config, notices = parse_config(["log.txt", "level=error = Red"])
        self.assertEqual(notices, [])
        self.assertEqual(config.rules, [("level=error", ConsoleColor.RED, None)])

    def test_unknown_rule_color_dropped(self):
        config, notices = parse_config(["log.txt", "Warning = Orange", "Message = Cyan"])
        self.assertEqual(config.rules, [("Message", ConsoleColor.CYAN, None)])
        self.assertEqual(len(notices), 1)
        self.assertIn("rule dropped", notices[0])

    def test_comments_and_blank_lines(self):
        config, notices = parse_config(["log.txt", "", "# colors", "ProducerName = valheim_server.x86_64"])
        self.assertEqual(notices, [])
        self.assertEqual(config.producer_name, "valheim_server.x86_64")

    def test_empty_file(self):
        config, notices = parse_config([])
        self.assertEqual(len(notices), 1)
        self.assertEqual(config.log_path, ViewerConfig().log_path)

    def test_rules_keep_file_order(self):
        config, _ = parse_config(["log.txt", "B = Blue", "A = Red", "C = Green"])
        self.assertEqual([pattern for pattern, _, _ in config.rules], ["B", "A", "C"])

    def test_invalid_regex_dropped_when_building(self):
        config, notices = parse_config(["log.txt", "([bad = Red", "Warning = Yellow"])
        self.assertEqual(notices, [])
        rules, problems = config.build_rule_set()
        self.assertEqual(len(rules), 1)
        self.assertEqual(len(problems), 1)


class TestConfigFile(unittest.TestCase):
    """Test reading and generating config files on disk"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "config.txt"

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_raises(self):
        with self.assertRaises(ConfigMissingError):
            load_config(self.path)

    def test_missing_file_is_generated(self):
        config, notices = load_or_init_config(self.path)
        self.assertTrue(self.path.exists())
        self.assertIn("No config found", notices)
        self.assertEqual(config.rules[1], ("AzuAntiCheat", ConsoleColor.BLACK, ConsoleColor.RED))

        # The generated file loads back to the same settings
        reloaded, reload_notices = load_config(self.path)
        self.assertEqual(reload_notices, [])
        self.assertEqual(reloaded, config)

    def test_render_writes_path_first(self):
        text = render_config(ViewerConfig(log_path=Path("server.log")))
        self.assertEqual(text.splitlines()[0], "server.log")
        self.assertIn("AzuAntiCheat = Black on Red", text)


if __name__ == "__main__":
    unittest.main()
