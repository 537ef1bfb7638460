#!/usr/bin/env python
"""Tests for line reformatting"""

import unittest

from helpers import FIXED_NOW, STAMP, TIME_FORMAT

from fancierlog.tui.reformat import LineReformatter, extract_tag, strip_legacy_prefix


class TestExtractTag(unittest.TestCase):
    """Test tag extraction from bracketed prefixes"""

    def test_simple_tag(self):
        self.assertEqual(extract_tag("[INFO: AzuAntiCheat] something happened"), "AzuAntiCheat")

    def test_tag_is_trimmed(self):
        self.assertEqual(extract_tag("[Info   :   BepInEx   ] Loading"), "BepInEx")

    def test_tag_after_timestamp(self):
        line = "2021/01/01 00:00:00: [Mod: Warning] Low durability"
        self.assertEqual(extract_tag(line), "Warning")

    def test_no_brackets(self):
        self.assertIsNone(extract_tag("Server started: ready]"))

    def test_bracket_without_colon(self):
        self.assertIsNone(extract_tag("[Subsystems] Registering"))

    def test_blank_tag(self):
        self.assertIsNone(extract_tag("[Info:   ] nothing"))


class TestLineReformatter(unittest.TestCase):
    """Test the full reformat pipeline"""

    def setUp(self):
        self.fmt = LineReformatter(TIME_FORMAT)

    def reformat(self, line):
        return self.fmt.reformat(line, FIXED_NOW)

    def test_bepinex_line(self):
        result = self.reformat("[Info   :   BepInEx] Loading [Jotunn 2.12.1]")
        self.assertEqual(result.tag, "BepInEx")
        self.assertEqual(result.text, STAMP + "(BepInEx) Loading [Jotunn 2.12.1]")

    def test_output_contains_tag_parenthetical(self):
        result = self.reformat("[INFO: AzuAntiCheat] something happened")
        self.assertIn("(AzuAntiCheat)", result.text)
        self.assertEqual(result.body, "something happened")

    def test_year_first_timestamp_and_tag(self):
        result = self.reformat("2021/01/01 00:00:00: [Mod: Warning] Low durability")
        self.assertEqual(result.text, STAMP + "(Warning) Low durability")

    def test_month_first_timestamp_stripped(self):
        result = self.reformat("[Message:   Unity Log] 03/14/2023 18:22:01: Game server connected")
        self.assertEqual(result.tag, "Unity Log")
        self.assertEqual(result.body, "Game server connected")

    def test_plain_line_has_no_tag(self):
        result = self.reformat("   Steam game server initialized")
        self.assertIsNone(result.tag)
        self.assertNotIn("(", result.text)
        self.assertEqual(result.text, STAMP + "Steam game server initialized")

    def test_timestamp_not_at_start_is_kept(self):
        result = self.reformat("saved at 03/14/2023 18:22:01: done")
        self.assertEqual(result.body, "saved at 03/14/2023 18:22:01: done")

    def test_only_first_bracket_segment_removed(self):
        result = self.reformat("[Info: A] [Inner] text")
        self.assertEqual(result.body, "[Inner] text")

    def test_canonical_line_is_restamped(self):
        old = "[09:15:42.1234 AM]: (Warning) Low durability"
        result = self.reformat(old)
        self.assertEqual(result.tag, "Warning")
        self.assertEqual(result.body, "Low durability")
        self.assertNotIn("09:15:42", result.text)
        self.assertEqual(result.text, STAMP + "(Warning) Low durability")

    def test_canonical_line_without_tag(self):
        result = self.reformat("[09:15:42 AM]: World saved")
        self.assertIsNone(result.tag)
        self.assertEqual(result.text, STAMP + "World saved")

    def test_label_bracket_followed_by_colon_keeps_tag(self):
        result = self.reformat("[Info: Mod]: hello")
        self.assertIn("(Mod)", result.text)
        self.assertEqual(result.text, STAMP + "(Mod) hello")

    def test_label_bracket_with_spaced_colon(self):
        result = self.reformat("[Warning  : Unity Log]: Shader missing")
        self.assertEqual(result.tag, "Unity Log")
        self.assertEqual(result.body, "Shader missing")

    def test_reformatting_output_again_is_stable(self):
        once = self.reformat("[Info   :   BepInEx] Chainloader ready").text
        twice = self.reformat(once).text
        self.assertEqual(once, twice)

    def test_stamp(self):
        result = self.fmt.stamp("Waiting for valheim to start...", "FL", FIXED_NOW)
        self.assertEqual(result.text, STAMP + "(FL) Waiting for valheim to start...")

    def test_default_format(self):
        result = LineReformatter().reformat("hello", FIXED_NOW)
        self.assertEqual(result.timestamp, "12:00:00.000000 PM")


class TestStripLegacyPrefix(unittest.TestCase):

    def test_strips_bracket_and_timestamp(self):
        self.assertEqual(strip_legacy_prefix("[Error  : Unity Log] 01/02/2023 03:04:05: boom"), "boom")


if __name__ == "__main__":
    unittest.main()
