"""Unit tests for pddl_planner.log_format module."""

import unittest

from pddl_planner.log_format import format_log, format_log_line, parse_canonical_log


class TestFormatLogLine(unittest.TestCase):
    """Test cases for format_log_line() function."""

    def test_basic_format(self):
        self.assertEqual(format_log_line("job", "FD", "INFO", "hello"), "[job/FD][INFO] hello")

    def test_unknown_level_falls_back_to_info(self):
        self.assertEqual(format_log_line("job", "FD", "loud", "x"), "[job/FD][INFO] x")

    def test_level_is_normalized(self):
        self.assertEqual(format_log_line("job", "FD", " warn ", "x"), "[job/FD][WARN] x")

    def test_nested_headers_stripped(self):
        result = format_log_line("job", "FD", "WARN", "[job/FD][INFO] [planning/FD][WARN] msg")
        self.assertEqual(result, "[job/FD][WARN] msg")

    def test_empty_message_after_strip(self):
        self.assertEqual(format_log_line("job", "FD", "INFO", "[job/FD][INFO] "), "")

    def test_scope_truncation(self):
        result = format_log_line("planning", "ARVANDHERD", "INFO", "x", scope_width=10)
        self.assertEqual(result, "[plannin...][INFO] x")


class TestCanonicalRoundTrip(unittest.TestCase):
    def test_parse_formatted_line(self):
        line = format_log("registry", "lama", "WARN", "plugin import failed")
        self.assertEqual(
            parse_canonical_log(line),
            ("registry", "lama", "WARN", "plugin import failed"),
        )

    def test_parse_rejects_plain_text(self):
        self.assertIsNone(parse_canonical_log("just text"))


if __name__ == "__main__":
    unittest.main()
