"""
Tests for mark scheme point extraction.
"""

import pytest

from gcse_qbank.extractor.markscheme.extractor import extract_mark_points, split_inline_bullets


class TestExtractMarkPoints:

    @pytest.mark.parametrize("line, point", [
        ("• Stores data (1)", "Stores data (1)"),
        ("- Volatile (1)", "Volatile (1)"),
        ("* Fast access (1)", "Fast access (1)"),
        ("a) RAM is volatile", "RAM is volatile"),
        ("(b) ROM is not", "ROM is not"),
        ("1. First step", "First step"),
        ("2) Second step", "Second step"),
    ])
    def test_extract_when_marker_then_stripped_point(self, line, point):
        assert extract_mark_points([line]) == [point]

    @pytest.mark.parametrize("line", [
        "Award one mark for each point",
        "Accept: memory",
        "ALLOW any sensible answer",
        "Credit reference to the CPU",
    ])
    def test_extract_when_keyword_then_whole_line_point(self, line):
        assert extract_mark_points([line]) == [line]

    def test_extract_when_plain_note_then_skipped(self):
        assert extract_mark_points(["Examiner note: see guidance"]) == []

    def test_extract_when_keyword_inside_word_then_skipped(self):
        """'allowance' is not 'allow'."""
        assert extract_mark_points(["Tax allowance example"]) == []

    def test_extract_when_inline_bullets_then_split(self):
        points = extract_mark_points(["• A sequence of steps (1) • Must be unambiguous (1)"])
        assert points == ["A sequence of steps (1)", "Must be unambiguous (1)"]

    def test_extract_when_string_then_split_on_lines(self):
        assert extract_mark_points("• One\nnote\n• Two") == ["One", "Two"]

    def test_extract_when_empty_or_bare_marker_then_no_points(self):
        assert extract_mark_points(["", "•", "   "]) == []

    def test_extract_when_none_entries_then_never_raises(self):
        assert extract_mark_points([None, "• ok"]) == ["ok"]  # type: ignore[list-item]


class TestSplitInlineBullets:

    def test_split_when_single_bullet_then_unchanged(self):
        assert split_inline_bullets("• Only one") == ["• Only one"]

    def test_split_when_leading_text_then_kept_as_line(self):
        assert split_inline_bullets("Any two from: • Fast • Cheap") == [
            "Any two from:",
            "• Fast",
            "• Cheap",
        ]
