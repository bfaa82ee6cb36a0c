"""
Unit Tests for Record Models

Tests for RawLine, LineClass, PartRecord, Record and ValidatedRecord
construction and serialization.
"""

import pytest

from gcse_qbank.core.models.lines import LineClass, LineKind, RawLine
from gcse_qbank.core.models.records import PartRecord, Record, ValidatedRecord


class TestRawLine:
    """Tests for RawLine dataclass."""

    def test_init_when_trimmed_text_then_creates_line(self):
        """Trimmed, non-empty text should be accepted."""
        line = RawLine("1. Define RAM.", 3)
        assert line.text == "1. Define RAM."
        assert line.source_index == 3

    def test_init_when_untrimmed_text_then_raises_error(self):
        """Leading/trailing whitespace is a normalizer bug."""
        with pytest.raises(ValueError, match="trimmed and non-empty"):
            RawLine("  1. Define RAM.", 0)

    def test_init_when_empty_text_then_raises_error(self):
        with pytest.raises(ValueError):
            RawLine("", 0)

    def test_init_when_negative_index_then_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            RawLine("text", -1)


class TestLineClass:
    """Tests for LineClass value object."""

    def test_content_when_called_then_kind_is_content(self):
        lc = LineClass.content("Some words")
        assert lc.kind is LineKind.CONTENT
        assert lc.remainder == "Some words"
        assert not lc.is_structural

    def test_is_structural_when_part_start_then_true(self):
        lc = LineClass(LineKind.PART_START, label="a")
        assert lc.is_structural

    def test_repr_when_question_start_then_shows_number(self):
        lc = LineClass(LineKind.QUESTION_START, number="4")
        assert "number='4'" in repr(lc)


class TestPartRecord:
    """Tests for PartRecord dataclass."""

    def test_to_dict_when_marks_absent_then_omits_marks(self):
        part = PartRecord(label="b", content="Describe one advantage.")
        assert part.to_dict() == {"label": "b", "content": "Describe one advantage."}

    def test_from_dict_when_roundtrip_then_equal(self, sample_part):
        assert PartRecord.from_dict(sample_part.to_dict()) == sample_part

    def test_to_dict_when_details_set_then_camel_case_keys(self):
        # Arrange
        part = PartRecord(
            label="a",
            content="Which is volatile? A) RAM B) ROM",
            marks=1,
            question_type="multiple-choice",
            options=("RAM", "ROM"),
            code_segments=("def f():\nreturn 1",),
            content_lines=("Which is volatile?", "A) RAM", "B) ROM"),
        )

        # Act
        data = part.to_dict()

        # Assert
        assert data["type"] == "multiple-choice"
        assert data["options"] == ["RAM", "ROM"]
        assert data["codeSegments"] == ["def f():\nreturn 1"]
        assert "content_lines" not in data
        assert PartRecord.from_dict(data) == part


class TestRecord:
    """Tests for Record dataclass."""

    def test_init_when_negative_marks_then_raises_error(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            Record("What is an algorithm?", "", marks=-1)

    def test_init_when_zero_marks_then_keeps_zero(self):
        """Zero marks is a stated value, distinct from None."""
        record = Record("What is an algorithm?", "", marks=0)
        assert record.marks == 0

    def test_init_when_frozen_then_immutable(self):
        record = Record("What is an algorithm?", "")
        with pytest.raises(AttributeError):
            record.question = "changed"  # type: ignore

    def test_equality_when_mark_scheme_lines_differ_then_equal(self):
        """Per-line mark scheme shape is not part of record identity."""
        a = Record("Q text here", "• A", mark_scheme_lines=("• A",))
        b = Record("Q text here", "• A")
        assert a == b

    def test_to_dict_when_minimal_then_only_required_keys(self):
        record = Record("What is an algorithm?", "• Steps")
        assert record.to_dict() == {"question": "What is an algorithm?", "markScheme": "• Steps"}

    def test_to_dict_when_full_then_includes_optional_keys(self, sample_part):
        # Arrange
        record = Record("Arrays", "• Index", marks=3, parts=(sample_part,), question_number="2")

        # Act
        data = record.to_dict()

        # Assert
        assert data["marks"] == 3
        assert data["number"] == "2"
        assert data["parts"] == [sample_part.to_dict()]

    def test_full_text_when_parts_then_joined_in_order(self, sample_part):
        record = Record("Stem.", "• Point", parts=(sample_part,))
        assert record.full_text == f"Stem. {sample_part.content} • Point"

    def test_has_mark_scheme_when_blank_then_false(self):
        assert not Record("Question text", "   ").has_mark_scheme


class TestValidatedRecord:
    """Tests for ValidatedRecord wrapper."""

    def test_properties_when_wrapped_then_mirror_record(self, make_validated):
        v = make_validated()
        assert v.question == "What is an algorithm? [2 marks]"
        assert v.marks == 2
        assert v.question_number == "1"
        assert v.mark_scheme_point_count == 2

    def test_to_dict_when_called_then_adds_reconciliation_fields(self, make_validated):
        data = make_validated().to_dict()
        assert data["markSchemePoints"] == ["A sequence of steps (1)", "Must be unambiguous (1)"]
        assert data["marksConsistent"] is True
        assert data["type"] == "definition"

    def test_from_dict_when_minimal_shape_then_derives_consistency(self):
        """Files with only {question, markScheme, marks} still load."""
        v = ValidatedRecord.from_dict({"question": "Define RAM please", "markScheme": "", "marks": 2})
        assert v.mark_scheme_points == ()
        assert v.marks_consistent is False
        assert v.question_type == "written"

    def test_from_dict_when_roundtrip_then_equal(self, make_validated):
        v = make_validated(marks=3)
        assert ValidatedRecord.from_dict(v.to_dict()) == v
