"""
Tests for record validation and marks reconciliation.
"""

import pytest

from gcse_qbank.core.models.records import PartRecord, Record
from gcse_qbank.extractor.config import ExtractionConfig
from gcse_qbank.extractor.diagnostics import DiagnosticsCollector
from gcse_qbank.extractor.validation.reconciler import (
    collapse_whitespace,
    validate_record,
    validate_records,
)


def _bullets(n):
    return tuple(f"• point {i} (1)" for i in range(n))


def _record(marks=3, bullets=3, question="Describe three features of RAM.", mark_scheme=None):
    lines = _bullets(bullets)
    return Record(
        question=question,
        mark_scheme=" ".join(lines) if mark_scheme is None else mark_scheme,
        marks=marks,
        mark_scheme_lines=lines if mark_scheme is None else (),
    )


class TestDiscardRules:

    def test_validate_when_question_short_then_discarded(self):
        """question='Hi' with a mark scheme is discarded."""
        outcome = validate_record(Record("Hi", "• A point"))
        assert not outcome.kept
        assert outcome.reason == "question too short"

    def test_validate_when_exactly_min_length_then_discarded(self):
        outcome = validate_record(Record("x" * 10, "• A point"))
        assert not outcome.kept

    def test_validate_when_one_over_min_length_then_kept(self):
        assert validate_record(Record("x" * 11, "• A point")).kept

    def test_validate_when_empty_question_then_discarded(self):
        outcome = validate_record(Record("", "• A", parts=(PartRecord("a", "Explain."),)))
        assert outcome.reason == "empty question"

    def test_validate_when_no_mark_scheme_and_no_marks_then_discarded(self):
        outcome = validate_record(Record("Describe RAM in detail.", ""))
        assert outcome.reason == "no mark scheme or marks"

    def test_validate_when_no_mark_scheme_but_marks_then_kept(self):
        outcome = validate_record(Record("Describe RAM in detail.", "", marks=2))
        assert outcome.kept
        assert not outcome.validated.marks_consistent

    def test_validate_when_custom_min_length_then_applied(self):
        config = ExtractionConfig(min_question_length=2)
        assert validate_record(Record("Why?", "• A"), config).kept


class TestReconciliation:

    def test_validate_when_points_match_marks_then_consistent(self):
        validated = validate_record(_record(marks=3, bullets=3)).validated
        assert validated.marks_consistent
        assert validated.mark_scheme_point_count == 3

    @pytest.mark.parametrize("bullets", [2, 4])
    def test_validate_when_points_differ_then_inconsistent_but_kept(self, bullets):
        outcome = validate_record(_record(marks=3, bullets=bullets))
        assert outcome.kept
        assert outcome.validated.marks_consistent is False

    def test_validate_when_marks_absent_then_consistent(self):
        assert validate_record(_record(marks=None, bullets=1)).validated.marks_consistent

    def test_validate_when_no_lines_then_points_from_text(self):
        record = _record(marks=2, mark_scheme="• One (1) • Two (1)")
        assert validate_record(record).validated.mark_scheme_points == ("One (1)", "Two (1)")

    def test_validate_when_called_then_question_type_from_question(self):
        record = Record("Explain why abstraction is used.", "• Which detail to remove")
        assert validate_record(record).validated.question_type == "explanation"


class TestWhitespace:

    def test_collapse_when_runs_then_single_spaces(self):
        assert collapse_whitespace("  a \t b\n c ") == "a b c"

    def test_collapse_when_applied_twice_then_idempotent(self):
        once = collapse_whitespace(" x   y ")
        assert collapse_whitespace(once) == once

    def test_validate_when_messy_whitespace_then_collapsed(self):
        record = Record(
            "What  is   an\talgorithm?",
            "•  Steps   (1)",
            parts=(PartRecord("a", "  Give  one  example "),),
        )

        validated = validate_record(record).validated

        assert validated.question == "What is an algorithm?"
        assert validated.mark_scheme == "• Steps (1)"
        assert validated.parts[0].content == "Give one example"

    def test_validate_when_messy_point_lines_then_points_collapsed(self):
        # Arrange
        record = Record(
            "What is an algorithm? [2 marks]",
            "•  A   sequence of steps (1) •  Must be\tunambiguous (1)",
            marks=2,
            mark_scheme_lines=("•  A   sequence of steps (1)", "•  Must be\tunambiguous (1)"),
        )

        # Act
        validated = validate_record(record).validated

        # Assert
        assert validated.mark_scheme_points == (
            "A sequence of steps (1)",
            "Must be unambiguous (1)",
        )
        assert validated.marks_consistent

    def test_validate_when_messy_options_then_collapsed(self):
        record = Record(
            "Which of these is volatile?",
            "• RAM",
            parts=(PartRecord("a", "Pick one.", options=("  RAM  chips", "ROM")),),
        )

        validated = validate_record(record).validated

        assert validated.parts[0].options == ("RAM chips", "ROM")


class TestValidateRecords:

    def test_validate_records_when_mixed_then_keeps_order_and_reports(self):
        # Arrange
        records = [
            _record(marks=3, bullets=3, question="First question, describe RAM."),
            Record("Hi", "• A"),
            _record(marks=3, bullets=2, question="Third question, describe ROM."),
        ]
        diagnostics = DiagnosticsCollector()

        # Act
        kept = validate_records(records, diagnostics=diagnostics, document_id="Unit1.pdf")

        # Assert
        assert [v.question for v in kept] == [
            "First question, describe RAM.",
            "Third question, describe ROM.",
        ]
        summary = diagnostics.generate_report().summary_by_type
        assert summary == {"discarded_record": 1, "marks_mismatch": 1}

    def test_validate_records_when_mismatch_then_warning_logged(self, caplog):
        with caplog.at_level("WARNING"):
            validate_records([_record(marks=3, bullets=1)])
        assert "3 marks but 1 mark scheme points" in caplog.text
