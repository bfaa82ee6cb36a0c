"""
Tests for the extraction diagnostics collector and report.
"""

import json
import threading

from gcse_qbank.extractor.diagnostics import (
    DISCARDED_RECORD,
    DOCUMENT_FAILURE,
    MARKS_MISMATCH,
    DiagnosticsCollector,
)


class TestDiagnosticsCollector:

    def test_add_when_each_issue_type_then_counted_by_type(self):
        # Arrange
        collector = DiagnosticsCollector()

        # Act
        collector.add_discarded_record("Unit1.pdf", "question too short", "3", "Hi")
        collector.add_marks_mismatch("Unit1.pdf", declared=3, points=2, question_number="4")
        collector.add_document_failure("Unit2.pdf", OSError("corrupt"))
        report = collector.generate_report()

        # Assert
        assert report.total_issues == 3
        assert report.summary_by_type == {
            DISCARDED_RECORD: 1,
            MARKS_MISMATCH: 1,
            DOCUMENT_FAILURE: 1,
        }
        assert report.documents == ["Unit1.pdf", "Unit2.pdf"]

    def test_mismatch_when_added_then_details_carry_counts(self):
        collector = DiagnosticsCollector()
        collector.add_marks_mismatch("Unit1.pdf", declared=3, points=4, question_number="2")

        issue = collector.generate_report().issues[0].to_dict()

        assert issue["details"] == {"declared": 3, "points": 4}
        assert issue["message"] == "Q2: 3 marks declared, 4 mark scheme points"

    def test_discard_when_no_number_then_unknown_label(self):
        collector = DiagnosticsCollector()
        collector.add_discarded_record("Unit1.pdf", "empty question")
        issue = collector.generate_report().issues[0].to_dict()
        assert issue["message"].startswith("Q? discarded")
        assert "question_number" not in issue

    def test_add_when_many_threads_then_no_issue_lost(self):
        collector = DiagnosticsCollector()

        def worker(n):
            for i in range(50):
                collector.add_discarded_record(f"Unit{n}.pdf", "empty question", str(i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.issue_count == 200


class TestDiagnosticsReport:

    def test_save_when_called_then_writes_json(self, tmp_path):
        # Arrange
        collector = DiagnosticsCollector()
        collector.add_document_failure("Unit5.pdf", ValueError("bad"))
        path = tmp_path / "reports" / "diagnostics.json"

        # Act
        collector.generate_report().save(path)

        # Assert
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["total_issues"] == 1
        assert data["issues"][0]["details"]["error_type"] == "ValueError"
        assert "generated_at" in data

    def test_to_dict_when_long_excerpt_then_truncated(self):
        collector = DiagnosticsCollector()
        collector.add_discarded_record("Unit1.pdf", "no mark scheme or marks", "1", "x" * 500)
        issue = collector.generate_report().to_dict()["issues"][0]
        assert len(issue["excerpt"]) == 200
