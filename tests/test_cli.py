"""
Tests for the gcse-qbank command-line entry point.
"""

import json

import pytest

from gcse_qbank.cli import main
from gcse_qbank.core.utils.serialization import load_collection_json

UNIT_TEXT = "\n".join([
    "1. What is an algorithm? [2 marks]",
    "Mark scheme:",
    "• A sequence of steps (1)",
    "• Must be unambiguous (1)",
    "2. Hi",
    "Mark scheme:",
    "• fragment",
])


@pytest.fixture
def input_dir(tmp_path):
    directory = tmp_path / "packs"
    directory.mkdir()
    (directory / "Unit1.txt").write_text(UNIT_TEXT, encoding="utf-8")
    return directory


class TestMain:

    def test_main_when_valid_directory_then_writes_collection(self, input_dir, tmp_path):
        # Arrange
        output = tmp_path / "bank.json"

        # Act
        code = main([str(input_dir), "-o", str(output)])

        # Assert
        assert code == 0
        collection = load_collection_json(output, strict=True)
        assert [r.question_number for r in collection.records_for("3.1")] == ["1"]

    def test_main_when_empty_directory_then_exit_code_one(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        assert main([str(empty), "-o", str(tmp_path / "bank.json")]) == 1

    def test_main_when_missing_directory_then_exit_code_one(self, tmp_path):
        assert main([str(tmp_path / "nope"), "-o", str(tmp_path / "bank.json")]) == 1

    def test_main_when_invalid_config_then_exit_code_one(self, input_dir, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"max_workers": 0}), encoding="utf-8")
        assert main([str(input_dir), "-o", str(tmp_path / "bank.json"), "--config", str(config)]) == 1

    def test_main_when_merge_then_appends(self, input_dir, tmp_path):
        output = tmp_path / "bank.json"

        main([str(input_dir), "-o", str(output)])
        main([str(input_dir), "-o", str(output), "--merge"])

        assert len(load_collection_json(output).records_for("3.1")) == 2

    def test_main_when_diagnostics_then_report_written(self, input_dir, tmp_path):
        report = tmp_path / "diag.json"

        code = main([str(input_dir), "-o", str(tmp_path / "bank.json"), "--diagnostics", str(report), "--workers", "1"])

        assert code == 0
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["summary_by_type"] == {"discarded_record": 1}
