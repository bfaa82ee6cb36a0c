import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import gcse_qbank
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from gcse_qbank.core.models.records import PartRecord, Record, ValidatedRecord  # noqa: E402


# Common test fixtures
@pytest.fixture
def algorithm_lines():
    """The canonical single-question document."""
    return [
        "1. What is an algorithm? [2 marks]",
        "Mark scheme:",
        "• A sequence of steps (1)",
        "• Must be unambiguous (1)",
    ]


@pytest.fixture
def unit_pack_text():
    """A small unit pack with page furniture, parts and two questions."""
    return "\n".join([
        "AQA GCSE Computer Science Unit 3.4",
        "1. Explain what is meant by abstraction. [2 marks]",
        "Mark scheme:",
        "• Removing unnecessary detail (1)",
        "• To focus on the important parts of a problem (1)",
        "Page 1 of 2",
        "",
        "2. A program stores test scores in an array.",
        "(a) State what is meant by an array. [1 mark]",
        "(b) Describe one advantage of using an array. [2 marks]",
        "(Total 3 marks)",
        "Mark scheme:",
        "• A data structure holding items of the same type (1)",
        "• Items accessed by index (1)",
        "• Single identifier for many values (1)",
        "Turn over",
    ])


@pytest.fixture
def make_validated():
    """Factory for ValidatedRecords with sensible defaults."""
    def _make(
        question: str = "What is an algorithm? [2 marks]",
        mark_scheme: str = "• A sequence of steps (1) • Must be unambiguous (1)",
        marks=2,
        points=("A sequence of steps (1)", "Must be unambiguous (1)"),
        number="1",
        parts=(),
        question_type: str = "definition",
    ) -> ValidatedRecord:
        record = Record(
            question=question,
            mark_scheme=mark_scheme,
            marks=marks,
            parts=tuple(parts),
            question_number=number,
        )
        return ValidatedRecord(
            record=record,
            mark_scheme_points=tuple(points),
            marks_consistent=marks is None or len(points) == marks,
            question_type=question_type,
        )
    return _make


@pytest.fixture
def sample_part():
    return PartRecord(label="a", content="State what is meant by an array. [1 mark]", marks=1)
