"""
Module: llm.examples

Purpose:
    Formats a unit's first complete questions as few-shot examples for a
    question-generation prompt.
"""

from __future__ import annotations

from typing import List

from gcse_qbank.core.models.collection import UnitCollection
from gcse_qbank.core.models.records import ValidatedRecord


def format_example(record: ValidatedRecord, index: int) -> str:
    """
    Format one record as an example block.

    The question number falls back to the 1-based position when the record
    has none.
    """
    number = record.question_number or str(index)
    marks_text = f" [{record.marks} marks]" if record.marks else ""
    return (
        f'Example Question {number}: "{record.question}"{marks_text}\n'
        f"\n"
        f"Mark Scheme for Q{number}:\n"
        f"{record.mark_scheme}"
    )


def format_unit_examples(collection: UnitCollection, unit_key: str, limit: int = 2) -> str:
    """
    Example prompt text for a unit: its first `limit` records.

    Returns an empty string for unknown or empty units.

    Example:
        >>> format_unit_examples(UnitCollection(), "3.1")
        ''
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1: {limit}")
    records = collection.records_for(unit_key)[:limit]
    blocks: List[str] = [format_example(r, i) for i, r in enumerate(records, start=1)]
    return "\n\n".join(blocks)
