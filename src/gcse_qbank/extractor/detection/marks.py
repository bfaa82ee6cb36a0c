"""
Module: extractor.detection.marks

Purpose:
    Mark allocation detection - finds "[N marks]", "(Total N marks)" and
    "(N marks)" tokens in accumulated segment text and resolves the
    authoritative total for a record and for each of its parts.

Key Functions:
    - find_mark_allocations(): All allocation tokens in text order
    - marks_for_text(): Last allocation in a text, or None
    - resolve_declared_marks(): Authoritative total for a record
    - annotate_record(): Record with marks and part details filled in

Key Classes:
    - MarkAllocation: Immutable dataclass for one detected token

Dependencies:
    - re (std)
    - gcse_qbank.core.models.records: Record, PartRecord
    - extractor.detection.parts: Per-part type, options and code

Used By:
    - extractor.pipeline: Annotates records before validation

Tie-break:
    When several allocations are found the LAST one wins. Totals are often
    restated just before the mark scheme, and the restatement is the more
    specific one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from gcse_qbank.core.models.records import PartRecord, Record

from .parts import describe_part

# Pattern name → regex. Each has exactly one capture group: the value.
MARK_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("bracket", re.compile(r"(?i)\[(\d+)\s*marks?\]")),
    ("total", re.compile(r"(?i)\(Total\s+(\d+)\s*marks?\)")),
    ("paren", re.compile(r"(?i)\((\d+)\s*marks?\)")),
)


@dataclass(frozen=True)
class MarkAllocation:
    """
    Detected mark allocation token.

    Attributes:
        value: Mark value as stated (may be 0)
        start: Start offset of the token in the searched text
        end: End offset of the token in the searched text
        pattern: Which MARK_PATTERNS entry matched ("bracket", "total", "paren")

    Example:
        >>> find_mark_allocations("Describe RAM. [3 marks]")[0].value
        3
    """
    value: int
    start: int
    end: int
    pattern: str

    @property
    def is_total(self) -> bool:
        """True for "(Total N marks)" statements."""
        return self.pattern == "total"


def find_mark_allocations(text: str) -> List[MarkAllocation]:
    """
    Find every mark allocation in `text`, sorted by position.

    Never raises; empty or allocation-free text yields an empty list.
    """
    if not text:
        return []
    found = [
        MarkAllocation(int(m.group(1)), m.start(), m.end(), name)
        for name, pattern in MARK_PATTERNS
        for m in pattern.finditer(text)
    ]
    return sorted(found, key=lambda a: a.start)


def marks_for_text(text: str, *, include_totals: bool = True) -> Optional[int]:
    """
    Resolve the marks stated in a single text (last allocation wins).

    With `include_totals=False`, "(Total N marks)" statements are ignored;
    a part followed by its question total keeps its own allocation.

    Returns:
        Mark value, or None if no allocation is stated

    Example:
        >>> marks_for_text("Define it [2 marks] ... Total for this question [5 marks]")
        5
        >>> marks_for_text("Define it") is None
        True
    """
    allocations = [
        a for a in find_mark_allocations(text) if include_totals or not a.is_total
    ]
    return allocations[-1].value if allocations else None


def resolve_declared_marks(record: Record, *, aggregate_part_marks: bool = False) -> Optional[int]:
    """
    Resolve the authoritative total marks for a record.

    Candidates, in order:
    1. Every allocation in the question text
    2. "(Total N marks)" statements in part content, then in the mark
       scheme (formats that put the total at the end of the segment)

    The last candidate wins. With `aggregate_part_marks`, a record with no
    stated total whose parts ALL state marks gets their sum.

    Returns:
        Total marks, or None when nothing is stated
    """
    candidates = [a.value for a in find_mark_allocations(record.question)]
    trailing_texts = [part.content for part in record.parts] + [record.mark_scheme]
    for text in trailing_texts:
        candidates.extend(a.value for a in find_mark_allocations(text) if a.is_total)

    if candidates:
        return candidates[-1]

    if aggregate_part_marks and record.parts:
        part_marks = [
            marks_for_text(part.content, include_totals=False) for part in record.parts
        ]
        if all(m is not None for m in part_marks):
            return sum(part_marks)

    return None


def annotate_part(part: PartRecord) -> PartRecord:
    """Fill a part's marks from its own content, ignoring question totals."""
    return replace(part, marks=marks_for_text(part.content, include_totals=False))


def annotate_record(record: Record, *, aggregate_part_marks: bool = False) -> Record:
    """
    Return `record` with marks resolved from its text and every part
    described (type, options, code segments).

    Example:
        >>> rec = annotate_record(Record("What is an algorithm? [2 marks]", "• Steps (1)"))
        >>> rec.marks
        2
    """
    parts = tuple(describe_part(annotate_part(part)) for part in record.parts)
    annotated = replace(record, parts=parts)
    return replace(
        annotated,
        marks=resolve_declared_marks(annotated, aggregate_part_marks=aggregate_part_marks),
    )
