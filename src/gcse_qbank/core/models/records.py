"""
Module: records

Purpose:
    Provides the record dataclasses emitted by the segment builder and the
    validator. Records are immutable snapshots; any change (mark annotation,
    whitespace normalization) produces a new instance via `replace()`.

Key Classes:
    - PartRecord: One lettered sub-part with marks, type, options and code
    - Record: A closed segment (question, mark scheme, marks, parts)
    - ValidatedRecord: A Record that survived validation, plus mark-scheme
      points and the marks consistency flag

Dependencies:
    - dataclasses (std)
    - typing (std)

Used By:
    - extractor.structuring.segment_builder: Emits Record
    - extractor.detection.marks: Annotates Record marks
    - extractor.validation.reconciler: Promotes Record to ValidatedRecord
    - core.models.collection: Stores ValidatedRecord per unit key
    - core.utils.serialization: JSON contract

JSON Contract:
    Keys are camelCase because the presentation layer reads the file
    directly: `question`, `markScheme`, optional `marks`, `parts`, `number`,
    plus `markSchemePoints`, `marksConsistent` and `type`. Parts carry
    `label`, `content` and optional `marks`, `type`, `options`, `codeSegments`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class PartRecord:
    """
    Lettered sub-part of a question.

    Attributes:
        label: Single lowercase letter, e.g. "a"
        content: Accumulated part text (without the "(a)" marker)
        marks: Marks stated for this part, or None when not stated
        question_type: Keyword-based type of this part, None until annotated
        options: Multiple-choice options with their "A)" markers stripped
        code_segments: Code blocks quoted in the part, one string per block
        content_lines: The part as individual source lines; used for option
            and code detection and excluded from equality

    Example:
        >>> PartRecord("a", "Explain abstraction. [2 marks]", 2).marks
        2
    """

    label: str
    content: str
    marks: Optional[int] = None
    question_type: Optional[str] = None
    options: Tuple[str, ...] = ()
    code_segments: Tuple[str, ...] = ()
    content_lines: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate part on construction."""
        if self.marks is not None and self.marks < 0:
            raise ValueError(f"Marks cannot be negative: {self.marks}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        d: Dict[str, Any] = {"label": self.label, "content": self.content}
        if self.marks is not None:
            d["marks"] = self.marks
        if self.question_type is not None:
            d["type"] = self.question_type
        if self.options:
            d["options"] = list(self.options)
        if self.code_segments:
            d["codeSegments"] = list(self.code_segments)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PartRecord:
        """Deserialize from dictionary."""
        return cls(
            label=data["label"],
            content=data.get("content", ""),
            marks=data.get("marks"),
            question_type=data.get("type"),
            options=tuple(data.get("options", [])),
            code_segments=tuple(data.get("codeSegments", [])),
        )


@dataclass(frozen=True, slots=True)
class Record:
    """
    Immutable snapshot of a closed segment.

    Attributes:
        question: Question stem text (without the "1." marker)
        mark_scheme: Mark scheme text joined with single spaces
        marks: Declared total marks, or None when not stated
        parts: Lettered sub-parts in source order
        question_number: Captured number ("1", "12"), None for an implicit
            segment opened before any question start
        mark_scheme_lines: The mark scheme as individual source lines; used
            for point extraction and excluded from equality

    Example:
        >>> r = Record("What is an algorithm? [2 marks]", "• Steps (1)", 2)
        >>> r.has_mark_scheme
        True
    """

    question: str
    mark_scheme: str
    marks: Optional[int] = None
    parts: Tuple[PartRecord, ...] = ()
    question_number: Optional[str] = None
    mark_scheme_lines: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate record on construction."""
        if self.marks is not None and self.marks < 0:
            raise ValueError(f"Marks cannot be negative: {self.marks}")

    @property
    def has_mark_scheme(self) -> bool:
        """True if any mark scheme text was captured."""
        return bool(self.mark_scheme.strip())

    @property
    def full_text(self) -> str:
        """Question, parts and mark scheme joined in source order."""
        pieces = [self.question]
        pieces.extend(part.content for part in self.parts)
        pieces.append(self.mark_scheme)
        return " ".join(p for p in pieces if p)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to dictionary for JSON storage.

        Optional fields are omitted when absent so the minimal
        `{question, markScheme}` contract is preserved.
        """
        d: Dict[str, Any] = {
            "question": self.question,
            "markScheme": self.mark_scheme,
        }
        if self.marks is not None:
            d["marks"] = self.marks
        if self.parts:
            d["parts"] = [part.to_dict() for part in self.parts]
        if self.question_number is not None:
            d["number"] = self.question_number
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Record:
        """Deserialize from dictionary."""
        return cls(
            question=data.get("question", ""),
            mark_scheme=data.get("markScheme", ""),
            marks=data.get("marks"),
            parts=tuple(PartRecord.from_dict(p) for p in data.get("parts", [])),
            question_number=data.get("number"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        part_str = f", parts={len(self.parts)}" if self.parts else ""
        return f"Record(q{self.question_number or '?'}, marks={self.marks}{part_str})"


@dataclass(frozen=True, slots=True)
class ValidatedRecord:
    """
    A Record that survived validation.

    Attributes:
        record: The validated (whitespace-normalized) record
        mark_scheme_points: Bullet/point strings extracted from the mark scheme
        marks_consistent: True when marks are absent or equal to the point count
        question_type: Keyword-based question type ("written", "explanation", ...)

    Invariants:
        - marks_consistent is a flag only; inconsistent records are kept

    Example:
        >>> rec = Record("What is an algorithm? [2 marks]", "• A (1) • B (1)", 2)
        >>> v = ValidatedRecord(rec, ("A (1)", "B (1)"), True)
        >>> v.mark_scheme_point_count
        2
    """

    record: Record
    mark_scheme_points: Tuple[str, ...] = ()
    marks_consistent: bool = True
    question_type: str = "written"

    # ─────────────────────────────────────────────────────────────────────────
    # Record passthrough
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def question(self) -> str:
        return self.record.question

    @property
    def mark_scheme(self) -> str:
        return self.record.mark_scheme

    @property
    def marks(self) -> Optional[int]:
        return self.record.marks

    @property
    def parts(self) -> Tuple[PartRecord, ...]:
        return self.record.parts

    @property
    def question_number(self) -> Optional[str]:
        return self.record.question_number

    @property
    def mark_scheme_point_count(self) -> int:
        """Number of extracted mark-scheme points."""
        return len(self.mark_scheme_points)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        d = self.record.to_dict()
        d["markSchemePoints"] = list(self.mark_scheme_points)
        d["marksConsistent"] = self.marks_consistent
        d["type"] = self.question_type
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidatedRecord:
        """
        Deserialize from dictionary.

        Files that only carry the minimal `{question, markScheme}` shape
        load with no points and a consistency flag derived from marks.
        """
        record = Record.from_dict(data)
        points = tuple(data.get("markSchemePoints", []))
        consistent = data.get(
            "marksConsistent",
            record.marks is None or len(points) == record.marks,
        )
        return cls(
            record=record,
            mark_scheme_points=points,
            marks_consistent=bool(consistent),
            question_type=data.get("type", "written"),
        )

    def __repr__(self) -> str:
        flag = "" if self.marks_consistent else ", INCONSISTENT"
        return (
            f"ValidatedRecord(q{self.question_number or '?'}, marks={self.marks}, "
            f"points={self.mark_scheme_point_count}{flag})"
        )
