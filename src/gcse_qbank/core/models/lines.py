"""
Module: lines

Purpose:
    Line-level models produced by the normalizer and classifier. Both are
    ephemeral: they exist only for one normalization + classification pass.

Key Classes:
    - RawLine: A trimmed, non-empty source line with its original index
    - LineKind: The four structural signals a line can carry
    - LineClass: Classification result (kind plus captured marker data)

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - extractor.normalizer
    - extractor.classification
    - extractor.structuring.segment_builder
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class RawLine:
    """
    A single normalized source line.

    Attributes:
        text: Line text with leading/trailing whitespace removed (never empty)
        source_index: Index of the line in the original split text

    Example:
        >>> RawLine("1. Define abstraction. [2 marks]", 4).text
        '1. Define abstraction. [2 marks]'
    """

    text: str
    source_index: int

    def __post_init__(self) -> None:
        """Validate line on construction."""
        if not self.text or self.text != self.text.strip():
            raise ValueError(f"RawLine text must be trimmed and non-empty: {self.text!r}")
        if self.source_index < 0:
            raise ValueError(f"source_index cannot be negative: {self.source_index}")


class LineKind(str, Enum):
    """Structural signal carried by a line."""
    QUESTION_START = "question_start"        # "1.", "Question 2)"
    PART_START = "part_start"                # "(a)", "b)"
    MARK_SCHEME_START = "mark_scheme_start"  # "Mark scheme:", "Marking points:"
    CONTENT = "content"                      # Anything else

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class LineClass:
    """
    Result of classifying one line.

    Attributes:
        kind: Which structural signal the line carries
        number: Captured question number (QUESTION_START only)
        label: Captured part letter (PART_START only)
        remainder: Text following the structural marker, or the whole line
            for CONTENT
        rule: Name of the classifier rule that matched

    Example:
        >>> LineClass(LineKind.PART_START, label="a", remainder="Explain abstraction.")
        LineClass(part_start, label='a')
    """

    kind: LineKind
    number: Optional[str] = None
    label: Optional[str] = None
    remainder: str = ""
    rule: str = ""

    @classmethod
    def content(cls, text: str, rule: str = "content") -> LineClass:
        """Plain content line."""
        return cls(kind=LineKind.CONTENT, remainder=text, rule=rule)

    @property
    def is_structural(self) -> bool:
        """True for every kind except CONTENT."""
        return self.kind is not LineKind.CONTENT

    def __repr__(self) -> str:
        if self.kind is LineKind.QUESTION_START:
            return f"LineClass({self.kind}, number={self.number!r})"
        if self.kind is LineKind.PART_START:
            return f"LineClass({self.kind}, label={self.label!r})"
        return f"LineClass({self.kind})"
