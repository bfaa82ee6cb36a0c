"""
Module: extractor.structuring.segment_builder

Purpose:
    Builds Records from a classified line stream. The builder is an
    explicit reducer `step(segment, line_class, text) -> (segment, emitted)`
    folded left over the lines of one document; each transition can be
    tested without a full document.

Key Functions:
    - step(): Apply one classified line to the open segment
    - build_records(): Fold a whole line sequence into Records

Key Classes:
    - SegmentPhase: Which field of the open segment receives content
    - OpenSegment: Mutable accumulator for the question being read
    - OpenPart: Mutable accumulator for one lettered part

Dependencies:
    - gcse_qbank.extractor.classification: classify, boilerplate denylist
    - gcse_qbank.core.models.records: Record, PartRecord

Used By:
    - extractor.pipeline: Second stage of the per-document fold

Transitions:
    QUESTION_START   → emit open segment, open fresh IN_QUESTION segment
    PART_START       → IN_QUESTION/IN_PART: open new part, IN_PART
                       IN_MARK_SCHEME: content of the mark scheme
    MARK_SCHEME_START→ IN_MARK_SCHEME (closes any open part)
    CONTENT          → append to the field selected by phase

Malformed input never raises. Lines before the first question start open
an implicit segment (question_number=None); an orphan "(a)" there is kept
as a part with an empty question, which the validator discards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from gcse_qbank.core.models.lines import LineClass, LineKind, RawLine
from gcse_qbank.core.models.records import PartRecord, Record
from gcse_qbank.extractor.classification import (
    CLASSIFIER_RULES,
    ClassifierRule,
    classify,
    compile_boilerplate,
    is_boilerplate,
)
from gcse_qbank.extractor.config import ExtractionConfig

logger = logging.getLogger(__name__)


class SegmentPhase(str, Enum):
    """Which field of the open segment is receiving content."""
    IN_QUESTION = "in_question"
    IN_PART = "in_part"
    IN_MARK_SCHEME = "in_mark_scheme"

    def __str__(self) -> str:
        return self.value


def _join(existing: str, text: str) -> str:
    """Append with a single separating space."""
    if not text:
        return existing
    return f"{existing} {text}" if existing else text


@dataclass
class OpenPart:
    """Lettered part being accumulated; `lines` keeps the source line breaks."""
    label: str
    text: str = ""
    lines: List[str] = field(default_factory=list)

    def add(self, text: str) -> None:
        self.text = _join(self.text, text)
        if text:
            self.lines.append(text)


@dataclass
class OpenSegment:
    """
    Accumulator for the question currently being read.

    Owned by one fold pass and discarded after it is closed into a Record.

    Attributes:
        question_number: Captured number, None for an implicit segment
        question_text: Question stem text
        parts: Parts seen so far; the last one is open while phase is IN_PART
        mark_scheme_text: Mark scheme text joined with single spaces
        mark_scheme_lines: Mark scheme lines as read
        phase: Field currently receiving content
        implicit: True if opened by a non-question line (no question start yet)
    """
    question_number: Optional[str] = None
    question_text: str = ""
    parts: List[OpenPart] = field(default_factory=list)
    mark_scheme_text: str = ""
    mark_scheme_lines: List[str] = field(default_factory=list)
    phase: SegmentPhase = SegmentPhase.IN_QUESTION
    implicit: bool = False

    @classmethod
    def for_question(cls, number: Optional[str], text: str = "") -> OpenSegment:
        """Fresh segment opened by a question start."""
        return cls(question_number=number, question_text=text)

    @property
    def has_content(self) -> bool:
        """True if any question, part or mark-scheme text was captured."""
        return bool(
            self.question_text
            or self.mark_scheme_text
            or any(p.text or p.label for p in self.parts)
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def append(self, text: str) -> None:
        """Append content to whichever field the phase selects."""
        if self.phase is SegmentPhase.IN_MARK_SCHEME:
            self.mark_scheme_text = _join(self.mark_scheme_text, text)
            if text:
                self.mark_scheme_lines.append(text)
        elif self.phase is SegmentPhase.IN_PART and self.parts:
            self.parts[-1].add(text)
        else:
            self.question_text = _join(self.question_text, text)

    def open_part(self, label: str, text: str = "") -> None:
        """Close the current part (if any) and start a new one."""
        part = OpenPart(label=label)
        part.add(text)
        self.parts.append(part)
        self.phase = SegmentPhase.IN_PART

    def start_mark_scheme(self, text: str = "") -> None:
        """Close any open part and switch to the mark scheme."""
        self.phase = SegmentPhase.IN_MARK_SCHEME
        self.append(text)

    def close(self) -> Record:
        """Snapshot this segment as an immutable Record (marks unresolved)."""
        return Record(
            question=self.question_text,
            mark_scheme=self.mark_scheme_text,
            marks=None,
            parts=tuple(
                PartRecord(label=p.label, content=p.text, content_lines=tuple(p.lines))
                for p in self.parts
            ),
            question_number=self.question_number,
            mark_scheme_lines=tuple(self.mark_scheme_lines),
        )


def step(
    segment: Optional[OpenSegment],
    line_class: LineClass,
    text: str,
) -> Tuple[OpenSegment, Optional[Record]]:
    """
    Apply one classified line.

    Args:
        segment: Currently open segment, or None before the first line
        line_class: Classification of `text`
        text: The full line text

    Returns:
        (open segment after the line, Record emitted by this line or None)

    Example:
        >>> seg, emitted = step(None, classify("1. Define RAM."), "1. Define RAM.")
        >>> seg.question_number, emitted
        ('1', None)
    """
    if line_class.kind is LineKind.QUESTION_START:
        emitted = None
        if segment is not None and (not segment.implicit or segment.has_content):
            emitted = segment.close()
        return OpenSegment.for_question(line_class.number, line_class.remainder), emitted

    if segment is None:
        logger.debug(f"Line before first question opens implicit segment: {text[:60]!r}")
        segment = OpenSegment(implicit=True)

    if line_class.kind is LineKind.PART_START:
        if segment.phase is SegmentPhase.IN_MARK_SCHEME:
            segment.append(text)
        else:
            segment.open_part(line_class.label or "", line_class.remainder)
    elif line_class.kind is LineKind.MARK_SCHEME_START:
        segment.start_mark_scheme(line_class.remainder)
    else:
        segment.append(text)

    return segment, None


def build_records(
    lines: Iterable[Union[RawLine, str]],
    config: Optional[ExtractionConfig] = None,
    *,
    rules: Sequence[ClassifierRule] = CLASSIFIER_RULES,
) -> List[Record]:
    """
    Fold a document's lines into Records.

    Boilerplate lines (page footers, letterheads) are dropped before
    classification. Bare page numbers are dropped only outside a mark
    scheme, so numeric answers survive. The final segment is emitted if it
    holds any text.

    Args:
        lines: Normalized lines (RawLine or already-trimmed strings)
        config: Extraction config (boilerplate patterns)
        rules: Classifier table

    Returns:
        Records in source order, marks not yet resolved

    Example:
        >>> records = build_records(["1. What is RAM? [1 mark]", "Mark scheme:", "• Memory"])
        >>> records[0].mark_scheme
        '• Memory'
    """
    config = config or ExtractionConfig()
    boilerplate = compile_boilerplate(config.boilerplate_patterns)
    page_numbers = compile_boilerplate(config.page_number_patterns)

    records: List[Record] = []
    segment: Optional[OpenSegment] = None
    dropped = 0

    for line in lines:
        text = line.text if isinstance(line, RawLine) else line.strip()
        if not text:
            continue
        in_mark_scheme = segment is not None and segment.phase is SegmentPhase.IN_MARK_SCHEME
        if is_boilerplate(text, boilerplate) or (
            not in_mark_scheme and is_boilerplate(text, page_numbers)
        ):
            dropped += 1
            continue

        segment, emitted = step(segment, classify(text, rules), text)
        if emitted is not None:
            records.append(emitted)

    if segment is not None and segment.has_content:
        records.append(segment.close())

    logger.debug(f"Built {len(records)} records ({dropped} boilerplate lines dropped)")
    return records
