"""
Module: extractor.validation.reconciler

Purpose:
    Filters low-quality records and reconciles declared marks against the
    mark scheme. This is the quality gate between the builder (which never
    fails) and the unit collection.

Key Functions:
    - validate_record(): One record → ValidationOutcome (kept or discarded)
    - validate_records(): Kept records for a document, issues reported
    - collapse_whitespace(): Idempotent whitespace normalization

Key Classes:
    - ValidationOutcome: Result of validating one record

Dependencies:
    - gcse_qbank.extractor.markscheme: Point extraction
    - gcse_qbank.extractor.classification: Question type heuristic

Used By:
    - extractor.pipeline: Final stage of the per-document fold

Rules:
    - Discard when the question is empty or not longer than
      config.min_question_length characters
    - Discard when there is neither mark scheme text nor declared marks
    - marks_consistent = marks is None or point count == marks; a mismatch
      is logged and reported, never discarded
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from gcse_qbank.core.models.records import Record, ValidatedRecord
from gcse_qbank.extractor.classification import classify_question_type
from gcse_qbank.extractor.config import ExtractionConfig
from gcse_qbank.extractor.diagnostics import DiagnosticsCollector
from gcse_qbank.extractor.markscheme import extract_mark_points

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

REASON_EMPTY_QUESTION = "empty question"
REASON_SHORT_QUESTION = "question too short"
REASON_INCOMPLETE = "no mark scheme or marks"


def collapse_whitespace(text: str) -> str:
    """
    Collapse whitespace runs to single spaces and trim.

    Example:
        >>> collapse_whitespace("  What   is\\tRAM? ")
        'What is RAM?'
    """
    return _WHITESPACE.sub(" ", text).strip()


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of validating a single record.

    Exactly one of `validated` / `reason` is set.
    """
    validated: Optional[ValidatedRecord] = None
    reason: Optional[str] = None

    @property
    def kept(self) -> bool:
        return self.validated is not None


def _normalize(record: Record) -> Record:
    parts = tuple(
        replace(
            part,
            content=collapse_whitespace(part.content),
            options=tuple(collapse_whitespace(o) for o in part.options),
        )
        for part in record.parts
    )
    return replace(
        record,
        question=collapse_whitespace(record.question),
        mark_scheme=collapse_whitespace(record.mark_scheme),
        parts=parts,
    )


def _question_text(record: Record) -> str:
    return " ".join([record.question, *(part.content for part in record.parts)])


def validate_record(record: Record, config: Optional[ExtractionConfig] = None) -> ValidationOutcome:
    """
    Validate and reconcile one record.

    Args:
        record: Closed record with marks already resolved
        config: Extraction config (min_question_length)

    Returns:
        ValidationOutcome carrying either the ValidatedRecord or the
        discard reason
    """
    config = config or ExtractionConfig()
    record = _normalize(record)

    if not record.question:
        return ValidationOutcome(reason=REASON_EMPTY_QUESTION)
    if len(record.question) <= config.min_question_length:
        return ValidationOutcome(reason=REASON_SHORT_QUESTION)
    if not record.mark_scheme and record.marks is None:
        return ValidationOutcome(reason=REASON_INCOMPLETE)

    source = record.mark_scheme_lines or record.mark_scheme
    points = tuple(filter(None, (collapse_whitespace(p) for p in extract_mark_points(source))))
    consistent = record.marks is None or len(points) == record.marks

    return ValidationOutcome(validated=ValidatedRecord(
        record=record,
        mark_scheme_points=points,
        marks_consistent=consistent,
        question_type=classify_question_type(_question_text(record)),
    ))


def validate_records(
    records: Iterable[Record],
    config: Optional[ExtractionConfig] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
    *,
    document_id: str = "",
) -> List[ValidatedRecord]:
    """
    Validate a document's records, keeping order.

    Discards and marks mismatches are logged and, when a collector is
    given, recorded as diagnostics issues.

    Returns:
        The kept records
    """
    config = config or ExtractionConfig()
    kept: List[ValidatedRecord] = []
    discarded = 0

    for record in records:
        outcome = validate_record(record, config)
        excerpt = record.question[:80]

        if not outcome.kept:
            discarded += 1
            logger.debug(
                f"Discarded Q{record.question_number or '?'}: {outcome.reason}",
                extra={"document_id": document_id, "reason": outcome.reason},
            )
            if diagnostics is not None:
                diagnostics.add_discarded_record(
                    document_id, outcome.reason, record.question_number, excerpt
                )
            continue

        validated = outcome.validated
        if not validated.marks_consistent:
            logger.warning(
                f"Q{validated.question_number or '?'}: {validated.marks} marks but "
                f"{validated.mark_scheme_point_count} mark scheme points",
                extra={"document_id": document_id},
            )
            if diagnostics is not None:
                diagnostics.add_marks_mismatch(
                    document_id,
                    validated.marks,
                    validated.mark_scheme_point_count,
                    validated.question_number,
                    excerpt,
                )
        kept.append(validated)

    if discarded:
        logger.debug(f"{document_id or 'document'}: kept {len(kept)}, discarded {discarded}")
    return kept
