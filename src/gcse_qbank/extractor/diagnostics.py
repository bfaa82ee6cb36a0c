"""
Module: extractor.diagnostics

Captures extraction issues (discarded records, marks that disagree with the
mark scheme, documents that failed to load) and generates a report for
reviewing a batch run.

Structure:
- Each issue names the document, the question number when known, and a
  short text excerpt of the offending record
- Collectors are shared by the worker threads of one batch
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

logger = logging.getLogger(__name__)

DISCARDED_RECORD = "discarded_record"
MARKS_MISMATCH = "marks_mismatch"
DOCUMENT_FAILURE = "document_failure"

_EXCERPT_LIMIT = 200


@dataclass
class ExtractionIssue:
    """
    A single extraction issue.

    Fields:
    - question_number: Captured number, None for implicit segments
    - excerpt: Leading question text (truncated)
    - details: Free-form context, e.g. {"declared": 3, "points": 2}
    """
    issue_type: str
    document_id: str
    message: str
    question_number: Optional[str] = None
    excerpt: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "issue_type": self.issue_type,
            "document_id": self.document_id,
            "message": self.message,
        }
        if self.question_number is not None:
            d["question_number"] = self.question_number
        if self.excerpt:
            d["excerpt"] = self.excerpt[:_EXCERPT_LIMIT]
        if self.details:
            d["details"] = self.details
        return d


class DiagnosticsCollector:
    """
    Thread-safe collector for extraction issues.
    """

    def __init__(self):
        self._issues: List[ExtractionIssue] = []
        self._lock = threading.Lock()
        self._documents: Set[str] = set()

    def _add(self, issue: ExtractionIssue) -> None:
        with self._lock:
            self._issues.append(issue)
            self._documents.add(issue.document_id)

    def add_discarded_record(
        self,
        document_id: str,
        reason: str,
        question_number: Optional[str] = None,
        excerpt: str = "",
    ) -> None:
        """Record a segment the validator dropped."""
        label = f"Q{question_number}" if question_number else "Q?"
        self._add(ExtractionIssue(
            issue_type=DISCARDED_RECORD,
            document_id=document_id,
            message=f"{label} discarded: {reason}",
            question_number=question_number,
            excerpt=excerpt,
            details={"reason": reason},
        ))

    def add_marks_mismatch(
        self,
        document_id: str,
        declared: int,
        points: int,
        question_number: Optional[str] = None,
        excerpt: str = "",
    ) -> None:
        """Record a kept record whose point count differs from its marks."""
        label = f"Q{question_number}" if question_number else "Q?"
        self._add(ExtractionIssue(
            issue_type=MARKS_MISMATCH,
            document_id=document_id,
            message=f"{label}: {declared} marks declared, {points} mark scheme points",
            question_number=question_number,
            excerpt=excerpt,
            details={"declared": declared, "points": points},
        ))

    def add_document_failure(self, document_id: str, error: BaseException) -> None:
        """Record a document that produced no records because it failed."""
        self._add(ExtractionIssue(
            issue_type=DOCUMENT_FAILURE,
            document_id=document_id,
            message=f"{type(error).__name__}: {error}",
            details={"error_type": type(error).__name__},
        ))

    def generate_report(self) -> "DiagnosticsReport":
        with self._lock:
            return DiagnosticsReport.from_issues(list(self._issues), set(self._documents))

    @property
    def issue_count(self) -> int:
        with self._lock:
            return len(self._issues)


@dataclass
class DiagnosticsReport:
    """Complete diagnostics report."""
    generated_at: str
    documents: List[str]
    total_issues: int
    summary_by_type: Dict[str, int]
    issues: List[ExtractionIssue]

    @classmethod
    def from_issues(cls, issues: List[ExtractionIssue], documents: Set[str]) -> "DiagnosticsReport":
        summary_by_type: Dict[str, int] = {}
        for issue in issues:
            summary_by_type[issue.issue_type] = summary_by_type.get(issue.issue_type, 0) + 1

        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(),
            documents=sorted(documents),
            total_issues=len(issues),
            summary_by_type=summary_by_type,
            issues=issues,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "documents": self.documents,
            "total_issues": self.total_issues,
            "summary_by_type": self.summary_by_type,
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Extraction diagnostics saved: {path}")
