"""
Module: extractor.classification

Purpose:
    Boundary classification - decides whether a line opens a question, a
    lettered part, a mark scheme, or is plain content. Rules live in one
    prioritized table so each can be tested on its own and new source
    formats are added as rows.

    Also hosts the two other per-line/per-text heuristics: the boilerplate
    denylist and the keyword-based question type classifier.

Key Functions:
    - classify(): Classify one line against the rule table
    - is_boilerplate(): Match a line against header/footer patterns
    - compile_boilerplate(): Pre-compile a boilerplate pattern list
    - classify_question_type(): Keyword heuristic for question type

Key Classes:
    - ClassifierRule: Named row of the classifier table

Dependencies:
    - re (std)
    - gcse_qbank.core.models.lines: LineClass, LineKind

Used By:
    - extractor.structuring.segment_builder: Per-line signals
    - extractor.validation.reconciler: Question type
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Sequence, Tuple

from gcse_qbank.core.models.lines import LineClass, LineKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierRule:
    """
    One row of the boundary classifier table.

    Attributes:
        name: Stable rule name, recorded on the LineClass it produces
        kind: LineKind emitted on match
        pattern: Compiled regex; `match()` is used unless `search` is set.
            Named groups `number`, `label` and `rest` are read if present.
        search: Use `search()` instead of `match()` (substring rules)
    """
    name: str
    kind: LineKind
    pattern: Pattern[str]
    search: bool = False

    def apply(self, line: str) -> Optional[LineClass]:
        """Return a LineClass if this rule matches `line`, else None."""
        m = self.pattern.search(line) if self.search else self.pattern.match(line)
        if m is None:
            return None
        groups = m.groupdict()
        rest = groups.get("rest")
        return LineClass(
            kind=self.kind,
            number=groups.get("number"),
            label=groups.get("label").lower() if groups.get("label") else None,
            remainder=(rest or "").strip(),
            rule=self.name,
        )


# Priority order matters: a "Mark scheme" line can also start with "1." in
# some packs, and "(a)" lines can mention a mark scheme.
CLASSIFIER_RULES: Tuple[ClassifierRule, ...] = (
    ClassifierRule(
        name="mark_scheme_header",
        kind=LineKind.MARK_SCHEME_START,
        pattern=re.compile(
            r"(?i)^(?:mark(?:ing)?\s+scheme|mark(?:ing)?\s+points)\b\s*:?\s*(?P<rest>.*)$"
        ),
    ),
    ClassifierRule(
        name="mark_scheme_phrase",
        kind=LineKind.MARK_SCHEME_START,
        pattern=re.compile(r"(?i)mark(?:ing)?\s+scheme"),
        search=True,
    ),
    ClassifierRule(
        name="question_start",
        kind=LineKind.QUESTION_START,
        # "3.5 GHz" is a decimal, not question 3
        pattern=re.compile(r"(?i)^(?:question\s+)?(?P<number>\d+)\s*[.)](?!\d)\s*(?P<rest>.*)$"),
    ),
    ClassifierRule(
        name="part_start",
        kind=LineKind.PART_START,
        pattern=re.compile(r"^\(?(?P<label>[a-z])\)\s*(?P<rest>.*)$"),
    ),
)


def classify(line: str, rules: Sequence[ClassifierRule] = CLASSIFIER_RULES) -> LineClass:
    """
    Classify a line; the first matching rule wins.

    Mark allocations such as "[3 marks]" never affect classification;
    they are read later from the accumulated segment text.

    Args:
        line: Trimmed line text
        rules: Classifier table (defaults to CLASSIFIER_RULES)

    Returns:
        LineClass; CONTENT with the whole line as remainder if nothing matched

    Example:
        >>> classify("Question 3) Describe RAM.").number
        '3'
        >>> classify("(b) State one benefit.").label
        'b'
        >>> classify("Marking points: award one mark").kind
        <LineKind.MARK_SCHEME_START: 'mark_scheme_start'>
    """
    for rule in rules:
        result = rule.apply(line)
        if result is not None:
            return result
    return LineClass.content(line)


# ─────────────────────────────────────────────────────────────────────────────
# Boilerplate Denylist
# ─────────────────────────────────────────────────────────────────────────────

def compile_boilerplate(patterns: Iterable[str]) -> Tuple[Pattern[str], ...]:
    """
    Compile boilerplate patterns as whole-line, case-insensitive regexes.

    Raises:
        ValueError: If a pattern is not a valid regex
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(rf"(?i)^(?:{pattern})$"))
        except re.error as e:
            raise ValueError(f"Invalid boilerplate pattern {pattern!r}: {e}") from e
    return tuple(compiled)


def is_boilerplate(line: str, patterns: Sequence[Pattern[str]]) -> bool:
    """
    Check a line against compiled boilerplate patterns.

    Example:
        >>> from gcse_qbank.extractor.config import DEFAULT_BOILERPLATE_PATTERNS
        >>> is_boilerplate("Page 3 of 12", compile_boilerplate(DEFAULT_BOILERPLATE_PATTERNS))
        True
    """
    return any(p.match(line) for p in patterns)


# ─────────────────────────────────────────────────────────────────────────────
# Question Type
# ─────────────────────────────────────────────────────────────────────────────

# Checked in order; more specific phrases come first
QUESTION_TYPE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("table-completion", ("complete the table", "fill in the table")),
    ("code-completion", ("complete the", "fill in", "write the missing")),
    ("calculation", ("calculate", "compute", "work out", "how many")),
    ("multiple-choice", ("which", "select", "choose", "shade")),
    ("explanation", ("explain", "describe", "discuss", "give a reason")),
    ("definition", ("define", "what is", "state what")),
)

DEFAULT_QUESTION_TYPE = "written"


def classify_question_type(text: str) -> str:
    """
    Classify question text into a coarse type by keyword.

    Args:
        text: Question (and part) text

    Returns:
        One of the QUESTION_TYPE_KEYWORDS types, or "written"

    Example:
        >>> classify_question_type("Complete the table to show the binary values.")
        'table-completion'
        >>> classify_question_type("Explain why abstraction is used.")
        'explanation'
    """
    lowered = text.lower()
    for question_type, keywords in QUESTION_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return question_type
    return DEFAULT_QUESTION_TYPE
