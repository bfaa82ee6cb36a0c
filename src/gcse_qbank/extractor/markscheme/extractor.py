"""
Module: extractor.markscheme.extractor

Purpose:
    Splits a mark scheme into individual creditable points. The point count
    is reconciled against the declared marks by the validator.

Key Functions:
    - extract_mark_points(): Mark scheme lines (or text) → point strings
    - split_inline_bullets(): Split "• a • b" into separate lines

Dependencies:
    - re (std)

Used By:
    - extractor.validation.reconciler: Point count for marks consistency
"""

from __future__ import annotations

import re
from typing import Iterable, List, Tuple, Union

BULLET_CHARS = "•-*"

# Leading marker → stripped. Ordered: bullets, lettered, numbered.
_MARKER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^[•\-\*]\s*"),
    re.compile(r"^\(?[a-z]\)\s*"),
    re.compile(r"^\d+\s*[.)]\s*"),
)

_CREDIT_KEYWORDS = re.compile(r"(?i)\b(award|accept|allow|credit)\b")
_INLINE_BULLET = re.compile(r"\s*•\s*")


def split_inline_bullets(line: str) -> List[str]:
    """
    Split a line carrying several "•" bullets into one line per bullet.

    A line with at most one bullet is returned unchanged.

    Example:
        >>> split_inline_bullets("• Fast • Volatile")
        ['• Fast', '• Volatile']
    """
    if line.count("•") <= 1:
        return [line]
    pieces = [p.strip() for p in _INLINE_BULLET.split(line)]
    head, bullets = pieces[0], [p for p in pieces[1:] if p]
    result = [head] if head else []
    result.extend(f"• {b}" for b in bullets)
    return result


def _strip_marker(line: str) -> Tuple[str, bool]:
    """Remove a leading point marker. Returns (text, had_marker)."""
    for pattern in _MARKER_PATTERNS:
        match = pattern.match(line)
        if match:
            return line[match.end():].strip(), True
    return line, False


def extract_mark_points(lines: Union[Iterable[str], str]) -> List[str]:
    """
    Extract creditable points from mark scheme lines.

    A line is a point if it starts with a bullet ("•", "-", "*"), a letter
    label "a)" or a number "1." / "1)", or if it mentions
    award/accept/allow/credit. Leading markers are stripped. A plain string
    is split on line breaks first. Never raises.

    Args:
        lines: Mark scheme lines, or the mark scheme as one string

    Returns:
        Point texts in order (empty points are dropped)

    Example:
        >>> extract_mark_points(["• Stores data (1)", "Accept: memory", "Examiner note"])
        ['Stores data (1)', 'Accept: memory']
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    points: List[str] = []
    for raw in lines:
        for line in split_inline_bullets((raw or "").strip()):
            if not line:
                continue
            text, had_marker = _strip_marker(line)
            if not had_marker and not _CREDIT_KEYWORDS.search(line):
                continue
            if text:
                points.append(text)
    return points
