"""
Module: extractor.normalizer

Purpose:
    Line normalization - turns a raw extracted-text blob (or positioned
    page items) into an ordered sequence of trimmed, non-empty RawLines.
    Content is otherwise left untouched; encoding repair is a separate,
    opt-in pre-processing step.

Key Functions:
    - normalize_lines(): Split, trim and drop blank lines
    - lines_from_positioned(): Sort positioned items into lines per page
    - lines_from_source(): Dispatch on the RawSource union
    - repair_encoding(): Replace known mojibake sequences

Dependencies:
    - gcse_qbank.core.models: RawLine, PlainText, Positioned

Used By:
    - extractor.pipeline: First stage of the per-document fold
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from gcse_qbank.core.models.lines import RawLine
from gcse_qbank.core.models.sources import PlainText, Positioned, PositionedItem, RawSource

logger = logging.getLogger(__name__)

# UTF-8 bytes decoded as cp1252/latin-1 by the upstream extractor.
# Longest sequences first so "â€œ" is not eaten by a shorter prefix.
MOJIBAKE_REPLACEMENTS = (
    ("â€¢", "•"),
    ("â€™", "'"),
    ("â€˜", "'"),
    ("â€œ", '"'),
    ("â€\x9d", '"'),
    ("â€“", "-"),
    ("â€”", "-"),
    ("â€¦", "..."),
    ("Â£", "£"),
    ("Â©", "©"),
    ("Â\xa0", " "),
    ("Â ", " "),
)


def normalize_lines(text: str) -> List[RawLine]:
    """
    Split raw text into trimmed, non-empty lines in source order.

    Args:
        text: Raw document text

    Returns:
        List of RawLine; `source_index` is the position in the raw split

    Example:
        >>> [l.text for l in normalize_lines("  1. Q  \\n\\n Mark scheme: ")]
        ['1. Q', 'Mark scheme:']
    """
    lines: List[RawLine] = []
    for index, raw in enumerate(text.splitlines()):
        stripped = raw.strip()
        if stripped:
            lines.append(RawLine(stripped, index))
    return lines


def lines_from_positioned(
    pages: Sequence[Sequence[PositionedItem]],
    y_tolerance: float = 5.0,
) -> List[RawLine]:
    """
    Reduce positioned page items to RawLines.

    Items are sorted by `y` then `x` within each page. Items whose `y`
    differs from the current row's first item by less than `y_tolerance`
    are joined into one line (left to right) with a single space.
    Pages keep their order; `source_index` counts rows across pages.

    Args:
        pages: Per-page item sequences
        y_tolerance: Vertical distance within which items share a row

    Returns:
        List of RawLine
    """
    rows: List[str] = []
    for page in pages:
        rows.extend(_rows_for_page(page, y_tolerance))
    return normalize_lines("\n".join(rows))


def _rows_for_page(items: Iterable[PositionedItem], y_tolerance: float) -> List[str]:
    ordered = sorted(items, key=lambda item: (item.y, item.x))
    rows: List[List[PositionedItem]] = []
    for item in ordered:
        if not item.text.strip():
            continue
        if rows and abs(item.y - rows[-1][0].y) < y_tolerance:
            rows[-1].append(item)
        else:
            rows.append([item])
    return [
        " ".join(i.text.strip() for i in sorted(row, key=lambda i: i.x))
        for row in rows
    ]


def lines_from_source(
    source: RawSource,
    *,
    y_tolerance: float = 5.0,
    repair: bool = False,
) -> List[RawLine]:
    """
    Normalize either RawSource variant.

    Args:
        source: PlainText or Positioned
        y_tolerance: Row tolerance for Positioned sources
        repair: Apply `repair_encoding()` to the text first

    Raises:
        TypeError: If source is neither variant
    """
    if isinstance(source, PlainText):
        text = repair_encoding(source.text) if repair else source.text
        return normalize_lines(text)

    if isinstance(source, Positioned):
        pages = source.pages
        if repair:
            pages = tuple(
                tuple(PositionedItem(repair_encoding(i.text), i.x, i.y) for i in page)
                for page in pages
            )
        return lines_from_positioned(pages, y_tolerance)

    raise TypeError(f"Unsupported source type: {type(source).__name__}")


def repair_encoding(text: str) -> str:
    """
    Repair common UTF-8-as-cp1252 mojibake (garbled bullets, quotes, £).

    Lossy by nature: only the known sequences are replaced, anything else
    passes through unchanged.

    Example:
        >>> repair_encoding("â€¢ Costs Â£10")
        '• Costs £10'
    """
    if "â" not in text and "Â" not in text:
        return text
    for bad, good in MOJIBAKE_REPLACEMENTS:
        text = text.replace(bad, good)
    return text
