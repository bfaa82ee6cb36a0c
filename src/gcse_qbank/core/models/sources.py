"""
Module: sources

Purpose:
    Tagged union for document text delivered by the upstream extractor.
    The shape is decided once at the ingestion boundary so later stages
    never probe for optional fields.

Key Classes:
    - PlainText: A whole document as one text blob
    - PositionedItem: One text item with page coordinates
    - Positioned: Per-page sequences of positioned items

Dependencies:
    - dataclasses (std)

Used By:
    - sources.pdf: Produces Positioned from PyMuPDF text dicts
    - extractor.normalizer: Reduces either variant to RawLines
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple, Union


@dataclass(frozen=True, slots=True)
class PlainText:
    """Raw extracted text for a whole document."""

    text: str


@dataclass(frozen=True, slots=True)
class PositionedItem:
    """
    Text item with its position on the page.

    Attributes:
        text: Item text as extracted (may contain surrounding whitespace)
        x: Left coordinate in page units
        y: Top coordinate in page units (grows downwards)
    """

    text: str
    x: float
    y: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PositionedItem:
        """Build from a `{text, x, y}` mapping."""
        return cls(text=str(data["text"]), x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class Positioned:
    """
    Positioned line items grouped by page, in page order.

    Attributes:
        pages: One tuple of PositionedItem per page
    """

    pages: Tuple[Tuple[PositionedItem, ...], ...]

    @classmethod
    def from_pages(cls, pages: Iterable[Iterable[Any]]) -> Positioned:
        """
        Build from nested iterables of PositionedItem or `{text, x, y}` dicts.

        Example:
            >>> src = Positioned.from_pages([[{"text": "1. Q", "x": 10, "y": 20}]])
            >>> src.pages[0][0].y
            20.0
        """
        return cls(
            pages=tuple(
                tuple(
                    item if isinstance(item, PositionedItem) else PositionedItem.from_dict(item)
                    for item in page
                )
                for page in pages
            )
        )


RawSource = Union[PlainText, Positioned]
