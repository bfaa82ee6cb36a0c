"""
GCSE Question Bank Core Package

Shared data models and utilities used by every stage of the extractor.

**DESIGN NOTES:**

1. **Immutable Records**
   - The segment builder owns the only mutable state (`OpenSegment`)
   - Everything it emits is a frozen dataclass

2. **Optional Marks**
   - `marks: Optional[int]` keeps "no marks stated" apart from "stated as zero"

3. **Explicit Collections**
   - `UnitCollection` is a value passed to whoever needs it, never a
     module-level cache
"""

from .models import (
    LineClass,
    LineKind,
    PartRecord,
    PlainText,
    Positioned,
    PositionedItem,
    RawLine,
    Record,
    UnitCollection,
    ValidatedRecord,
)

__all__ = [
    "LineClass",
    "LineKind",
    "PartRecord",
    "PlainText",
    "Positioned",
    "PositionedItem",
    "RawLine",
    "Record",
    "UnitCollection",
    "ValidatedRecord",
]
