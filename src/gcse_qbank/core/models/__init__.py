"""
Core Models Package

Immutable data models that flow between the extraction stages.

| Stage | Model | Notes |
|-------|-------|-------|
| Ingestion | `PlainText` / `Positioned` | Tagged union decided once |
| Normalizer | `RawLine` | Trimmed, non-empty, ordered |
| Classifier | `LineClass` | Pure function of line text |
| Builder | `Record` / `PartRecord` | Snapshot of a closed segment |
| Validator | `ValidatedRecord` | Adds points and consistency flag |
| Indexer | `UnitCollection` | The persisted artefact |
"""

from .lines import LineClass, LineKind, RawLine
from .sources import PlainText, Positioned, PositionedItem, RawSource
from .records import PartRecord, Record, ValidatedRecord
from .collection import UnitCollection

__all__ = [
    "LineClass",
    "LineKind",
    "PartRecord",
    "PlainText",
    "Positioned",
    "PositionedItem",
    "RawLine",
    "RawSource",
    "Record",
    "UnitCollection",
    "ValidatedRecord",
]
