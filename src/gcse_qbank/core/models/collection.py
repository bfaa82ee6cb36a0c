"""
Module: collection

Purpose:
    Provides UnitCollection - the per-unit mapping of validated records and
    the only artefact that outlives a run. It is built once per document
    batch and treated as read-only by consumers.

Key Functions:
    - UnitCollection.extend(unit_key, records): Append records for a unit
    - UnitCollection.records_for(unit_key): Records for a unit (empty if unknown)
    - UnitCollection.merge(other): Concatenate another collection into this one
    - UnitCollection.to_dict() / from_dict(): JSON contract

Dependencies:
    - typing (std)
    - .records.ValidatedRecord

Used By:
    - extractor.indexing.unit_indexer: Accumulates records
    - extractor.pipeline: Aggregates per-document results
    - core.utils.serialization: Persistence
    - llm.examples: Prompt examples per unit
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple

from .records import ValidatedRecord


class UnitCollection:
    """
    Ordered mapping from unit key (e.g. "3.1") to validated records.

    Unit keys keep insertion order; records keep the order in which their
    documents were indexed. There is no de-duplication: two documents that
    map to the same unit key concatenate.

    Example:
        >>> collection = UnitCollection()
        >>> collection.records_for("3.4")
        ()
        >>> len(collection)
        0
    """

    __slots__ = ("_units",)

    def __init__(self, units: Mapping[str, Iterable[ValidatedRecord]] | None = None) -> None:
        self._units: Dict[str, List[ValidatedRecord]] = {}
        if units:
            for key, records in units.items():
                self.extend(key, records)

    # ─────────────────────────────────────────────────────────────────────────
    # Mutation (builders only)
    # ─────────────────────────────────────────────────────────────────────────

    def extend(self, unit_key: str, records: Iterable[ValidatedRecord]) -> None:
        """
        Append records under a unit key, creating the key if needed.

        Args:
            unit_key: Unit/topic key like "3.1"
            records: Validated records to append in order
        """
        if not unit_key:
            raise ValueError("unit_key cannot be empty")
        self._units.setdefault(unit_key, []).extend(records)

    def merge(self, other: UnitCollection) -> None:
        """Append every unit of `other` onto this collection."""
        for key, records in other.items():
            self.extend(key, records)

    # ─────────────────────────────────────────────────────────────────────────
    # Query
    # ─────────────────────────────────────────────────────────────────────────

    def records_for(self, unit_key: str) -> Tuple[ValidatedRecord, ...]:
        """
        Records stored for a unit key.

        A missing unit is a normal state and yields an empty tuple.
        """
        return tuple(self._units.get(unit_key, ()))

    def unit_keys(self) -> List[str]:
        """Unit keys in insertion order."""
        return list(self._units)

    def items(self) -> Iterator[Tuple[str, Tuple[ValidatedRecord, ...]]]:
        for key, records in self._units.items():
            yield key, tuple(records)

    @property
    def record_count(self) -> int:
        """Total number of records across all units."""
        return sum(len(records) for records in self._units.values())

    def __contains__(self, unit_key: object) -> bool:
        return unit_key in self._units

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitCollection):
            return NotImplemented
        return self._units == other._units

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Serialize to the on-disk `{unit_key: [record, ...]}` mapping."""
        return {
            key: [record.to_dict() for record in records]
            for key, records in self._units.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[Dict[str, Any]]]) -> UnitCollection:
        """Deserialize from the on-disk mapping."""
        collection = cls()
        for key, records in data.items():
            collection.extend(key, (ValidatedRecord.from_dict(r) for r in records))
        return collection

    def __repr__(self) -> str:
        return f"UnitCollection(units={len(self)}, records={self.record_count})"
