"""Unit key resolution and record indexing."""

from .unit_indexer import UnresolvedUnitError, index_records, resolve_unit_key

__all__ = ["UnresolvedUnitError", "index_records", "resolve_unit_key"]
