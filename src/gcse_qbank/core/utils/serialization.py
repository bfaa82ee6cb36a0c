"""
Serialization Utilities

Provides to/from JSON utilities for the unit collection.

- `serialize_*` / `deserialize_*` are pure dict conversions
- Validation runs before deserialization and fails fast
- File writes go through `file_locking` so concurrent writers never
  interleave and readers never see a partial file
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..models.collection import UnitCollection
from ..schemas.validator import validate_collection, ValidationError
from .file_locking import locked_read_modify_write_json, locked_write_json

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Collection Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_collection(collection: UnitCollection) -> dict[str, Any]:
    """
    Serialize a UnitCollection to the on-disk mapping.

    Args:
        collection: Collection to serialize

    Returns:
        `{unit_key: [record_dict, ...]}` suitable for JSON
    """
    return collection.to_dict()


def deserialize_collection(
    data: Any,
    *,
    validate: bool = True,
    strict: bool = False,
) -> UnitCollection:
    """
    Deserialize a UnitCollection from parsed JSON.

    Args:
        data: Parsed JSON mapping
        validate: Whether to run structural validation first
        strict: Whether validation also runs the full JSON Schema

    Returns:
        UnitCollection instance

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_collection(data, strict=strict)
    return UnitCollection.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# File Utilities
# ─────────────────────────────────────────────────────────────────────────────

def save_collection_json(collection: UnitCollection, path: Path) -> None:
    """
    Save a collection to a JSON file, replacing any existing file.

    Raises:
        OSError: If the output path is not writable.
    """
    locked_write_json(path, serialize_collection(collection))
    logger.info(
        f"Saved {collection.record_count} records across {len(collection)} units to {path}",
        extra={"path": str(path), "unit_count": len(collection)},
    )


def load_collection_json(
    path: Path,
    *,
    validate: bool = True,
    strict: bool = False,
) -> UnitCollection:
    """
    Load a collection from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Collection file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON in {path.name}: {e}",
                path=str(path),
                errors=[str(e)],
            ) from e

    return deserialize_collection(data, validate=validate, strict=strict)


def merge_collection_into_file(collection: UnitCollection, path: Path) -> UnitCollection:
    """
    Append a collection's records onto an existing collection file.

    Records for unit keys already present in the file are concatenated
    after the existing ones; the merge runs under an exclusive lock.

    Returns:
        The merged collection as written.
    """
    def _merge(existing: dict[str, Any]) -> dict[str, Any]:
        validate_collection(existing)
        for key, records in serialize_collection(collection).items():
            existing.setdefault(key, []).extend(records)
        return existing

    merged = locked_read_modify_write_json(path, _merge)
    logger.info(f"Merged {collection.record_count} records into {path}")
    return UnitCollection.from_dict(merged)
