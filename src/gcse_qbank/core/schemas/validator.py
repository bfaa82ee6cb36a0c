"""
Schema Validation Utilities

Validates unit collection JSON before it is deserialized.

Two levels:
- Basic checks (always): mapping of non-empty string keys to lists of
  objects carrying string `question` / `markScheme` fields and well-typed
  optional fields
- Strict mode: full JSON Schema validation against
  `collection.schema.json` using `jsonschema`
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _get_jsonschema():
    """Import jsonschema lazily."""
    import jsonschema
    return jsonschema


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_collection(data: Any, *, strict: bool = False) -> None:
    """
    Validate unit collection data.

    Args:
        data: Parsed JSON (expected `{unit_key: [record, ...]}`)
        strict: If True, also run full jsonschema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Collection must be an object, got {type(data).__name__}",
            path="",
        )

    for unit_key, records in data.items():
        if not isinstance(unit_key, str) or not unit_key:
            raise ValidationError(f"Invalid unit key: {unit_key!r}", path="")
        if not isinstance(records, list):
            raise ValidationError(
                f"Unit {unit_key!r} must map to a list",
                path=unit_key,
            )
        for i, record in enumerate(records):
            validate_record(record, path=f"{unit_key}[{i}]")

    if strict:
        jsonschema = _get_jsonschema()
        schema = _load_schema("collection")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e


def validate_record(data: Any, path: str = "") -> None:
    """Validate one serialized record."""
    if not isinstance(data, dict):
        raise ValidationError("Record must be an object", path=path)

    missing = [f for f in ("question", "markScheme") if f not in data]
    if missing:
        raise ValidationError(
            f"Record missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )

    for key in ("question", "markScheme"):
        if not isinstance(data[key], str):
            raise ValidationError(f"{key} must be a string", path=f"{path}.{key}")

    if "marks" in data:
        _validate_marks(data["marks"], f"{path}.marks")

    parts = data.get("parts", [])
    if not isinstance(parts, list):
        raise ValidationError("parts must be a list", path=f"{path}.parts")
    for i, part in enumerate(parts):
        _validate_part(part, f"{path}.parts[{i}]")

    points = data.get("markSchemePoints", [])
    if not isinstance(points, list) or not all(isinstance(p, str) for p in points):
        raise ValidationError(
            "markSchemePoints must be a list of strings",
            path=f"{path}.markSchemePoints",
        )

    if "marksConsistent" in data and not isinstance(data["marksConsistent"], bool):
        raise ValidationError(
            "marksConsistent must be a boolean",
            path=f"{path}.marksConsistent",
        )


def _validate_part(data: Any, path: str) -> None:
    """Validate a serialized part."""
    if not isinstance(data, dict):
        raise ValidationError("Part must be an object", path=path)

    label = data.get("label")
    if not (isinstance(label, str) and len(label) == 1 and label.islower()):
        raise ValidationError(f"Invalid part label: {label!r}", path=f"{path}.label")

    if not isinstance(data.get("content", ""), str):
        raise ValidationError("content must be a string", path=f"{path}.content")

    if "marks" in data:
        _validate_marks(data["marks"], f"{path}.marks")

    if "type" in data and not isinstance(data["type"], str):
        raise ValidationError("type must be a string", path=f"{path}.type")

    for key in ("options", "codeSegments"):
        values = data.get(key, [])
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValidationError(f"{key} must be a list of strings", path=f"{path}.{key}")


def _validate_marks(value: Any, path: str) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(
            f"Invalid marks: {value!r} (must be non-negative integer)",
            path=path,
        )
