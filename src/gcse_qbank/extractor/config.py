"""
Module: extractor.config

Purpose:
    Configuration dataclass for the extraction pipeline. Immutable settings
    for boilerplate filtering, validation thresholds, unit indexing and
    batch concurrency, validated on construction.

Key Classes:
    - ExtractionConfig: Main configuration for extraction

Key Constants:
    - DEFAULT_BOILERPLATE_PATTERNS: Header/footer lines dropped by the builder
    - DEFAULT_PAGE_NUMBER_PATTERNS: Bare page numbers, kept inside mark schemes
    - DEFAULT_UNIT_MAP: Source file name → unit key table

Dependencies:
    - dataclasses: For frozen dataclass support
    - json: Loading overrides from a config file

Used By:
    - extractor.pipeline: Uses ExtractionConfig for pipeline settings
    - extractor.structuring.segment_builder: Boilerplate patterns
    - extractor.validation.reconciler: Minimum question length
    - extractor.indexing.unit_indexer: Unit map and key template
    - cli: Builds the config from command-line options
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple


# Known page furniture for the AQA-style unit packs the bank is built from.
# Matched case-insensitively against the whole trimmed line.
DEFAULT_BOILERPLATE_PATTERNS: Tuple[str, ...] = (
    r"page\s+\d+(\s+of\s+\d+)?",
    r"turn\s+over\.?",
    r"(©|copyright\b).*",
    r"do\s+not\s+write\s+outside\s+the\s+box\.?",
    r"(ib/m/)?jun\d{2}/\d{4}/\d+.*",
    r"aqa\s+gcse\s+computer\s+science.*",
)

# Bare page numbers. Never applied inside a mark scheme ("255" is an answer there).
DEFAULT_PAGE_NUMBER_PATTERNS: Tuple[str, ...] = (
    r"\d{1,3}",
)

DEFAULT_UNIT_MAP: Mapping[str, str] = {
    "Unit1.pdf": "3.1",
    "Unit1 (text friendly).pdf": "3.1",
    "Unit2.pdf": "3.2",
    "Unit3.pdf": "3.3",
    "Unit4.pdf": "3.4",
    "Unit5.pdf": "3.5",
    "Unit6.pdf": "3.6",
    "Unit7.pdf": "3.7",
    "Unit8.pdf": "3.8",
}


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for the question extraction pipeline.

    Attributes:
        min_question_length: Questions of this length or shorter are
            discarded as mis-segmented fragments (default 10)
        boilerplate_patterns: Regexes for header/footer lines to drop
        page_number_patterns: Regexes for page-number lines, dropped only
            outside a mark scheme
        repair_encoding: Repair common mojibake before normalization
            (default False)
        line_y_tolerance: Positioned items closer than this vertically are
            joined into one line (default 5.0)
        unit_map: Exact document file name → unit key table
        unit_key_template: Format string for the trailing-integer fallback;
            receives `number` (default "3.{number}")
        aggregate_part_marks: Use the sum of part marks when no total is
            stated and every part states one (default False)
        max_workers: Thread pool size for multi-document batches (default 4)
        run_diagnostics: Collect a diagnostics report (default False)

    Example:
        >>> config = ExtractionConfig(max_workers=2)
        >>> config.min_question_length
        10
    """
    min_question_length: int = 10
    boilerplate_patterns: Tuple[str, ...] = DEFAULT_BOILERPLATE_PATTERNS
    page_number_patterns: Tuple[str, ...] = DEFAULT_PAGE_NUMBER_PATTERNS
    repair_encoding: bool = False
    line_y_tolerance: float = 5.0
    unit_map: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_UNIT_MAP))
    unit_key_template: str = "3.{number}"
    aggregate_part_marks: bool = False
    max_workers: int = 4
    run_diagnostics: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.min_question_length < 0:
            raise ValueError(f"min_question_length must be non-negative: {self.min_question_length}")
        if self.line_y_tolerance < 0:
            raise ValueError(f"line_y_tolerance must be non-negative: {self.line_y_tolerance}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
        if "{number}" not in self.unit_key_template:
            raise ValueError(f"unit_key_template must contain '{{number}}': {self.unit_key_template!r}")
        # JSON overrides arrive as lists
        object.__setattr__(self, "boilerplate_patterns", tuple(self.boilerplate_patterns))
        object.__setattr__(self, "page_number_patterns", tuple(self.page_number_patterns))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ExtractionConfig:
        """
        Build a config from a mapping of overrides.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> ExtractionConfig:
        """
        Load overrides from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the JSON is malformed or contains invalid values.
        """
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config JSON in {path.name}: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError(f"Config file must contain an object: {path.name}")
        return cls.from_dict(payload)
