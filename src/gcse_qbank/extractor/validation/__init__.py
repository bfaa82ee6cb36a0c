"""
Module: extractor.validation

Purpose:
    Record validation and marks reconciliation.
"""

from .reconciler import (
    ValidationOutcome,
    collapse_whitespace,
    validate_record,
    validate_records,
)

__all__ = [
    "ValidationOutcome",
    "collapse_whitespace",
    "validate_record",
    "validate_records",
]
