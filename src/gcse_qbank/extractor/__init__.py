"""
Module: extractor

Purpose:
    Extraction pipeline turning exam-paper text into validated question
    records grouped by syllabus unit. Each document is a sequential fold
    (normalize → classify → build → marks → validate); batches run
    documents in parallel.

Key Functions:
    - build_unit_collection(): Main entry point for a batch
    - extract_records(): Single-document fold

Key Classes:
    - ExtractionConfig: Configuration for extraction settings
    - ExtractionResult: Container for extraction output

Used By:
    - gcse_qbank.cli: Command-line extraction
"""

from .config import ExtractionConfig
from .diagnostics import DiagnosticsCollector
from .pipeline import ExtractionResult, build_unit_collection, extract_records, process_document

__all__ = [
    "DiagnosticsCollector",
    "ExtractionConfig",
    "ExtractionResult",
    "build_unit_collection",
    "extract_records",
    "process_document",
]
