"""
Module: extractor.pipeline

Purpose:
    Main pipeline orchestrator. Runs the per-document fold
    (normalize → build → annotate marks → validate) and builds a
    UnitCollection from a batch of documents.

Key Functions:
    - extract_records(): RawSource → ValidatedRecords (pure, sequential)
    - process_document(): One SourceDocument → DocumentResult
    - build_unit_collection(): Batch → ExtractionResult

Key Classes:
    - DocumentResult: Per-document output or failure
    - ExtractionResult: Container for the batch output

Dependencies:
    - gcse_qbank.extractor.normalizer: Line normalization
    - gcse_qbank.extractor.structuring: Segment builder
    - gcse_qbank.extractor.detection: Mark resolution
    - gcse_qbank.extractor.validation: Quality gate
    - gcse_qbank.extractor.indexing: Unit keys

Used By:
    - gcse_qbank.cli: Command-line extraction

Concurrency:
    Documents run on a bounded thread pool. Workers share nothing but the
    diagnostics collector; the collection is assembled by the calling
    thread after every worker has finished, in input order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from gcse_qbank.core.models.collection import UnitCollection
from gcse_qbank.core.models.records import ValidatedRecord
from gcse_qbank.core.models.sources import RawSource
from gcse_qbank.sources.base import NoDocumentsError, SourceDocument

from .config import ExtractionConfig
from .detection.marks import annotate_record
from .diagnostics import DiagnosticsCollector
from .indexing.unit_indexer import index_records, resolve_unit_key
from .normalizer import lines_from_source
from .structuring.segment_builder import build_records
from .validation.reconciler import validate_records

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """
    Outcome of processing one document.

    Attributes:
        document_id: Source document id
        unit_key: Resolved unit key, None if the document failed
        records: Kept records (empty on failure)
        error: Failure message, None on success
    """
    document_id: str
    unit_key: Optional[str] = None
    records: List[ValidatedRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ExtractionResult:
    """
    Result of extracting a batch of documents.

    Attributes:
        collection: Records grouped by unit key
        document_count: Number of documents in the batch
        failed_documents: Ids of documents that contributed no records
            because they failed
        warnings: Warning messages for failed documents
        diagnostics: Collector used for the run, if any
    """
    collection: UnitCollection
    document_count: int
    failed_documents: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    diagnostics: Optional[DiagnosticsCollector] = None

    @property
    def record_count(self) -> int:
        return self.collection.record_count


def extract_records(
    source: RawSource,
    config: Optional[ExtractionConfig] = None,
    *,
    diagnostics: Optional[DiagnosticsCollector] = None,
    document_id: str = "",
) -> List[ValidatedRecord]:
    """
    Run the sequential fold over one document.

    Pipeline:
    1. Normalize the source to trimmed, non-blank lines
    2. Fold lines into Records (boilerplate dropped)
    3. Resolve question and part marks
    4. Validate, reconcile marks and classify question type

    Args:
        source: PlainText or Positioned source
        config: Extraction configuration
        diagnostics: Optional collector for discards and mismatches
        document_id: Id used in logs and diagnostics

    Returns:
        Kept records in source order
    """
    config = config or ExtractionConfig()

    lines = lines_from_source(
        source,
        y_tolerance=config.line_y_tolerance,
        repair=config.repair_encoding,
    )
    records = [
        annotate_record(record, aggregate_part_marks=config.aggregate_part_marks)
        for record in build_records(lines, config)
    ]
    kept = validate_records(records, config, diagnostics, document_id=document_id)

    logger.debug(
        f"{document_id or 'document'}: {len(lines)} lines, {len(records)} segments, "
        f"{len(kept)} kept"
    )
    return kept


def process_document(
    document: SourceDocument,
    config: Optional[ExtractionConfig] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
) -> DocumentResult:
    """
    Load, extract and key one document.

    Any failure (unreadable file, unresolvable unit key) is captured in
    the result so one bad document never aborts the batch.
    """
    config = config or ExtractionConfig()
    document_id = document.document_id

    try:
        unit_key = resolve_unit_key(document_id, config.unit_map, config.unit_key_template)
        records = extract_records(
            document.load(),
            config,
            diagnostics=diagnostics,
            document_id=document_id,
        )
    except Exception as e:
        msg = f"Failed to process document {document_id}: {e}"
        logger.warning(
            msg,
            extra={
                "document_id": document_id,
                "error_type": type(e).__name__,
                "error": str(e),
            },
        )
        if diagnostics is not None:
            diagnostics.add_document_failure(document_id, e)
        return DocumentResult(document_id=document_id, error=msg)

    logger.info(
        f"Completed extraction for {document_id} (unit {unit_key}): {len(records)} questions",
        extra={"document_id": document_id, "unit_key": unit_key, "question_count": len(records)},
    )
    return DocumentResult(document_id=document_id, unit_key=unit_key, records=records)


def build_unit_collection(
    documents: Sequence[SourceDocument],
    config: Optional[ExtractionConfig] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
) -> ExtractionResult:
    """
    Extract a batch of documents into one UnitCollection.

    Documents are processed in parallel (config.max_workers). Results are
    merged after all workers complete, in input order, so two documents
    mapping to the same unit key concatenate deterministically.

    Raises:
        NoDocumentsError: If `documents` is empty.
    """
    config = config or ExtractionConfig()
    documents = list(documents)
    if not documents:
        raise NoDocumentsError("No documents to process")

    if diagnostics is None and config.run_diagnostics:
        diagnostics = DiagnosticsCollector()

    results: Dict[int, DocumentResult] = {}
    max_workers = min(config.max_workers, len(documents))

    if max_workers == 1:
        for index, document in enumerate(documents):
            results[index] = process_document(document, config, diagnostics)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {
                executor.submit(process_document, document, config, diagnostics): index
                for index, document in enumerate(documents)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

    collection = UnitCollection()
    failed: List[str] = []
    warnings: List[str] = []
    for index in range(len(documents)):
        result = results[index]
        if not result.ok:
            failed.append(result.document_id)
            warnings.append(result.error)
            continue
        index_records(
            collection,
            result.document_id,
            result.records,
            unit_map=config.unit_map,
            template=config.unit_key_template,
        )

    logger.info(
        f"Built unit collection: {collection.record_count} questions in "
        f"{len(collection)} units from {len(documents)} documents ({len(failed)} failed)",
        extra={"document_count": len(documents), "failed_count": len(failed)},
    )
    if diagnostics is not None and diagnostics.issue_count:
        logger.info(f"Extraction diagnostics: {diagnostics.issue_count} issues found")

    return ExtractionResult(
        collection=collection,
        document_count=len(documents),
        failed_documents=failed,
        warnings=warnings,
        diagnostics=diagnostics,
    )
