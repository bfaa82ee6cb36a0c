"""
Module: cli

Purpose:
    Command-line entry point: extracts every document in a directory into
    a unit collection JSON file.

Usage:
    gcse-qbank PDF_files -o question_bank.json
    gcse-qbank PDF_files -o question_bank.json --merge --diagnostics diag.json -v
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from gcse_qbank import __version__
from gcse_qbank.core.utils.serialization import merge_collection_into_file, save_collection_json
from gcse_qbank.extractor.config import ExtractionConfig
from gcse_qbank.extractor.diagnostics import DiagnosticsCollector
from gcse_qbank.extractor.pipeline import build_unit_collection
from gcse_qbank.sources import NoDocumentsError, discover_documents

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gcse-qbank",
        description="Extract exam questions and mark schemes into a unit question bank",
    )
    parser.add_argument("input_dir", type=Path, help="Directory of unit PDFs / text files")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output JSON file")
    parser.add_argument("--config", type=Path, help="JSON file with ExtractionConfig overrides")
    parser.add_argument("--workers", type=int, help="Documents processed in parallel")
    parser.add_argument("--diagnostics", type=Path, help="Write a diagnostics report to this path")
    parser.add_argument(
        "--merge",
        action="store_true",
        help="Append to an existing output file instead of replacing it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load_config(args: argparse.Namespace) -> ExtractionConfig:
    config = ExtractionConfig.from_json(args.config) if args.config else ExtractionConfig()
    overrides = {}
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.diagnostics is not None:
        overrides["run_diagnostics"] = True
    return replace(config, **overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    """Run the extractor. Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        config = _load_config(args)
        documents = discover_documents(args.input_dir)
    except (FileNotFoundError, NoDocumentsError, ValueError) as e:
        logger.error(str(e))
        return 1

    diagnostics = DiagnosticsCollector() if config.run_diagnostics else None
    result = build_unit_collection(documents, config, diagnostics)

    if args.merge:
        merged = merge_collection_into_file(result.collection, args.output)
        logger.info(f"Question bank now holds {merged.record_count} questions")
    else:
        save_collection_json(result.collection, args.output)

    if diagnostics is not None and args.diagnostics is not None:
        diagnostics.generate_report().save(args.diagnostics)

    for warning in result.warnings:
        logger.warning(warning)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
