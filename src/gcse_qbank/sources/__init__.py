"""
Module: sources

Purpose:
    Ingestion boundary: document discovery and loaders producing the
    RawSource variants consumed by the extractor.
"""

from .base import NoDocumentsError, SourceDocument
from .pdf import discover_documents, load_pdf_source, load_text_source

__all__ = [
    "NoDocumentsError",
    "SourceDocument",
    "discover_documents",
    "load_pdf_source",
    "load_text_source",
]
