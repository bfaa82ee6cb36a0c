"""
Module: sources.base

Purpose:
    Ingestion boundary types. A SourceDocument pairs a document id with a
    loader producing a RawSource; loading is deferred so it runs on the
    worker thread and its failures stay scoped to that document.

Key Classes:
    - SourceDocument: Document id + deferred loader
    - NoDocumentsError: Batch has nothing to process
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from gcse_qbank.core.models.sources import PlainText, RawSource


class NoDocumentsError(RuntimeError):
    """Raised when a batch or input directory contains no documents."""


@dataclass(frozen=True)
class SourceDocument:
    """
    A document waiting to be processed.

    Attributes:
        document_id: Identifier used for unit key resolution, usually the
            file name ("Unit3.pdf")
        loader: Zero-argument callable returning the document's RawSource;
            may raise (corrupt file, missing file)

    Example:
        >>> doc = SourceDocument.from_text("Unit1.txt", "1. What is RAM?")
        >>> doc.load().text
        '1. What is RAM?'
    """
    document_id: str
    loader: Callable[[], RawSource]

    def load(self) -> RawSource:
        return self.loader()

    @classmethod
    def from_text(cls, document_id: str, text: str) -> SourceDocument:
        """Document whose content is already in memory."""
        source = PlainText(text)
        return cls(document_id, lambda: source)
