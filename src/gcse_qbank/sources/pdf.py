"""
Module: sources.pdf

Purpose:
    File loaders for question packs. PDFs are read with PyMuPDF into
    positioned line items (one item per PDF text line, located by its
    bounding box); plain text files are read whole.

Key Functions:
    - load_pdf_source(): PDF → Positioned
    - load_text_source(): .txt → PlainText
    - discover_documents(): Directory → SourceDocuments in name order

Dependencies:
    - fitz (PyMuPDF): PDF text extraction

Used By:
    - cli: Builds the document batch from an input directory
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Iterable, List

import fitz

from gcse_qbank.core.models.sources import PlainText, Positioned, PositionedItem, RawSource
from gcse_qbank.sources.base import NoDocumentsError, SourceDocument

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("*.pdf", "*.txt")


def _page_items(page: fitz.Page) -> List[PositionedItem]:
    """Positioned items for one page, one per PDF text line."""
    data = page.get_text("dict")
    items: List[PositionedItem] = []

    for block in data.get("blocks", []):
        for line in block.get("lines", []):
            text = "".join(
                span.get("text", "") for span in line.get("spans", [])
            ).strip()
            if not text:
                continue

            bbox = line.get("bbox")
            if not bbox or len(bbox) != 4:
                continue

            items.append(PositionedItem(text=text, x=float(bbox[0]), y=float(bbox[1])))

    return items


def load_pdf_source(path: Path) -> Positioned:
    """
    Read a PDF into per-page positioned items.

    Raises:
        FileNotFoundError: If path doesn't exist.
        fitz.FileDataError: If the file is not a readable PDF.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")

    with fitz.open(path) as doc:
        pages = [_page_items(page) for page in doc]

    logger.debug(
        f"Loaded {path.name}: {len(pages)} pages, {sum(len(p) for p in pages)} lines",
        extra={"document_id": path.name, "page_count": len(pages)},
    )
    return Positioned(pages=tuple(tuple(p) for p in pages))


def load_text_source(path: Path) -> PlainText:
    """
    Read a UTF-8 text file.

    Raises:
        FileNotFoundError: If path doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Text source not found: {path}")
    return PlainText(path.read_text(encoding="utf-8"))


LOADERS: Dict[str, Callable[[Path], RawSource]] = {
    ".pdf": load_pdf_source,
    ".txt": load_text_source,
}


def discover_documents(
    directory: Path,
    patterns: Iterable[str] = DEFAULT_PATTERNS,
) -> List[SourceDocument]:
    """
    Find loadable documents in a directory (non-recursive).

    Documents are returned sorted by file name so unit collections are
    built in a stable order. Loading is deferred to `SourceDocument.load()`.

    Raises:
        FileNotFoundError: If directory doesn't exist.
        NoDocumentsError: If no file matches.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")

    paths = {
        p for pattern in patterns for p in directory.glob(pattern)
        if p.is_file() and p.suffix.lower() in LOADERS
    }
    if not paths:
        raise NoDocumentsError(f"No documents found in {directory}")

    documents = [
        SourceDocument(p.name, partial(LOADERS[p.suffix.lower()], p))
        for p in sorted(paths, key=lambda p: p.name)
    ]
    logger.info(f"Discovered {len(documents)} documents in {directory}")
    return documents
