"""
Module: extractor.indexing.unit_indexer

Purpose:
    Maps a source document to its syllabus unit key and appends the
    document's validated records to the unit collection.

Key Functions:
    - resolve_unit_key(): Document id → unit key ("Unit7.pdf" → "3.7")
    - index_records(): Append a document's records under its unit key

Dependencies:
    - gcse_qbank.core.models.collection: UnitCollection

Used By:
    - extractor.pipeline: Merge step after all documents are processed
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePath
from typing import Iterable, Mapping, Optional

from gcse_qbank.core.models.collection import UnitCollection
from gcse_qbank.core.models.records import ValidatedRecord
from gcse_qbank.extractor.config import DEFAULT_UNIT_MAP

logger = logging.getLogger(__name__)

_TRAILING_INTEGER = re.compile(r"(\d+)\D*$")


class UnresolvedUnitError(ValueError):
    """Raised when a document id matches no unit map entry and has no number."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Cannot derive a unit key for document: {document_id!r}")


def resolve_unit_key(
    document_id: str,
    unit_map: Optional[Mapping[str, str]] = None,
    template: str = "3.{number}",
) -> str:
    """
    Derive the unit key for a document.

    Exact matches in `unit_map` win (the full id first, then its file name).
    Otherwise the trailing integer of the file stem is formatted through
    `template`.

    Raises:
        UnresolvedUnitError: If neither rule applies.

    Example:
        >>> resolve_unit_key("Unit2.pdf")
        '3.2'
        >>> resolve_unit_key("packs/Topic 11 questions.pdf")
        '3.11'
    """
    unit_map = DEFAULT_UNIT_MAP if unit_map is None else unit_map
    name = PurePath(document_id).name

    for candidate in (document_id, name):
        if candidate in unit_map:
            return unit_map[candidate]

    match = _TRAILING_INTEGER.search(PurePath(name).stem)
    if match is None:
        raise UnresolvedUnitError(document_id)

    key = template.format(number=int(match.group(1)))
    logger.debug(f"Unit key for {name} from trailing number: {key}")
    return key


def index_records(
    collection: UnitCollection,
    document_id: str,
    records: Iterable[ValidatedRecord],
    *,
    unit_map: Optional[Mapping[str, str]] = None,
    template: str = "3.{number}",
) -> str:
    """
    Append a document's records to the collection under its unit key.

    Records from several documents mapping to the same key concatenate in
    call order; nothing is deduplicated.

    Returns:
        The unit key used
    """
    unit_key = resolve_unit_key(document_id, unit_map, template)
    collection.extend(unit_key, records)
    return unit_key
