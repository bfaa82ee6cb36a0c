"""
Utils Package

Serialization and file locking utilities.
"""

from .serialization import (
    serialize_collection,
    deserialize_collection,
    load_collection_json,
    save_collection_json,
    merge_collection_into_file,
)

__all__ = [
    "serialize_collection",
    "deserialize_collection",
    "load_collection_json",
    "save_collection_json",
    "merge_collection_into_file",
]
