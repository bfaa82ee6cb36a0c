"""
Module: core.utils.file_locking

Purpose:
    Cross-platform file locking for writing the unit collection file.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_write_json: Atomically replace a JSON file while holding a lock
    - locked_read_modify_write_json: Read-modify-write JSON with lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - core.utils.serialization: Saving and merging collection files
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import portalocker

logger = logging.getLogger(__name__)


def _lock_path(path: Path) -> Path:
    """Sidecar lock file so the data file itself can be replaced atomically."""
    return path.with_name(path.name + ".lock")


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'a') as f:
        ...     f.write('data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_write_json(path: Path, data: Any) -> None:
    """
    Write JSON to `path` atomically under an exclusive lock.

    The payload is written to a temp file in the same directory and moved
    into place, so readers never see a half-written collection.

    Raises:
        OSError: If the directory cannot be created or written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with locked_file(_lock_path(path), 'a', portalocker.LOCK_EX):
        _atomic_dump(path, data)

    logger.debug(f"Wrote {path.name}")


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    Used for merging collections produced by separate runs.

    Args:
        path: Path to JSON file.
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if file doesn't exist.

    Returns:
        The modified data that was written.

    Example:
        >>> def add_unit(existing):
        ...     existing.setdefault("3.1", []).extend(new_records)
        ...     return existing
        >>> locked_read_modify_write_json(collection_path, add_unit)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with locked_file(_lock_path(path), 'a', portalocker.LOCK_EX):
        existing = default()
        if path.exists():
            content = path.read_text(encoding='utf-8')
            if content.strip():
                existing = json.loads(content)

        modified = modifier(existing)
        _atomic_dump(path, modified)
        return modified


def _atomic_dump(path: Path, data: Any) -> None:
    """Dump JSON to a temp file beside `path` and replace it."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        suffix=".json",
        dir=path.parent,
        delete=False,
    ) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path = Path(f.name)

    try:
        temp_path.replace(path)
    except OSError:
        os.unlink(temp_path)
        raise
