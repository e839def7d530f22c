"""JSON snapshot documents on the local filesystem.

Snapshots are the pipeline's system of record between runs. Every write
replaces the whole document: it is written to a temporary file in the target
directory and moved into place with ``os.replace``, so an interrupted run
leaves the previous snapshot intact. A single writer per data directory is
assumed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

LATEST_RAW = "latest-raw.json"
LATEST_PROCESSED = "latest-processed.json"
REJECTED_ARTICLES = "rejected-articles.json"


class SnapshotError(Exception):
    """Base class for snapshot I/O failures."""


class SnapshotWriteError(SnapshotError):
    """A snapshot document could not be written."""


class SnapshotNotFoundError(SnapshotError):
    """A required snapshot document is missing or unreadable."""


def daily_snapshot_name(now: datetime) -> str:
    return f"{now.strftime('%Y-%m-%d')}-processed.json"


def group_archive_name(group: str, now: datetime) -> str:
    return f"{group}/{now.strftime('%Y-%m-%d-%H')}-latest-raw.json"


def write_snapshot(document: dict[str, Any], path: Path) -> Path:
    """Atomically write `document` as pretty-printed JSON to `path`.

    Raises:
        SnapshotWriteError: If the directory or file cannot be written
    """
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False, default=str)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SnapshotWriteError(f"Failed to write snapshot {path}: {e}") from e

    logger.info("Saved %d articles to %s", len(document.get("articles", [])), path)
    return path


def read_snapshot(path: Path, required: bool = False) -> dict[str, Any]:
    """Read a snapshot document.

    Optional snapshots that are missing or corrupt are treated as empty
    (``{"articles": []}``); required ones raise SnapshotNotFoundError.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError as e:
        if required:
            raise SnapshotNotFoundError(f"Snapshot not found: {path}") from e
        logger.info("No existing snapshot at %s, starting fresh", path)
        return {"articles": []}
    except (OSError, ValueError) as e:
        if required:
            raise SnapshotNotFoundError(f"Snapshot unreadable: {path}: {e}") from e
        logger.error("Ignoring unreadable snapshot %s: %s", path, e)
        return {"articles": []}

    if not isinstance(document, dict):
        if required:
            raise SnapshotNotFoundError(f"Snapshot is not a JSON object: {path}")
        logger.error("Ignoring malformed snapshot %s", path)
        return {"articles": []}

    document.setdefault("articles", [])
    return document
