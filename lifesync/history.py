"""Operation history for import and export runs.

Every CLI run that reads or writes planner data appends one JSON line to a
history file: timestamp, operation, source, per-collection counts, error and
duration. The file lives next to lifesync.db unless LIFESYNC_HISTORY_PATH
points elsewhere.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def _resolve_log_path() -> Path:
    """Find the history file path, checking env var then defaulting next to the DB."""
    env_path = os.getenv("LIFESYNC_HISTORY_PATH")
    if env_path:
        return Path(env_path)

    db_path = os.getenv("LIFESYNC_DB_PATH", "lifesync.db")
    return Path(db_path).parent / "lifesync-history.jsonl"


def log_operation(
    operation: str,
    source: str,
    counts: dict[str, int] | None,
    error: str | None,
    duration_ms: int,
    log_path: Path | None = None,
) -> None:
    """Append one entry to the history file.

    A failure to write is logged and otherwise ignored; it never fails the
    operation being recorded.
    """
    entry = {
        "timestamp": datetime.now().isoformat(),
        "operation": operation,
        "source": source,
        "counts": counts or {},
        "error": error,
        "duration_ms": duration_ms,
    }
    path = log_path or _resolve_log_path()
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.warning(f"Could not write history entry to {path}: {e}")


def read_history(
    limit: int = 20,
    operation: str | None = None,
    log_path: Path | None = None,
) -> list[dict]:
    """Read recent history entries, most recent first. Corrupt lines are skipped."""
    path = log_path or _resolve_log_path()
    if not path.exists():
        return []

    entries = [
        entry
        for entry in _iter_entries(path)
        if not operation or entry.get("operation") == operation
    ]
    return entries[::-1][:limit]


def _iter_entries(path: Path) -> Iterator[dict]:
    with open(path, encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.debug(f"Skipping corrupt history line in {path}")
                continue
            if isinstance(entry, dict):
                yield entry
