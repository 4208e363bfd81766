"""JSON backup files: the whole dataset in one object.

Shape::

    {
      "exportedAt": "2025-01-05T10:00:00.000Z",
      "stories": [...], "goals": [...], ..., "importantDates": [...],
      "boards": [...], "columns": [...],
      "settings": {...}
    }

Records use the same camelCase names as the sheet columns. On restore every
record is checked with its kind's validator; records that fail are dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from lifesync.codec.coerce import now_iso
from lifesync.codec.registry import all_kinds
from lifesync.codec.validators import validate_settings
from lifesync.models import Board, BoardColumn, Dataset
from lifesync.settings import settings_from_dict, settings_to_dict

logger = logging.getLogger(__name__)


class BackupError(Exception):
    """A backup file could not be read. The message is the reason shown to the user."""


def dataset_to_backup(dataset: Dataset) -> dict[str, Any]:
    data: dict[str, Any] = {"exportedAt": dataset.exported_at or now_iso()}
    for kind in all_kinds():
        data[kind.record_key] = [kind.to_record(entity) for entity in getattr(dataset, kind.collection)]
    data["boards"] = [board.to_dict() for board in dataset.boards]
    data["columns"] = [column.to_dict() for column in dataset.columns]
    if dataset.settings is not None:
        data["settings"] = settings_to_dict(dataset.settings)
    return data


def backup_to_dataset(data: Mapping[str, Any]) -> Dataset:
    """Rebuild a Dataset from a backup object. Missing collections are empty."""
    exported_at = data.get("exportedAt")
    dataset = Dataset(exported_at=exported_at if isinstance(exported_at, str) else None)

    for kind in all_kinds():
        records = _records(data, kind.record_key)
        valid = [record for record in records if kind.validate(record)]
        if len(valid) < len(records):
            logger.warning(f"Dropped {len(records) - len(valid)} invalid {kind.collection} record(s)")
        setattr(dataset, kind.collection, [kind.from_record(record) for record in valid])

    dataset.boards = [Board.from_dict(b) for b in _records(data, "boards") if isinstance(b, dict)]
    dataset.columns = [BoardColumn.from_dict(c) for c in _records(data, "columns") if isinstance(c, dict)]

    settings = data.get("settings")
    if settings is not None:
        if validate_settings(settings):
            dataset.settings = settings_from_dict(settings)
        else:
            logger.warning("Ignoring settings with unexpected shape")
    return dataset


def _records(data: Mapping[str, Any], key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"Expected a list for {key!r}, got {type(value).__name__}")
        return []
    return value


def write_backup(path: Path, dataset: Dataset) -> None:
    path.write_text(
        json.dumps(dataset_to_backup(dataset), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def read_backup(path: Path) -> Dataset:
    """Load a backup file. Raises BackupError when it cannot be used at all."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise BackupError(f"Backup file not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise BackupError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise BackupError(f"{path} is not valid JSON (line {e.lineno}, column {e.colno})") from e
    if not isinstance(data, dict):
        raise BackupError(f"{path} does not contain a backup object")
    return backup_to_dataset(data)
