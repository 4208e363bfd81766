"""Sheet-level access to the local workbook."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Sequence

from lifesync.codec.coerce import now_iso
from lifesync.codec.registry import EntityKind, all_kinds
from lifesync.codec.schema import SETTINGS_COLUMNS
from lifesync.models import Dataset
from lifesync.settings import Settings, rows_to_settings, settings_to_rows

logger = logging.getLogger(__name__)

SETTINGS_SHEET = "Settings"


class Workbook:
    """Data access layer for the lifesync SQLite workbook.

    Rows go in and out as lists of strings; only the row codec interprets them.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def write_sheet(self, name: str, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Replace the whole sheet: clear it, then write header and rows."""
        self._conn.execute("DELETE FROM sheet_rows WHERE sheet = ?", (name,))
        self._conn.execute(
            "INSERT OR REPLACE INTO sheets (name, header, updated_at) VALUES (?, ?, ?)",
            (name, json.dumps(list(header)), now_iso()),
        )
        self._conn.executemany(
            "INSERT INTO sheet_rows (sheet, row_index, cells) VALUES (?, ?, ?)",
            [(name, index, json.dumps(list(row))) for index, row in enumerate(rows)],
        )
        self._conn.commit()

    def read_sheet(self, name: str) -> list[list[str]]:
        """Data rows of a sheet, header excluded. Unknown sheets read as empty."""
        rows = self._conn.execute(
            "SELECT cells FROM sheet_rows WHERE sheet = ? ORDER BY row_index", (name,)
        ).fetchall()
        return [json.loads(row["cells"]) for row in rows]

    def read_header(self, name: str) -> list[str]:
        row = self._conn.execute("SELECT header FROM sheets WHERE name = ?", (name,)).fetchone()
        return json.loads(row["header"]) if row else []

    def sheet_names(self) -> list[str]:
        rows = self._conn.execute("SELECT name FROM sheets ORDER BY name").fetchall()
        return [row["name"] for row in rows]

    def save_collection(self, kind: EntityKind, entities: Sequence[Any]) -> None:
        self.write_sheet(kind.sheet, kind.columns, [kind.encode(entity) for entity in entities])

    def load_collection(self, kind: EntityKind) -> list[Any]:
        header = self.read_header(kind.sheet)
        if header and header != kind.columns:
            logger.warning(f"Sheet {kind.sheet} header differs from the current layout; reading by position")
        return [kind.decode(row) for row in self.read_sheet(kind.sheet)]

    def save_settings(self, settings: Settings) -> None:
        self.write_sheet(SETTINGS_SHEET, SETTINGS_COLUMNS, settings_to_rows(settings))

    def load_settings(self) -> Settings | None:
        """Settings stored in the workbook, or None if none were ever saved."""
        if SETTINGS_SHEET not in self.sheet_names():
            return None
        return rows_to_settings(self.read_sheet(SETTINGS_SHEET))

    def save_dataset(self, dataset: Dataset) -> None:
        for kind in all_kinds():
            self.save_collection(kind, getattr(dataset, kind.collection))
        if dataset.settings is not None:
            self.save_settings(dataset.settings)

    def load_dataset(self) -> Dataset:
        dataset = Dataset(settings=self.load_settings())
        for kind in all_kinds():
            setattr(dataset, kind.collection, self.load_collection(kind))
        return dataset

    def get_stats(self) -> dict:
        """Row count per sheet, plus totals."""
        rows = self._conn.execute(
            """
            SELECT s.name, COUNT(r.row_index) AS row_count
            FROM sheets s
            LEFT JOIN sheet_rows r ON r.sheet = s.name
            GROUP BY s.name
            ORDER BY s.name
            """
        ).fetchall()
        per_sheet = {row["name"]: row["row_count"] for row in rows}
        return {
            "sheets": per_sheet,
            "total_sheets": len(per_sheet),
            "total_rows": sum(per_sheet.values()),
        }
