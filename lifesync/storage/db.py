"""SQLite workbook setup and schema management.

The local tabular store mirrors a spreadsheet: named sheets, each with a header
row and positional rows of string cells. Cells are stored as a JSON array per
row so the store stays schema-agnostic.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sheets (
    name TEXT PRIMARY KEY,
    header TEXT NOT NULL,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS sheet_rows (
    sheet TEXT NOT NULL REFERENCES sheets(name) ON DELETE CASCADE,
    row_index INTEGER NOT NULL,
    cells TEXT NOT NULL,
    PRIMARY KEY (sheet, row_index)
);

CREATE INDEX IF NOT EXISTS idx_sheet_rows_sheet ON sheet_rows(sheet);
"""


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Create or open a SQLite workbook with the lifesync schema."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    conn.executescript(SCHEMA_SQL)
    conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")
    conn.commit()

    return conn
