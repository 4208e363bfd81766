"""Configuration loading for lifesync.

Config sources (in priority order):
1. Explicit command-line options
2. Environment variables (LIFESYNC_DB_PATH, etc.)
3. .env file in current directory
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from lifesync.merge.engine import ImportMode, ImportOptions

load_dotenv()

DEFAULT_DB_PATH = Path("lifesync.db")
DEFAULT_BACKUP_PATH = Path("lifesync-backup.json")


@dataclass
class Config:
    db_path: Path = DEFAULT_DB_PATH
    backup_path: Path = DEFAULT_BACKUP_PATH
    import_mode: str = ImportMode.MERGE.value
    history_path: Path | None = None  # None: next to the database

    @classmethod
    def load(cls) -> Config:
        history = os.getenv("LIFESYNC_HISTORY_PATH", "")
        return cls(
            db_path=Path(os.getenv("LIFESYNC_DB_PATH", str(DEFAULT_DB_PATH))),
            backup_path=Path(os.getenv("LIFESYNC_BACKUP_PATH", str(DEFAULT_BACKUP_PATH))),
            import_mode=os.getenv("LIFESYNC_IMPORT_MODE", ImportMode.MERGE.value).strip().lower(),
            history_path=Path(history) if history else None,
        )

    def validate(self) -> list[str]:
        """Return a list of config issues."""
        issues = []
        modes = [mode.value for mode in ImportMode]
        if self.import_mode not in modes:
            issues.append(
                f"Unknown import mode {self.import_mode!r} (LIFESYNC_IMPORT_MODE), "
                f"expected one of: {', '.join(modes)}"
            )
        if self.db_path.exists() and self.db_path.is_dir():
            issues.append(f"Database path is a directory (LIFESYNC_DB_PATH): {self.db_path}")
        if self.backup_path.exists() and self.backup_path.is_dir():
            issues.append(f"Backup path is a directory (LIFESYNC_BACKUP_PATH): {self.backup_path}")
        return issues

    def import_options(self) -> ImportOptions:
        """Default import options using the configured mode (merge if unrecognised)."""
        try:
            mode = ImportMode(self.import_mode)
        except ValueError:
            mode = ImportMode.MERGE
        return ImportOptions(mode=mode)
