"""CLI entry point for lifesync."""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lifesync.codec.registry import all_kinds
from lifesync.config import Config
from lifesync.document.parser import parse_document
from lifesync.document.writer import write_document
from lifesync.history import log_operation, read_history
from lifesync.merge.engine import ImportMode, ImportOptions, apply_import
from lifesync.models import Dataset
from lifesync.storage.backup import BackupError, read_backup, write_backup
from lifesync.storage.db import get_connection
from lifesync.storage.repository import Workbook

app = typer.Typer(help="Move planner data between interchange documents, backups and a local workbook.")

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("lifesync")
    if not package_logger.handlers:
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    _setup_logging(verbose)


def _fail(message: str) -> NoReturn:
    rprint(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _load_backup(path: Path, missing_ok: bool = False) -> Dataset:
    if missing_ok and not path.exists():
        return Dataset()
    try:
        return read_backup(path)
    except BackupError as e:
        _fail(str(e))


def _load_source(path: Path) -> Dataset:
    """A .json source is a backup; anything else is an interchange document."""
    if path.suffix.lower() == ".json":
        return _load_backup(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Could not read {path}: {e}")
    return parse_document(text)


def _load_workbook(db: Path) -> Dataset:
    conn = get_connection(db)
    try:
        return Workbook(conn).load_dataset()
    finally:
        conn.close()


def _build_options(
    config: Config, mode: str | None, only: list[str] | None, settings: bool
) -> ImportOptions:
    options = config.import_options()
    if mode:
        try:
            options.mode = ImportMode(mode.lower())
        except ValueError:
            _fail(f"Unknown mode {mode!r}, expected 'merge' or 'overwrite'")
    if only:
        known = {kind.collection for kind in all_kinds()} | {"settings"}
        names = [name.strip().lower().replace("-", "_") for name in only]
        unknown = [name for name in names if name not in known]
        if unknown:
            _fail(f"Unknown collection(s): {', '.join(unknown)}. Choose from: {', '.join(sorted(known))}")
        options = ImportOptions.only(*names, mode=options.mode)
    if settings:
        options.import_settings = True
    return options


def _counts_table(title: str, **datasets: Dataset) -> Table:
    table = Table(title=title)
    table.add_column("Collection")
    for name in datasets:
        table.add_column(name, justify="right")
    counts = [dataset.counts() for dataset in datasets.values()]
    for kind in all_kinds():
        table.add_row(kind.collection, *(str(c[kind.collection]) for c in counts))
    return table


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


@app.command()
def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Document file (default: stdout)"),
    backup: Optional[Path] = typer.Option(None, help="Backup file to export from"),
    no_headers: bool = typer.Option(False, "--no-headers", help="Omit the column label line per section"),
) -> None:
    """Write the backup's collections as an interchange document."""
    config = Config.load()
    source = backup or config.backup_path
    start = time.monotonic()

    dataset = _load_backup(source)
    text = write_document(dataset, include_headers=not no_headers)
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        rprint(f"Exported to {output}")
    log_operation("export", str(source), dataset.counts(), None, _elapsed_ms(start), config.history_path)


@app.command(name="import")
def import_(
    source: Path = typer.Argument(help="Interchange document or .json backup to import"),
    backup: Optional[Path] = typer.Option(None, help="Backup file holding the existing data"),
    mode: Optional[str] = typer.Option(None, help="merge or overwrite (default from LIFESYNC_IMPORT_MODE)"),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Import only these collections (repeatable)"),
    settings: bool = typer.Option(False, "--settings", help="Replace settings with the imported ones"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the result without writing it"),
) -> None:
    """Merge a document or backup into the backup file."""
    config = Config.load()
    issues = config.validate()
    if issues:
        for issue in issues:
            rprint(f"[red]Config error: {issue}[/red]")
        raise typer.Exit(1)

    target = backup or config.backup_path
    options = _build_options(config, mode, only, settings)
    start = time.monotonic()

    try:
        imported = _load_source(source)
        existing = _load_backup(target, missing_ok=True)
    except typer.Exit:
        log_operation("import", str(source), None, "unreadable input", _elapsed_ms(start), config.history_path)
        raise

    merged = apply_import(existing, imported, options)
    rprint(_counts_table(f"Import ({options.mode.value})", existing=existing, imported=imported, result=merged))

    if dry_run:
        rprint("[yellow]Dry run: nothing written.[/yellow]")
        return
    merged.exported_at = None
    write_backup(target, merged)
    rprint(f"[green]Saved {target}[/green]")
    log_operation("import", str(source), imported.counts(), None, _elapsed_ms(start), config.history_path)


@app.command()
def push(
    backup: Optional[Path] = typer.Option(None, help="Backup file to push"),
    db_path: Optional[Path] = typer.Option(None, help="Workbook database path"),
) -> None:
    """Write every collection and the settings of a backup into the workbook."""
    config = Config.load()
    source = backup or config.backup_path
    db = db_path or config.db_path
    start = time.monotonic()

    dataset = _load_backup(source)
    try:
        conn = get_connection(db)
        try:
            Workbook(conn).save_dataset(dataset)
        finally:
            conn.close()
    except sqlite3.Error as e:
        log_operation("push", str(source), None, str(e), _elapsed_ms(start), config.history_path)
        _fail(f"Workbook error: {e}")

    rprint(f"[green]Pushed {sum(dataset.counts().values())} rows to {db}[/green]")
    log_operation("push", str(source), dataset.counts(), None, _elapsed_ms(start), config.history_path)


@app.command()
def pull(
    backup: Optional[Path] = typer.Option(None, help="Backup file to write"),
    db_path: Optional[Path] = typer.Option(None, help="Workbook database path"),
) -> None:
    """Rebuild the backup from the workbook, keeping the backup's board layout."""
    config = Config.load()
    target = backup or config.backup_path
    db = db_path or config.db_path
    if not db.exists():
        _fail(f"Workbook not found at {db}. Run 'lifesync push' first.")
    start = time.monotonic()

    try:
        dataset = _load_workbook(db)
    except sqlite3.Error as e:
        log_operation("pull", str(db), None, str(e), _elapsed_ms(start), config.history_path)
        _fail(f"Workbook error: {e}")

    previous = _load_backup(target, missing_ok=True)
    dataset.boards = previous.boards
    dataset.columns = previous.columns
    if dataset.settings is None:
        dataset.settings = previous.settings
    write_backup(target, dataset)

    rprint(f"[green]Pulled into {target}[/green]")
    log_operation("pull", str(db), dataset.counts(), None, _elapsed_ms(start), config.history_path)


@app.command()
def inspect(
    path: Path = typer.Argument(help="Backup (.json), workbook (.db) or interchange document"),
) -> None:
    """Show how many items each collection holds."""
    if not path.exists():
        _fail(f"Not found: {path}")

    if path.suffix.lower() == ".db":
        try:
            dataset = _load_workbook(path)
        except sqlite3.Error as e:
            _fail(f"Workbook error: {e}")
    else:
        dataset = _load_source(path)

    rprint(_counts_table(str(path), items=dataset))
    if dataset.settings is not None:
        rprint(f"Settings: version {dataset.settings.version}, theme {dataset.settings.theme}")


@app.command()
def history(
    limit: int = typer.Option(20, help="Number of entries to show"),
    operation: Optional[str] = typer.Option(None, help="Only show this operation (export, import, push, pull)"),
) -> None:
    """Show recent import and export runs."""
    config = Config.load()
    entries = read_history(limit=limit, operation=operation, log_path=config.history_path)
    if not entries:
        rprint("No history yet.")
        return

    for entry in entries:
        status = f"[red]{entry['error']}[/red]" if entry.get("error") else "[green]ok[/green]"
        total = sum(entry.get("counts", {}).values())
        rprint(
            f"{entry.get('timestamp', '')[:19]}  [bold]{entry.get('operation')}[/bold]  "
            f"{entry.get('source')}  {total} item(s)  {entry.get('duration_ms', 0)}ms  {status}"
        )


if __name__ == "__main__":
    app()
