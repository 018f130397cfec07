"""
table_import.batch - Import every table dump found in a folder.

File stem = table name (``entity.json``, ``player.csv``).  Files for
tables with no import mapping are skipped with a warning.  Each file is
imported in its own transaction, so one bad file does not undo the
others.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import config
from table_import.csv_parser import csv_to_envelope
from table_import.errors import TableImportError
from table_import.importer import run_import
from table_import.report import ImportReport
from table_import.tables import TABLES

logger = logging.getLogger(__name__)


def find_import_files(folder: str | Path) -> list[Path]:
    """Return the .json/.csv files in ``folder``, sorted by name."""
    folder = Path(folder)
    if not folder.is_dir():
        raise NotADirectoryError(f"Import folder not found: {folder}")
    return sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() in config.IMPORT_SUFFIXES
    )


def import_file(path: str | Path, *, caller: Optional[str] = None) -> ImportReport:
    """Import a single .json or .csv table dump."""
    path = Path(path)
    table_name = path.stem
    raw = path.read_bytes()

    if path.suffix.lower() == ".csv":
        spec = TABLES.get(table_name)
        if spec is not None:
            try:
                raw = csv_to_envelope(raw, spec)
            except TableImportError as exc:
                report = ImportReport(table=table_name, source=path.name)
                report.fail(exc)
                logger.warning(f"Could not convert {path.name}: {exc}")
                return report

    return run_import(table_name, raw, caller=caller, source=path.name)


def import_directory(folder: str | Path, *, caller: Optional[str] = None) -> list[ImportReport]:
    """Import all known tables found in ``folder``.  One report per file."""
    reports = []
    for path in find_import_files(folder):
        if path.stem not in TABLES:
            logger.warning(f"Skipping '{path.name}': no import mapping for table '{path.stem}'")
            continue
        reports.append(import_file(path, caller=caller))

    ok = sum(1 for r in reports if r.ok)
    logger.info(f"Folder import finished: {ok}/{len(reports)} tables imported from {folder}")
    return reports
