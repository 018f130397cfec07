"""
table_import.importer - Top-level orchestrator.

Coordinates envelope → row_processor → clear-then-insert and produces
a structured ImportReport.

import_table() does the work inside the caller's transaction and raises
on failure.  run_import() owns the session: one transaction per call,
committed only if every row decoded and inserted.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.engine import transaction
from table_import.envelope import load_rows
from table_import.errors import StorageError, TableImportError
from table_import.report import ImportReport
from table_import.row_processor import RowProcessor
from table_import.tables import TableSpec, get_table

logger = logging.getLogger(__name__)


def import_table(session: Session, table_name: str, json_payload: str | bytes) -> ImportReport:
    """
    Replace the contents of ``table_name`` with the rows of ``json_payload``.

    Raises TableImportError on the first failure.  The caller must roll
    back the session in that case; deletes and inserts have been issued.
    """
    spec = get_table(table_name)
    rows = load_rows(json_payload)

    report = ImportReport(table=spec.name, total_rows=len(rows))
    report.cleared = _clear(session, spec)

    processor = RowProcessor(spec)
    for idx, row in enumerate(rows):
        record = processor.process(idx, row)

        if processor.is_skipped(record):
            logger.warning(
                f"Skipping {spec.name} row {idx} with non-default "
                f"{spec.primary_key} ({spec.key_of(record)})"
            )
            report.skipped += 1
            continue

        session.add(record)
        try:
            session.flush()
        except SQLAlchemyError as exc:
            raise StorageError(
                f"Row {idx} for '{spec.name}' rejected by storage: {exc}", row=idx
            ) from exc
        report.inserted += 1

    return report


def run_import(
    table_name: str,
    json_payload: str | bytes,
    *,
    caller: Optional[str] = None,
    source: Optional[str] = None,
) -> ImportReport:
    """
    Import one table in its own transaction.

    Never raises for bad input: failures come back in report.error and
    leave the table exactly as it was before the call.
    """
    logger.info(f"Attempting import for table '{table_name}' (caller: {caller or 'anonymous'})")

    try:
        with transaction() as session:
            report = import_table(session, table_name, json_payload)
    except TableImportError as exc:
        report = ImportReport(table=table_name)
        report.fail(exc)
        logger.warning(f"Import of '{table_name}' failed: {exc}")
    except SQLAlchemyError as exc:
        report = ImportReport(table=table_name)
        report.fail(StorageError(f"Storage error for '{table_name}': {exc}"))
        logger.error(f"Import of '{table_name}' failed in storage: {exc}")
    else:
        logger.info(
            f"Import successful for table '{table_name}'. "
            f"Processed {report.inserted} rows."
        )

    report.source = source
    return report


# ── Private helpers ────────────────────────────────────────────────────

def _clear(session: Session, spec: TableSpec) -> int:
    """Delete every existing record by primary key.  Returns the count."""
    if not spec.keyed:
        logger.warning(
            f"Deletion skipped for '{spec.name}' as it lacks a primary key. "
            f"New rows will be appended."
        )
        return 0

    existing = session.scalars(select(spec.model)).all()
    logger.debug(f"Deleting {len(existing)} existing '{spec.name}' entries...")
    for item in existing:
        session.delete(item)
    session.flush()
    return len(existing)
