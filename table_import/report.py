"""
table_import.report - Structured result of one table import.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from table_import.errors import TableImportError


@dataclass
class ImportReport:
    table: str
    total_rows: int = 0
    inserted: int = 0
    skipped: int = 0          # singleton rows with a non-default key
    cleared: int = 0
    error: Optional[str] = None
    error_kind: Optional[str] = None
    error_row: Optional[int] = None
    error_column: Optional[str] = None
    source: Optional[str] = None   # file name for batch imports

    @property
    def ok(self) -> bool:
        return self.error is None

    def fail(self, exc: TableImportError):
        """Record a failure; nothing from this run was committed."""
        self.error = str(exc)
        self.error_kind = exc.kind
        self.error_row = exc.row
        self.error_column = exc.column
        self.inserted = 0
        self.skipped = 0
        self.cleared = 0

    def to_dict(self) -> dict:
        d = {
            "table": self.table,
            "ok": self.ok,
            "total_rows": self.total_rows,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "cleared": self.cleared,
        }
        if self.source:
            d["source"] = self.source
        if not self.ok:
            d["error"] = {
                "message": self.error,
                "kind": self.error_kind,
                "row": self.error_row,
                "column": self.error_column,
            }
        return d
