"""
table_import.errors - Failure taxonomy for one import run.

Every failure is a TableImportError subclass.  ``kind`` tags the
category for reports; ``row`` and ``column`` locate the bad cell
when one is known (row is zero-based).
"""

from __future__ import annotations

from typing import Optional


class TableImportError(Exception):
    """Base class; raised when an import cannot complete."""

    kind = "import"

    def __init__(
        self,
        message: str,
        *,
        row: Optional[int] = None,
        column: Optional[str] = None,
    ):
        super().__init__(message)
        self.row = row
        self.column = column


class PayloadError(TableImportError):
    """Payload text is not valid JSON (or CSV that cannot be read)."""
    kind = "payload"


class StructureError(TableImportError):
    """Envelope does not hold one result object with a rows array."""
    kind = "structure"


class RowShapeError(TableImportError):
    """Row is not an array or has too few cells."""
    kind = "row_shape"


class CellDecodeError(TableImportError):
    """
    A cell cannot be converted to its column type.

    Decoders raise it with the field label only; the row processor
    re-raises it with the row index and column position attached.
    """
    kind = "cell_decode"

    def __init__(
        self,
        field: str,
        reason: str,
        *,
        row: Optional[int] = None,
        position: Optional[int] = None,
    ):
        message = f"('{field}'): {reason}"
        if row is not None:
            message = f"Row {row} Col {position} {message}"
        super().__init__(message, row=row, column=field)
        self.field = field
        self.reason = reason
        self.position = position

    def at(self, row: int, position: int) -> "CellDecodeError":
        """Copy of this error located at a row index and column position."""
        return CellDecodeError(self.field, self.reason, row=row, position=position)


class DuplicateKeyError(TableImportError):
    """Primary key repeated within one payload."""
    kind = "duplicate_key"


class UnknownTableError(TableImportError):
    kind = "unsupported_table"


class StorageError(TableImportError):
    """The database rejected a write."""
    kind = "storage"
