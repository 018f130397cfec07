"""
table_import.row_processor - Validate and decode one JSON row into a record.

Single-responsibility: given a row value and its index, either return
an ORM object ready to be added, or raise a TableImportError that
names the row, the table and the failing column.
"""

from __future__ import annotations

from typing import Any

from table_import.errors import CellDecodeError, DuplicateKeyError, RowShapeError
from table_import.tables import TableSpec


class RowProcessor:
    """
    Stateful processor that tracks primary keys seen within one import
    run so a repeated key fails at the row that repeats it.
    """

    def __init__(self, spec: TableSpec):
        self.spec = spec
        self._seen_keys: set = set()

    def process(self, idx: int, row: Any):
        """Decode row ``idx`` into a record.  Raises on any problem."""
        spec = self.spec

        if not isinstance(row, list):
            raise RowShapeError(f"Row {idx} for '{spec.name}' not array", row=idx)
        if len(row) < spec.min_columns:
            raise RowShapeError(
                f"Row {idx} for '{spec.name}' too few cols "
                f"(exp {spec.min_columns}, got {len(row)})",
                row=idx,
            )

        values: dict[str, Any] = {}
        for pos, column in enumerate(spec.columns):
            try:
                values[column.name] = column.decode(row[pos])
            except CellDecodeError as exc:
                raise exc.at(idx, pos) from None

        record = spec.build(values)

        if spec.keyed and not self.is_skipped(record):
            key = spec.key_of(record)
            if key in self._seen_keys:
                raise DuplicateKeyError(
                    f"Row {idx} for '{spec.name}' repeats primary key "
                    f"{spec.primary_key}={_show(key)}",
                    row=idx, column=spec.primary_key,
                )
            self._seen_keys.add(key)

        return record

    def is_skipped(self, record) -> bool:
        """True for singleton rows whose key is not the singleton key."""
        if self.spec.singleton_key is None:
            return False
        return self.spec.key_of(record) != self.spec.singleton_key


def _show(key: Any) -> str:
    return key.to_hex() if hasattr(key, "to_hex") else str(key)
