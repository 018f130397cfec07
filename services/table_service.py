"""
services.table_service - Read-side operations on the importable tables.

Export renders a table back into the same envelope the importer reads:
each cell is written in the exact shape its table's import expects, so
an export re-imports unchanged.

All session management is the caller's responsibility.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from table_import.tables import TABLES, ColumnSpec, TableSpec, get_table


def _product(*elements: tuple[str, str]) -> dict:
    return {"Product": {"elements": [
        {"name": {"some": name}, "algebraic_type": {atype: []}}
        for name, atype in elements
    ]}}


# Column kind → algebraic type written to the export schema block
ALGEBRAIC_TYPES: dict[str, dict] = {
    "u32":              {"U32": []},
    "u64":              {"U64": []},
    "f32":              {"F32": []},
    "string":           {"String": []},
    "vector3":          _product(("x", "F32"), ("y", "F32"), ("z", "F32")),
    "identity":         _product(("__identity__", "U256")),
    "identity_wrapped": _product(("__identity__", "U256")),
    "timestamp":        _product(("__timestamp_micros_since_unix_epoch__", "I64")),
    "optional_u32":     {"Sum": {"variants": [
        {"name": {"some": "some"}, "algebraic_type": {"U32": []}},
        {"name": {"some": "none"}, "algebraic_type": {"Product": {"elements": []}}},
    ]}},
}


def encode_cell(value: Any, column: ColumnSpec) -> Any:
    """Inverse of the column's decoder."""
    kind = column.kind
    if value is None:
        return None
    if kind == "vector3":
        return value.to_list()
    if kind == "identity":
        return value.to_hex()
    if kind == "identity_wrapped":
        return [value.to_hex()]
    if kind == "timestamp":
        return [value.micros_since_epoch]
    return value


class TableService:

    @staticmethod
    def count(session: Session, spec: TableSpec) -> int:
        return session.scalar(select(func.count()).select_from(spec.model)) or 0

    @staticmethod
    def records(session: Session, spec: TableSpec) -> list:
        """All records of a table, in primary-key (or insertion) order."""
        order = list(spec.model.__mapper__.primary_key)
        return list(session.scalars(select(spec.model).order_by(*order)))

    @staticmethod
    def list_tables(session: Session) -> list[dict]:
        return [
            {
                "name": spec.name,
                "columns": [{"name": c.name, "kind": c.kind} for c in spec.columns],
                "primary_key": spec.primary_key,
                "append_only": not spec.keyed,
                "rows": TableService.count(session, spec),
                "description": spec.description,
            }
            for spec in TABLES.values()
        ]

    @staticmethod
    def export(session: Session, table_name: str) -> list[dict]:
        """Return the envelope for one table.  Raises UnknownTableError."""
        spec = get_table(table_name)
        rows = [
            [encode_cell(getattr(record, c.name), c) for c in spec.columns]
            for record in TableService.records(session, spec)
        ]
        schema = {"elements": [
            {"name": {"some": c.name}, "algebraic_type": ALGEBRAIC_TYPES[c.kind]}
            for c in spec.columns
        ]}
        return [{"schema": schema, "rows": rows}]
