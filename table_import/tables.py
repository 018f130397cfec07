"""
table_import.tables - Registry of importable tables.

Each TableSpec lists the table's columns in wire order (column order
is the contract, names are labels only), the ORM model the row becomes,
and the primary key used for clearing and duplicate detection.

Identity and Timestamp cells are wrapped in a one-element array by some
exporters and not by others; each column kind pins the form its table
has always received.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional

from db.models import (
    Entity, KeyedMessage, Message, Mob, MovementComponent, Player, WorldConfig,
)
from table_import import decoders
from table_import.errors import UnknownTableError

# Column kind → decoder(value, field)
DECODERS: dict[str, Callable[[Any, str], Any]] = {
    "u32":              decoders.decode_u32,
    "u64":              decoders.decode_u64,
    "f32":              decoders.decode_f32,
    "string":           decoders.decode_string,
    "vector3":          decoders.decode_vector3,
    "identity":         partial(decoders.decode_identity, wrapped=False),
    "identity_wrapped": partial(decoders.decode_identity, wrapped=True),
    "timestamp":        decoders.decode_timestamp,
    "optional_u32":     decoders.decode_optional_u32,
}


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    kind: str

    def decode(self, value: Any) -> Any:
        return DECODERS[self.kind](value, self.name)


@dataclass(frozen=True)
class TableSpec:
    name: str
    model: type
    columns: tuple[ColumnSpec, ...]
    primary_key: Optional[str]
    # Singleton tables keep only the row whose key equals this value
    singleton_key: Optional[Any] = None
    description: str = field(default="", compare=False)

    @property
    def min_columns(self) -> int:
        return len(self.columns)

    @property
    def keyed(self) -> bool:
        return self.primary_key is not None

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def key_of(self, record) -> Any:
        return getattr(record, self.primary_key)

    def build(self, values: dict[str, Any]):
        return self.model(**values)


def _cols(*pairs: tuple[str, str]) -> tuple[ColumnSpec, ...]:
    return tuple(ColumnSpec(name, kind) for name, kind in pairs)


TABLES: dict[str, TableSpec] = {
    spec.name: spec
    for spec in (
        TableSpec(
            "config", WorldConfig,
            _cols(("id", "u32"), ("world_size", "u64")),
            primary_key="id", singleton_key=0,
            description="World configuration singleton",
        ),
        TableSpec(
            "entity", Entity,
            _cols(("entity_id", "u32"), ("position", "vector3")),
            primary_key="entity_id",
        ),
        TableSpec(
            "mob", Mob,
            _cols(("entity_id", "u32"), ("speed", "f32")),
            primary_key="entity_id",
        ),
        TableSpec(
            "movement_component", MovementComponent,
            _cols(("entity_id", "u32"), ("direction", "vector3"), ("speed", "f32")),
            primary_key="entity_id",
        ),
        TableSpec(
            "player", Player,
            _cols(
                ("identity", "identity"),
                ("player_id", "u32"),
                ("name", "string"),
                ("entity_id", "optional_u32"),
            ),
            primary_key="identity",
        ),
        TableSpec(
            "message", Message,
            _cols(
                ("sender", "identity_wrapped"),
                ("sent", "timestamp"),
                ("text", "string"),
                ("sender_name", "string"),
            ),
            primary_key=None,
            description="Append only: no primary key, re-imports accumulate",
        ),
        TableSpec(
            "messages", KeyedMessage,
            _cols(
                ("id", "u64"),
                ("sender", "identity_wrapped"),
                ("sent", "timestamp"),
                ("text", "string"),
                ("sender_name", "string"),
            ),
            primary_key="id",
        ),
    )
}


def get_table(name: str) -> TableSpec:
    """Return the spec for ``name`` or raise UnknownTableError."""
    spec = TABLES.get(name)
    if spec is None:
        raise UnknownTableError(f"Import not implemented for table: {name}")
    return spec


def table_names() -> list[str]:
    return list(TABLES.keys())
