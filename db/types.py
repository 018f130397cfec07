"""
db.types - Domain value objects and the column types that persist them.

Vector3   - three 32-bit floats, mapped as a composite over three columns
Identity  - opaque byte string, written and read as lowercase hex
Timestamp - signed microseconds since the Unix epoch (no timezone)

The column types below let the ORM models hold these objects directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import BigInteger, LargeBinary
from sqlalchemy.types import TypeDecorator

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_U64_SPAN = 1 << 64
_I64_MAX = (1 << 63) - 1
_HEX_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class Vector3:
    x: float
    y: float
    z: float

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]


@dataclass(frozen=True)
class Identity:
    raw: bytes

    @classmethod
    def from_hex(cls, text: str) -> "Identity":
        """Parse a hex string, with or without a leading 0x.  Raises ValueError."""
        body = text
        if body[:2].lower() == "0x":
            body = body[2:]
        if not body:
            raise ValueError("empty hex string")
        if not _HEX_RE.fullmatch(body):
            raise ValueError(f"not a hex string: {text!r}")
        return cls(bytes.fromhex(body))

    def to_hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_hex()


@dataclass(frozen=True, order=True)
class Timestamp:
    micros_since_epoch: int

    def to_datetime(self) -> datetime:
        """UTC datetime for display; the stored value stays an integer."""
        return _EPOCH + timedelta(microseconds=self.micros_since_epoch)


# ── Column types ──────────────────────────────────────────────────────

class IdentityType(TypeDecorator):
    """Identity stored as raw bytes."""

    impl = LargeBinary
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.raw

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Identity(bytes(value))


class TimestampType(TypeDecorator):
    """Timestamp stored as BIGINT microseconds."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.micros_since_epoch

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Timestamp(int(value))


class UnsignedBigInteger(TypeDecorator):
    """
    u64 stored in a signed BIGINT.  Values above the i64 range wrap to
    negative on the way in and are restored on the way out.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value - _U64_SPAN if value > _I64_MAX else value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value + _U64_SPAN if value < 0 else value
