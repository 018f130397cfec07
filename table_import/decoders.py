"""
table_import.decoders - Convert one untyped JSON cell into one typed value.

Every decoder takes the cell and a field label, and either returns the
typed value or raises CellDecodeError naming the field and the expected
shape.  JSON booleans never count as numbers, integral floats never
count as integers, and out-of-range values fail instead of truncating.
"""

from __future__ import annotations

import math
import struct
from typing import Any, Optional

from db.types import Identity, Timestamp, Vector3
from table_import.errors import CellDecodeError

U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


def json_kind(value: Any) -> str:
    """JSON type name of a decoded value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ── Scalars ───────────────────────────────────────────────────────────

def _decode_int(value: Any, field: str, low: int, high: int, type_name: str) -> int:
    if not _is_integer(value):
        raise CellDecodeError(field, f"expected {type_name} integer, got {json_kind(value)}")
    if value < low:
        raise CellDecodeError(field, f"value {value} is below the {type_name} range")
    if value > high:
        raise CellDecodeError(field, f"value {value} overflows {type_name}")
    return value


def decode_u32(value: Any, field: str = "value") -> int:
    return _decode_int(value, field, 0, U32_MAX, "u32")


def decode_u64(value: Any, field: str = "value") -> int:
    return _decode_int(value, field, 0, U64_MAX, "u64")


def decode_i64(value: Any, field: str = "value") -> int:
    return _decode_int(value, field, I64_MIN, I64_MAX, "i64")


def decode_f32(value: Any, field: str = "value") -> float:
    """Any finite JSON number, narrowed to 32-bit float precision."""
    if not _is_number(value):
        raise CellDecodeError(field, f"expected number, got {json_kind(value)}")
    try:
        narrowed = struct.unpack("<f", struct.pack("<f", value))[0]
    except (OverflowError, struct.error):
        raise CellDecodeError(field, f"value {value} is out of range for f32") from None
    if not math.isfinite(narrowed):
        raise CellDecodeError(field, f"value {value} is not a finite f32")
    return narrowed


def decode_string(value: Any, field: str = "value") -> str:
    if not isinstance(value, str):
        raise CellDecodeError(field, f"expected string, got {json_kind(value)}")
    return value


# ── Compound cells ────────────────────────────────────────────────────

def decode_vector3(value: Any, field: str = "value") -> Vector3:
    """
    Accepts ``{"x": .., "y": .., "z": ..}`` or ``[x, y, z, ...]``.
    Elements past the third are ignored.
    """
    if isinstance(value, dict):
        parts = []
        for axis in ("x", "y", "z"):
            if axis not in value or not _is_number(value[axis]):
                raise CellDecodeError(field, f"missing or invalid '{axis}' field for Vector3")
            parts.append(decode_f32(value[axis], f"{field}.{axis}"))
        return Vector3(*parts)

    if isinstance(value, list):
        if len(value) < 3:
            raise CellDecodeError(
                field, f"array must have at least 3 elements for Vector3, got {len(value)}"
            )
        parts = []
        for i, axis in enumerate(("x", "y", "z")):
            if not _is_number(value[i]):
                raise CellDecodeError(
                    field, f"element {i} ('{axis}') is {json_kind(value[i])}, not a number"
                )
            parts.append(decode_f32(value[i], f"{field}.{axis}"))
        return Vector3(*parts)

    raise CellDecodeError(
        field, f"expected object or array for Vector3, got {json_kind(value)}"
    )


def _unwrap(value: Any, field: str) -> Any:
    """First element of a single-value wrapper array."""
    if not isinstance(value, list):
        raise CellDecodeError(field, f"expected wrapping array, got {json_kind(value)}")
    if not value:
        raise CellDecodeError(field, "wrapping array is empty")
    return value[0]


def decode_identity(value: Any, field: str = "value", *, wrapped: Optional[bool] = None) -> Identity:
    """
    Hex-encoded identity, bare (``"ab12.."``) or wrapped (``["ab12.."]``).

    ``wrapped`` pins the accepted representation: True requires the
    array form, False requires a bare string, None accepts either.
    """
    if isinstance(value, list) and wrapped is not False:
        inner = _unwrap(value, field)
        if not isinstance(inner, str):
            raise CellDecodeError(field, f"wrapped identity is {json_kind(inner)}, not a string")
        text = inner
    elif isinstance(value, str) and wrapped is not True:
        text = value
    else:
        expected = {
            True: "wrapped hex string",
            False: "hex string",
            None: "hex string or wrapped hex string",
        }[wrapped]
        raise CellDecodeError(field, f"expected {expected} for Identity, got {json_kind(value)}")

    try:
        return Identity.from_hex(text)
    except ValueError:
        raise CellDecodeError(field, f"invalid identity hex: {text!r}") from None


def decode_timestamp(value: Any, field: str = "value") -> Timestamp:
    """``[micros]`` - microseconds since the Unix epoch, may be negative."""
    inner = _unwrap(value, field)
    if not _is_integer(inner):
        raise CellDecodeError(field, f"wrapped timestamp is {json_kind(inner)}, not an integer")
    return Timestamp(decode_i64(inner, field))


def decode_optional_u32(value: Any, field: str = "value") -> Optional[int]:
    """``null`` → None, integer → u32."""
    if value is None:
        return None
    if not _is_integer(value):
        raise CellDecodeError(field, f"expected null or integer, got {json_kind(value)}")
    return decode_u32(value, field)
