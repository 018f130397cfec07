"""
table_import.envelope - Parse an export payload and reach its rows.

Expected shape:  [ {"schema": {...}, "rows": [[cell, ...], ...]} ]
The schema block is optional and ignored here; columns are positional.
"""

from __future__ import annotations

import json
from typing import Any

from table_import.errors import PayloadError, StructureError


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def parse_payload(json_payload: str | bytes) -> Any:
    """json.loads with NaN/Infinity refused.  Raises PayloadError."""
    if isinstance(json_payload, bytes):
        try:
            json_payload = json_payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise PayloadError(f"JSON parse error: {exc}") from None
    try:
        return json.loads(json_payload, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise PayloadError(f"JSON parse error: {exc}") from None


def extract_rows(envelope: Any) -> list:
    """Return the ``rows`` list of the single result object."""
    if not isinstance(envelope, list) or len(envelope) != 1 or not isinstance(envelope[0], dict):
        raise StructureError("Invalid JSON structure: Expected array with one result object")

    rows = envelope[0].get("rows")
    if not isinstance(rows, list):
        raise StructureError("Invalid JSON structure: Missing 'rows' array")
    return rows


def load_rows(json_payload: str | bytes) -> list:
    """parse_payload + extract_rows."""
    return extract_rows(parse_payload(json_payload))
