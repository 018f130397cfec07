"""
table_import.csv_parser - Turn a CSV table dump into an import envelope.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Delimiter detection (comma, semicolon, tab)
  • Header whitespace stripping
  • Cell coercion by column kind, so the JSON importer sees the same
    shapes an export would have produced

Cells that cannot be coerced are passed through as strings; the
importer then rejects them with the row index and column name.
"""

from __future__ import annotations

import csv
import io
import json
import math
import re
from typing import Any, Iterator, Optional

from table_import.errors import PayloadError
from table_import.tables import ColumnSpec, TableSpec

_INT_RE = re.compile(r"^[+-]?\d+$")
_NULL_WORDS = frozenset({"", "null", "none"})
_DELIMITERS = (",", ";", "\t")


def prepare_reader(raw: str | bytes) -> Optional[Iterator[list[str]]]:
    """
    Accept raw file content (bytes or str), clean it, and return a
    csv.reader.  Returns None if content is empty.
    """
    text = _decode(raw)
    if not text or not text.strip():
        return None

    first_line = text.lstrip().splitlines()[0]
    return csv.reader(io.StringIO(text.lstrip()), delimiter=_detect_delimiter(first_line))


def csv_to_envelope(raw: str | bytes, spec: TableSpec) -> str:
    """
    Convert CSV content for ``spec`` into envelope JSON text.
    Raises PayloadError when there is no header or no data row.
    """
    reader = prepare_reader(raw)
    if reader is None:
        raise PayloadError(f"CSV for '{spec.name}' is empty")

    lines = [line for line in reader if any(cell.strip() for cell in line)]
    if len(lines) <= 1:
        raise PayloadError(f"CSV for '{spec.name}' has no data rows")

    headers = [h.strip() for h in lines[0]]
    order = _column_order(headers, spec)

    rows = []
    for line in lines[1:]:
        row = []
        for column, src in zip(spec.columns, order):
            if src is None or src >= len(line):
                break
            row.append(coerce_cell(line[src], column))
        rows.append(row)

    envelope = [{
        "schema": {"elements": [{"name": {"some": h}} for h in headers]},
        "rows": rows,
    }]
    return json.dumps(envelope)


def coerce_cell(text: str, column: ColumnSpec) -> Any:
    """Best-effort conversion of one CSV cell into its JSON shape."""
    value = text.strip()
    kind = column.kind

    if kind in ("u32", "u64"):
        return int(value) if _INT_RE.match(value) else value

    if kind == "optional_u32":
        if value.lower() in _NULL_WORDS:
            return None
        return int(value) if _INT_RE.match(value) else value

    if kind == "f32":
        try:
            number = float(value)
        except ValueError:
            return value
        return number if math.isfinite(number) else value

    if kind == "vector3":
        return _coerce_vector(value)

    if kind in ("identity", "identity_wrapped"):
        hex_text = value.strip('"').strip()
        return [hex_text] if kind == "identity_wrapped" else hex_text

    if kind == "timestamp":
        return [int(value)] if _INT_RE.match(value) else [value]

    return text


# ── Private helpers ────────────────────────────────────────────────────

def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def _detect_delimiter(first_line: str) -> str:
    """Most frequent of comma, semicolon and tab in the header; comma on a tie."""
    counts = {d: first_line.count(d) for d in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def _column_order(headers: list[str], spec: TableSpec) -> list[Optional[int]]:
    """
    Source index per table column.  Matches by header name when every
    table column is present, otherwise falls back to position.
    """
    lowered = [h.lower() for h in headers]
    names = [c.name.lower() for c in spec.columns]
    if all(name in lowered for name in names):
        return [lowered.index(name) for name in names]
    return [i if i < len(headers) else None for i in range(len(spec.columns))]


def _coerce_vector(value: str) -> Any:
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except ValueError:
            return value
    parts = [p.strip() for p in re.split(r"[,;]", value) if p.strip()]
    if len(parts) >= 3:
        try:
            return [float(p) for p in parts[:3]]
        except ValueError:
            return value
    return value
