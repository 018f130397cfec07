"""
WorldDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR   = Path(__file__).resolve().parent
IMPORT_DIR = Path(os.environ.get("WORLDDB_IMPORT_DIR", BASE_DIR / "backups"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("WORLDDB_DB", f"sqlite:///{BASE_DIR / 'worlddb.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("WORLDDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("WORLDDB_PORT", "5000"))
DEBUG  = os.environ.get("WORLDDB_DEBUG", "0") == "1"

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("WORLDDB_LOG_LEVEL", "INFO").upper()

# ── Import limits ──────────────────────────────────────────────────────
MAX_PAYLOAD_BYTES = int(os.environ.get("WORLDDB_MAX_PAYLOAD_MB", "64")) * 1024 * 1024
IMPORT_SUFFIXES   = (".json", ".csv")
