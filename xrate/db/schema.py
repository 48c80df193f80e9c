"""Database schema DDL definitions and initialization utilities.

Tables:
  - rate_cache: raw rate provider payloads keyed by day + base currency
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

RATE_CACHE_DDL = f"""
CREATE TABLE IF NOT EXISTS rate_cache (
    key BLOB PRIMARY KEY, -- YYYY-MM-DD + currency code
    value BLOB NOT NULL, -- provider JSON payload, stored verbatim
    created_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

DDL_ORDER: Sequence[str] = (RATE_CACHE_DDL,)


def init_db(path: Path) -> None:
    """Create all tables idempotently.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        conn.commit()
    finally:
        conn.close()
