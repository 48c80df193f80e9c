"""SQLite-backed rate cache.

Responsibilities
----------------
- Persist raw provider payloads verbatim under day + currency keys.
- Decode stored payloads back into ``RateTable`` objects on lookup.
- Distinguish a cache miss (``NotFoundError``) from other failures
  (``StoreError``) so callers can treat them separately.

A connection is opened per operation; the store holds no other state and is
safe to share between concurrent requests.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3

from xrate.models.rates import RateTable
from xrate.services.rates.errors import NotFoundError, StoreError
from .schema import init_db


class SqliteRateStore:
    def __init__(self, db_path: Path, *, timeout: float = 5.0):
        self.db_path = db_path
        self._timeout = timeout
        init_db(db_path)

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=self._timeout)

    # ------------------------------------------------------------------
    def get(self, key: bytes) -> RateTable:
        try:
            conn = self._connect()
            try:
                cur = conn.cursor()
                cur.execute("SELECT value FROM rate_cache WHERE key = ?", (key,))
                row = cur.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"can't fetch key {key.decode(errors='replace')}: {e}") from e
        if row is None:
            raise NotFoundError(key.decode(errors="replace"))
        try:
            return RateTable.from_bytes(bytes(row[0]))
        except ValueError as e:
            raise StoreError(
                f"can't decode value for key {key.decode(errors='replace')}: {e}"
            ) from e

    def set(self, key: bytes, raw: bytes) -> None:
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO rate_cache (key, value) VALUES (?, ?)",
                        (key, raw),
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StoreError(f"can't store key {key.decode(errors='replace')}: {e}") from e
