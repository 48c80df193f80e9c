"""Day-rotating cache keys for rate tables.

Keys rotate at midnight of the configured clock (UTC by default). The
provider refreshes its tables in the afternoon, so a key may briefly hold the
previous publication; rotation stays at midnight.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def cache_key(day: date, currency: str) -> bytes:
    # Currency is used verbatim: "usd" and "USD" are distinct keys.
    return (day.isoformat() + currency).encode("utf-8")


def today(use_utc: bool = True) -> date:
    if use_utc:
        return datetime.now(timezone.utc).date()
    return date.today()
