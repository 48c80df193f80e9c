"""Lightweight HTTP client util.

Uses stdlib urllib; a single bounded GET returning the raw body. Rate lookups
surface the first failure, so there is no retry.
"""
from __future__ import annotations

import http.client
import urllib.request
import urllib.error


class HttpError(Exception):
    pass


def get_bytes(url: str, *, timeout: float = 5.0) -> bytes:
    try:
        with urllib.request.urlopen(url, timeout=timeout) as resp:  # nosec B310
            if not 200 <= resp.status < 300:
                raise HttpError(f"HTTP {resp.status} for {url}")
            return resp.read()
    except (
        urllib.error.URLError,
        OSError,
        http.client.HTTPException,
    ) as e:  # OSError covers timeouts and resets; HTTPException covers short reads
        raise HttpError(f"Failed to fetch {url}: {e}") from e
