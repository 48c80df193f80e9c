import pathlib
import sys
from datetime import date
from typing import Dict, List

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from xrate.models.rates import RateTable  # noqa: E402
from xrate.services.rates.base import RateProvider  # noqa: E402
from xrate.services.rates.errors import NotFoundError, ProviderError, StoreError  # noqa: E402

FIXED_DAY = date(2024, 5, 1)


class FakeStore:
    """In-memory RateStore double recording every call."""

    def __init__(self, records: Dict[bytes, bytes] | None = None) -> None:
        self.records: Dict[bytes, bytes] = dict(records or {})
        self.gets: List[bytes] = []
        self.sets: List[bytes] = []
        self.fail_get = False
        self.fail_set = False

    def get(self, key: bytes) -> RateTable:
        self.gets.append(key)
        if self.fail_get:
            raise StoreError("disk on fire")
        if key not in self.records:
            raise NotFoundError(key.decode())
        return RateTable.from_bytes(self.records[key])

    def set(self, key: bytes, raw: bytes) -> None:
        self.sets.append(key)
        if self.fail_set:
            raise StoreError("read-only")
        self.records[key] = raw


class FakeProvider(RateProvider):
    name = "fake"

    def __init__(self, payload: bytes | None = None) -> None:
        self.payload = payload
        self.calls: List[str] = []

    def fetch(self, base_currency: str) -> bytes:
        self.calls.append(base_currency)
        if self.payload is None:
            raise ProviderError("connection refused")
        return self.payload


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(b'{"base":"EUR","rates":{"USD":1.1}}')
