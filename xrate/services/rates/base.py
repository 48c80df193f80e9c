"""Collaborator interfaces consumed by the conversion service.

``RateProvider`` is a byte source for fresh rate tables; ``RateStore`` is the
day-keyed cache. The service depends only on these contracts so the storage
engine or the remote source (or a test double) can be swapped freely.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from xrate.models.rates import RateTable


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch(self, base_currency: str) -> bytes:
        """Return the raw rate table payload for ``base_currency``.

        Raises ProviderError on network failure, non-success status or an
        unreadable body.
        """
        raise NotImplementedError


class RateStore(Protocol):
    def get(self, key: bytes) -> "RateTable":
        """Decode the record under ``key``; NotFoundError when absent, StoreError otherwise."""
        ...

    def set(self, key: bytes, raw: bytes) -> None: ...
