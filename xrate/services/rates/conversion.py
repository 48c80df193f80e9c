"""Cache-first currency conversion.

Resolution for ``convert(amount, currency)``:
    1. Validate input (currency first, then amount) without any I/O.
    2. Look up today's rate table in the store; presence under today's key is
       sufficient freshness.
    3. On a miss or any store error, fetch from the provider and persist the
       raw payload. A failing write is logged; the fetched table still answers.
    4. Provider failure surfaces as UpstreamError.

Concurrent misses for the same key each fetch and each write; there is no
request coalescing.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from xrate.models.rates import ConversionResult, RateTable
from xrate.services.money import parse_amount
from .base import RateProvider, RateStore
from .cache_key import cache_key, today
from .errors import (
    EmptyCurrencyError,
    InvalidAmountError,
    NotFoundError,
    ProviderError,
    StoreError,
    UpstreamError,
)


logger = logging.getLogger("xrate.rates.conversion")


class ConversionService:
    def __init__(
        self,
        store: RateStore,
        provider: RateProvider,
        clock: Callable[[], date] = today,
    ):
        self._store = store
        self._provider = provider
        self._clock = clock

    def convert(self, amount_text: str, currency: str) -> ConversionResult:
        if currency == "":
            raise EmptyCurrencyError()
        try:
            amount = parse_amount(amount_text)
        except ValueError as e:
            raise InvalidAmountError() from e

        table = self.rate_table(currency)
        return table.convert(amount, currency)

    def rate_table(self, currency: str) -> RateTable:
        key = cache_key(self._clock(), currency)
        try:
            return self._store.get(key)
        except NotFoundError:
            logger.debug("rate cache miss key=%s", key.decode(errors="replace"))
        except StoreError as e:
            logger.warning("rate cache read failed, falling back to provider: %s", e)
        return self._fetch_and_store(currency, key)

    def _fetch_and_store(self, currency: str, key: bytes) -> RateTable:
        try:
            raw = self._provider.fetch(currency)
        except ProviderError as e:
            logger.error("rate provider %s failed: %s", self._provider.name, e)
            raise UpstreamError(f"can't obtain rates for {currency}") from e
        try:
            table = RateTable.from_bytes(raw)
        except ValueError as e:
            logger.error("rate provider %s sent an unreadable payload: %s", self._provider.name, e)
            raise UpstreamError(f"can't parse rates for {currency}") from e
        try:
            self._store.set(key, raw)
        except StoreError as e:
            logger.warning("rate cache write failed, answering from fetched table: %s", e)
        return table
