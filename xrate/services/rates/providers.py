"""Concrete rate providers and factory.

'fixer' queries the remote exchange-rate API; 'static' serves a built-in
EUR table rebased to the requested currency so the service can run offline.
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Dict, TYPE_CHECKING
from urllib.parse import urlencode

from .base import RateProvider
from .errors import ProviderError
from xrate.services.http_client import get_bytes, HttpError

if TYPE_CHECKING:  # pragma: no cover
    from xrate.core.config import Settings

logger = logging.getLogger("xrate.rates.provider")

# EUR per-unit multipliers, published 2017-10-20
_STATIC_EUR_RATES: Dict[str, str] = {
    "EUR": "1",
    "GBP": "0.89623",
    "SEK": "9.6113",
    "USD": "1.1818",
    "JPY": "133.86",
    "CHF": "1.1597",
    "NOK": "9.4020",
    "DKK": "7.4431",
}
_STATIC_DATE = "2017-10-20"


class FixerRateProvider(RateProvider):
    name = "fixer"

    def __init__(self, base_url: str, *, timeout: float = 5.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def fetch(self, base_currency: str) -> bytes:  # type: ignore[override]
        url = f"{self._base_url}?{urlencode({'base': base_currency})}"
        logger.info("fetching rates base=%s", base_currency)
        try:
            return get_bytes(url, timeout=self._timeout)
        except HttpError as e:
            raise ProviderError(f"can't request rates for {base_currency}: {e}") from e


class StaticRateProvider(RateProvider):
    name = "static"

    def fetch(self, base_currency: str) -> bytes:  # type: ignore[override]
        pivot = _STATIC_EUR_RATES.get(base_currency)
        if pivot is None:
            raise ProviderError(f"unsupported base currency {base_currency!r}")
        per_base = Decimal(pivot)
        rates = {
            code: str((Decimal(v) / per_base).quantize(Decimal("0.00001")))
            for code, v in _STATIC_EUR_RATES.items()
            if code != base_currency
        }
        # Rates are emitted as bare numbers, matching the remote format.
        body = ", ".join(f"{json.dumps(code)}: {v}" for code, v in rates.items())
        return (
            f'{{"base": {json.dumps(base_currency)}, '
            f'"date": {json.dumps(_STATIC_DATE)}, "rates": {{{body}}}}}'
        ).encode("utf-8")


_PROVIDER_REGISTRY = {
    "fixer": FixerRateProvider,
    "static": StaticRateProvider,
}


def make_rate_provider(kind: str, settings: "Settings") -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is FixerRateProvider:
        return FixerRateProvider(
            str(settings.exchange_api_base_url),
            timeout=settings.http_timeout_seconds,
        )
    return cls()
