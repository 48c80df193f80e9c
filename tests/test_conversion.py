"""Conversion service: validation order, cache-first lookup, provider fallback."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from conftest import FIXED_DAY, FakeProvider, FakeStore
from xrate.services.rates.cache_key import cache_key
from xrate.services.rates.conversion import ConversionService
from xrate.services.rates.errors import (
    EmptyCurrencyError,
    InvalidAmountError,
    UpstreamError,
    ValidationError,
)


def make_service(store, provider, day=FIXED_DAY):
    return ConversionService(store, provider, clock=lambda: day)


def test_cache_hit_scenario(provider):
    store = FakeStore({cache_key(FIXED_DAY, "SEK"): b'{"base":"SEK","rates":{"SEK":1}}'})
    result = make_service(store, provider).convert("200", "SEK")

    assert str(result.amount) == "200"
    assert result.currency == "SEK"
    assert {k: str(v) for k, v in result.converted.items()} == {"SEK": "200.00"}
    assert provider.calls == []
    assert store.sets == []


@pytest.mark.parametrize("amount", ["200", "abc", ""])
def test_empty_currency_checked_first_without_io(store, provider, amount):
    with pytest.raises(EmptyCurrencyError) as exc:
        make_service(store, provider).convert(amount, "")
    assert str(exc.value) == "Currency must not be empty."
    assert store.gets == [] and store.sets == []
    assert provider.calls == []


@pytest.mark.parametrize("amount", ["abc", "", "1.2.3", "NaN"])
def test_invalid_amount(store, provider, amount):
    with pytest.raises(InvalidAmountError) as exc:
        make_service(store, provider).convert(amount, "SEK")
    assert str(exc.value) == "Invalid amount value."
    assert isinstance(exc.value, ValidationError)
    assert store.gets == []
    assert provider.calls == []


def test_miss_fetches_stores_and_then_hits_cache(store, provider):
    svc = make_service(store, provider)

    first = svc.convert("10", "EUR")
    assert first.converted["USD"] == Decimal("11.00")
    assert str(first.converted["USD"]) == "11.00"
    assert provider.calls == ["EUR"]
    key = cache_key(FIXED_DAY, "EUR")
    assert store.records[key] == b'{"base":"EUR","rates":{"USD":1.1}}'

    second = svc.convert("10", "EUR")
    assert provider.calls == ["EUR"]
    assert second == first


def test_repeated_calls_on_populated_cache_are_identical(provider):
    store = FakeStore(
        {cache_key(FIXED_DAY, "EUR"): b'{"base":"EUR","rates":{"USD":1.1,"SEK":9.61}}'}
    )
    svc = make_service(store, provider)
    assert svc.convert("12.345", "EUR") == svc.convert("12.345", "EUR")
    assert provider.calls == []


def test_new_day_misses_cache(store, provider):
    make_service(store, provider, FIXED_DAY).convert("1", "EUR")
    make_service(store, provider, FIXED_DAY + timedelta(days=1)).convert("1", "EUR")
    assert provider.calls == ["EUR", "EUR"]
    assert store.sets == [
        cache_key(FIXED_DAY, "EUR"),
        cache_key(date(2024, 5, 2), "EUR"),
    ]


def test_currency_case_is_not_normalized(store, provider):
    svc = make_service(store, provider)
    svc.convert("1", "EUR")
    svc.convert("1", "eur")
    assert provider.calls == ["EUR", "eur"]


def test_store_read_error_falls_back_to_provider(store, provider):
    store.fail_get = True
    result = make_service(store, provider).convert("10", "EUR")
    assert result.converted["USD"] == Decimal("11.00")
    assert provider.calls == ["EUR"]


def test_store_write_error_is_not_fatal(store, provider, caplog):
    store.fail_set = True
    result = make_service(store, provider).convert("10", "EUR")
    assert result.converted["USD"] == Decimal("11.00")
    assert store.sets == [cache_key(FIXED_DAY, "EUR")]
    assert "rate cache write failed" in caplog.text


def test_provider_failure_without_cache_is_upstream_error(store):
    provider = FakeProvider(payload=None)
    with pytest.raises(UpstreamError):
        make_service(store, provider).convert("10", "EUR")
    assert store.sets == []


def test_unreadable_provider_payload_is_upstream_error(store):
    provider = FakeProvider(payload=b"<html>502</html>")
    with pytest.raises(UpstreamError):
        make_service(store, provider).convert("10", "EUR")
    assert store.sets == []


def test_cache_hit_never_calls_provider_even_if_provider_is_down():
    store = FakeStore({cache_key(FIXED_DAY, "USD"): b'{"base":"USD","rates":{"EUR":0.9}}'})
    provider = FakeProvider(payload=None)
    result = make_service(store, provider).convert("3", "USD")
    assert result.converted["EUR"] == Decimal("2.70")
    assert provider.calls == []
