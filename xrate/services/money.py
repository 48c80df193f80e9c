"""Money / rounding helpers.

Centralized so the conversion service and rate models use identical
parsing and rounding semantics. Values are always ``Decimal``; binary
floats never carry monetary amounts.
"""

from __future__ import annotations
import re
from decimal import Decimal, Context, InvalidOperation, MAX_EMAX, MIN_EMIN, ROUND_HALF_UP

_AMOUNT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_CENT = Decimal("0.01")
# Amounts whose magnitude exponent exceeds this (either direction) are rejected.
MAX_ADJUSTED_EXPONENT = 1000


def parse_amount(text: str) -> Decimal:
    """Parse ``text`` as an exact decimal number or raise ``ValueError``."""
    if not _AMOUNT_RE.match(text):
        raise ValueError(f"not a decimal number: {text!r}")
    try:
        value = Decimal(text)
    except InvalidOperation as e:  # pragma: no cover - regex already guards
        raise ValueError(f"not a decimal number: {text!r}") from e
    if abs(value.adjusted()) > MAX_ADJUSTED_EXPONENT:
        raise ValueError(f"amount out of range: {text!r}")
    return value


def _context_for(*values: Decimal) -> Context:
    # Enough digits for an exact product plus the quantize step.
    digits = sum(len(v.as_tuple().digits) for v in values)
    exponent_span = sum(abs(int(v.as_tuple().exponent)) for v in values)
    return Context(
        prec=digits + exponent_span + 4,
        rounding=ROUND_HALF_UP,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
    )


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return _context_for(a, b).multiply(a, b)


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP, context=_context_for(value))
