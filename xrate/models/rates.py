from __future__ import annotations

import json
from decimal import Decimal
from typing import Dict
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field, field_validator

from xrate.services.money import MAX_ADJUSTED_EXPONENT, multiply, round2

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _number(value: Decimal) -> str:
    # str() of a finite Decimal is always a valid JSON number literal.
    return str(value)


class RateTable(BaseModel):
    """Rate set for one base currency, as published by the provider.

    ``date`` is kept as the provider sent it; it is not guaranteed to be
    ISO 8601 and is never parsed.
    """

    model_config = ConfigDict(frozen=True)

    base: str = ""
    date: str = ""
    rates: Dict[str, Decimal] = Field(...)

    @field_validator("base", "date", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        # JSON null decodes like an absent field.
        return "" if v is None else v

    @field_validator("rates")
    @classmethod
    def non_negative(cls, v: Dict[str, Decimal]) -> Dict[str, Decimal]:
        for code, rate in v.items():
            if not rate.is_finite() or rate < 0:
                raise ValueError(f"rate for {code} must be a non-negative number")
            if rate and abs(rate.adjusted()) > MAX_ADJUSTED_EXPONENT:
                raise ValueError(f"rate for {code} is out of range")
        return v

    @classmethod
    def from_bytes(cls, raw: bytes) -> "RateTable":
        """Decode a provider / cache payload; raises ValueError when malformed."""
        data = json.loads(raw, parse_float=Decimal, parse_int=Decimal)
        if not isinstance(data, dict):
            raise ValueError("rate payload must be a JSON object")
        return cls.model_validate(data)

    def convert(self, amount: Decimal, currency: str) -> "ConversionResult":
        return ConversionResult(
            amount=amount,
            currency=currency,
            converted={
                code: round2(multiply(rate, amount)) for code, rate in self.rates.items()
            },
        )


class ConversionResult(BaseModel):
    """Requested amount/currency plus converted amounts (2 decimal places)."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: str
    converted: Dict[str, Decimal]

    def to_json(self) -> str:
        """Render with decimals as bare JSON numbers (never quoted, never floats)."""
        converted = ", ".join(
            f"{json.dumps(code)}: {_number(value)}"
            for code, value in self.converted.items()
        )
        return (
            f'{{"amount": {_number(self.amount)}, '
            f'"currency": {json.dumps(self.currency)}, '
            f'"converted": {{{converted}}}}}'
        )

    def to_xml(self) -> str:
        root = ET.Element("Rates")
        ET.SubElement(root, "Amount").text = str(self.amount)
        ET.SubElement(root, "Currency").text = self.currency
        converted = ET.SubElement(root, "Converted")
        for code, value in self.converted.items():
            ET.SubElement(converted, code).text = str(value)
        return XML_HEADER + ET.tostring(root, encoding="unicode")
