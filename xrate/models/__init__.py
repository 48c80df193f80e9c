"""Pydantic models for rate tables and conversion results."""

from .rates import ConversionResult, RateTable

__all__ = [
    "ConversionResult",
    "RateTable",
]
