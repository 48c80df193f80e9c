"""Error taxonomy for rate lookup and conversion.

Validation errors (``EmptyCurrencyError``, ``InvalidAmountError``) are raised
before any I/O and map to client errors. ``UpstreamError`` is raised only after
both the rate cache and the provider failed and maps to service-unavailable.
``ProviderError`` and ``StoreError`` are raised by the collaborators and never
reach callers of the conversion service directly.
"""

from __future__ import annotations


class ConversionError(Exception):
    pass


class ValidationError(ConversionError):
    pass


class EmptyCurrencyError(ValidationError):
    def __init__(self, message: str = "Currency must not be empty."):
        super().__init__(message)


class InvalidAmountError(ValidationError):
    def __init__(self, message: str = "Invalid amount value."):
        super().__init__(message)


class UpstreamError(ConversionError):
    pass


class ProviderError(Exception):
    pass


class StoreError(Exception):
    pass


class NotFoundError(StoreError):
    """Cache miss: no record stored under the requested key."""
