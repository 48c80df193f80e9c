"""Exchange rate conversion service with a per-day rate cache."""
