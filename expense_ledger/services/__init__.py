"""External services package (storage)."""
