"""Schema management package."""

from expense_ledger.schema.manager import (
    DATE_COLUMN,
    EXPENSES_TABLE,
    SchemaManager,
)

__all__ = ["DATE_COLUMN", "EXPENSES_TABLE", "SchemaManager"]
