"""Ledger query package: CRUD engine plus pure filtering and aggregation."""

from expense_ledger.queries.engine import LedgerQueryEngine
from expense_ledger.queries.filters import (
    apply_filter,
    compute_category_totals,
    compute_total,
    is_same_month,
    is_same_week,
    normalize_category,
    summarize,
    week_start,
)

__all__ = [
    "LedgerQueryEngine",
    "apply_filter",
    "compute_category_totals",
    "compute_total",
    "is_same_month",
    "is_same_week",
    "normalize_category",
    "summarize",
    "week_start",
]
