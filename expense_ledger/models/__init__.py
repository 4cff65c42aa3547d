"""
Data Models Package

This package contains all Pydantic models used by the Expense Ledger.
All data flowing through the system must conform to these schemas.
"""

from expense_ledger.models.expense import (
    ISO_DATE_PATTERN,
    UNCATEGORIZED,
    CategoryTotal,
    ExpenseRecord,
    FilterMode,
    LedgerView,
    NewExpense,
    ValidationIssue,
    ValidationResult,
    parse_iso_date,
    to_decimal_or_none,
)
from expense_ledger.models.migration import (
    MigrationOutcome,
    MigrationStatus,
)

__all__ = [
    # Expense models
    "CategoryTotal",
    "ExpenseRecord",
    "FilterMode",
    "LedgerView",
    "NewExpense",
    "ValidationIssue",
    "ValidationResult",
    # Helpers
    "ISO_DATE_PATTERN",
    "UNCATEGORIZED",
    "parse_iso_date",
    "to_decimal_or_none",
    # Migration models
    "MigrationOutcome",
    "MigrationStatus",
]
