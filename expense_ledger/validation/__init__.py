"""Expense validation package."""

from expense_ledger.validation.validator import ExpenseValidator, ValidationError

__all__ = ["ExpenseValidator", "ValidationError"]
