"""
Expense Input Validation

DESIGN DECISION: Validation happens before anything touches the store.

ERRORS (reject the expense, nothing is written):
- Amount missing, non-numeric, NaN/infinite, zero or negative
- Amount too large or too small to survive conversion to a float
- Category empty or whitespace-only

WARNINGS (expense is accepted):
- Date given but not in YYYY-MM-DD form; such a record can never
  match the week or month filters

NORMALISATION:
- Category, note and date are trimmed
- A blank note becomes None
- A blank date becomes today's date from the injected clock

Both error checks always run, so the caller sees every problem at once.
"""

import math
from typing import Any, Optional

from expense_ledger.clock import Clock, SystemClock, today_iso
from expense_ledger.models.expense import (
    NewExpense,
    ValidationIssue,
    ValidationResult,
    parse_iso_date,
    to_decimal_or_none,
)


class ValidationError(Exception):
    """An expense input was rejected; nothing was persisted."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        message = "; ".join(issue.message for issue in issues) or "Invalid expense"
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


def _trimmed(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class ExpenseValidator:
    """Checks and normalises raw expense input."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()

    def _check_amount(self, amount: Any) -> list[ValidationIssue]:
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            )]

        value = to_decimal_or_none(amount)
        if value is None:
            return [ValidationIssue(
                field="amount",
                issue_type="not_numeric",
                message=f"Amount ({amount!r}) is not a finite number",
                severity="error",
            )]

        if value <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
                severity="error",
            )]

        # Stored as REAL; the float must keep the value finite and positive
        stored = float(value)
        if not math.isfinite(stored) or stored <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="not_representable",
                message=f"Amount ({amount!r}) is out of range for storage",
                severity="error",
            )]

        return []

    def _check_category(self, category: Any) -> list[ValidationIssue]:
        if not _trimmed(category):
            return [ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            )]
        return []

    def _check_date(self, date_text: str) -> list[ValidationIssue]:
        # Blank dates are filled in with today, not reported
        if not date_text:
            return []
        if parse_iso_date(date_text) is None:
            return [ValidationIssue(
                field="date",
                issue_type="unparseable",
                message=(
                    f"Date ({date_text!r}) is not a YYYY-MM-DD calendar date; "
                    "it will not appear under week or month filters"
                ),
                severity="warning",
            )]
        return []

    def validate(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        date: Any = None,
    ) -> ValidationResult:
        """
        Validate one expense input.

        Returns:
            ValidationResult; `expense` holds the normalised NewExpense
            when there are no error-level issues.
        """
        date_text = _trimmed(date)

        issues = []
        issues.extend(self._check_amount(amount))
        issues.extend(self._check_category(category))
        issues.extend(self._check_date(date_text))

        if any(issue.severity == "error" for issue in issues):
            return ValidationResult(is_valid=False, issues=issues)

        expense = NewExpense(
            amount=to_decimal_or_none(amount),
            category=_trimmed(category),
            note=_trimmed(note) or None,
            date=date_text or today_iso(self._clock),
        )
        return ValidationResult(is_valid=True, issues=issues, expense=expense)

    def validate_or_raise(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        date: Any = None,
    ) -> ValidationResult:
        """Like validate(), but raise ValidationError on any error-level issue."""
        result = self.validate(amount, category, note=note, date=date)
        if not result.is_valid:
            raise ValidationError(result.errors)
        return result
