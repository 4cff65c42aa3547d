"""
Tests for Expense Ledger

Test strategy:
1. Unit tests for individual components (models, validator, filters)
2. Integration tests against in-memory SQLite (schema, engine, session)
3. No wall-clock dependence (fixed clock everywhere)
"""

import pytest
from datetime import date
from decimal import Decimal

from expense_ledger.models.expense import (
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


class TestExpenseRecord:
    """Tests for the persisted record model."""

    def test_record_creation(self):
        """Test ExpenseRecord model creation."""
        record = ExpenseRecord(
            id=1,
            amount=Decimal("12.50"),
            category="Food",
            note="lunch",
            date="2024-01-07",
        )
        assert record.id == 1
        assert record.amount == Decimal("12.50")
        assert record.parsed_date == date(2024, 1, 7)

    def test_float_amount_loads_as_decimal(self):
        """SQLite REAL values come back as exact Decimals of their repr."""
        record = ExpenseRecord(id=1, amount=12.5, category="Food")
        assert record.amount == Decimal("12.5")

    def test_unusable_amount_loads_as_none(self):
        """Legacy rows with non-numeric amounts still load."""
        record = ExpenseRecord(id=1, amount="twelve", category="Food")
        assert record.amount is None

    def test_from_row_without_date_column(self):
        """Rows from a store whose upgrade failed have no date key at all."""
        record = ExpenseRecord.from_row({"id": 3, "amount": 9.0, "category": "Coffee", "note": None})
        assert record.date is None
        assert record.parsed_date is None

    def test_null_category_loads_as_empty(self):
        """A null category does not break loading."""
        record = ExpenseRecord(id=1, amount=1, category=None)
        assert record.category == ""

    def test_records_are_immutable(self):
        """Records cannot be edited after creation."""
        record = ExpenseRecord(id=1, amount=1, category="Food")
        with pytest.raises(ValueError):
            record.amount = Decimal("2")

    def test_rejects_non_positive_id(self):
        """Store ids start at 1."""
        with pytest.raises(ValueError):
            ExpenseRecord(id=0, amount=1, category="Food")


class TestNewExpense:
    """Tests for the validated input model."""

    def test_strips_whitespace(self):
        """Test that surrounding whitespace is stripped."""
        expense = NewExpense(
            amount=Decimal("5"),
            category="  Books  ",
            note="  used  ",
            date=" 2024-01-07 ",
        )
        assert expense.category == "Books"
        assert expense.note == "used"
        assert expense.date == "2024-01-07"

    def test_blank_note_becomes_none(self):
        """Test that a whitespace-only note is dropped."""
        expense = NewExpense(amount=Decimal("5"), category="Books", note="   ", date="2024-01-07")
        assert expense.note is None

    def test_rejects_zero_amount(self):
        """Test that zero amounts are rejected."""
        with pytest.raises(ValueError):
            NewExpense(amount=Decimal("0"), category="Books", date="2024-01-07")

    def test_rejects_blank_category(self):
        """Test that a blank category is rejected."""
        with pytest.raises(ValueError):
            NewExpense(amount=Decimal("1"), category="   ", date="2024-01-07")


class TestDateParsing:
    """Tests for parse_iso_date."""

    def test_parses_iso_date(self):
        assert parse_iso_date("2024-01-31") == date(2024, 1, 31)

    def test_trims_before_parsing(self):
        assert parse_iso_date(" 2024-01-31 ") == date(2024, 1, 31)

    def test_rejects_impossible_date(self):
        assert parse_iso_date("2024-02-30") is None

    def test_rejects_unpadded_date(self):
        assert parse_iso_date("2024-1-7") is None

    def test_rejects_null_and_empty(self):
        assert parse_iso_date(None) is None
        assert parse_iso_date("") is None

    def test_passes_through_date_objects(self):
        assert parse_iso_date(date(2024, 1, 7)) == date(2024, 1, 7)


class TestAmountConversion:
    """Tests for to_decimal_or_none."""

    def test_numeric_text(self):
        assert to_decimal_or_none(" 12.50 ") == Decimal("12.50")

    def test_int_and_float(self):
        assert to_decimal_or_none(7) == Decimal("7")
        assert to_decimal_or_none(0.1) == Decimal("0.1")

    def test_rejects_bool(self):
        """True is an int in Python but never an amount."""
        assert to_decimal_or_none(True) is None

    def test_rejects_non_finite(self):
        assert to_decimal_or_none(float("inf")) is None
        assert to_decimal_or_none("NaN") is None

    def test_rejects_garbage(self):
        assert to_decimal_or_none("abc") is None
        assert to_decimal_or_none([1]) is None


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_errors_and_warnings_split(self):
        """Test errors/warnings properties."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="not_positive",
                    message="Amount must be greater than zero",
                    severity="error",
                ),
                ValidationIssue(
                    field="date",
                    issue_type="unparseable",
                    message="Bad date",
                    severity="warning",
                ),
            ],
        )
        assert result.error_count == 1
        assert [w.field for w in result.warnings] == ["date"]

    def test_issue_severity_is_restricted(self):
        """Only error and warning severities exist."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="info")


class TestFilterMode:
    """Tests for filter mode enum."""

    def test_mode_values(self):
        assert FilterMode("all") is FilterMode.ALL
        assert FilterMode("week") is FilterMode.WEEK
        assert FilterMode("month") is FilterMode.MONTH

    def test_labels(self):
        assert FilterMode.ALL.label == "All"
        assert FilterMode.WEEK.label == "This Week"
        assert FilterMode.MONTH.label == "This Month"

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            FilterMode("year")


class TestDerivedModels:
    """Tests for views and migration outcomes."""

    def test_empty_view(self):
        view = LedgerView(mode=FilterMode.ALL, today=date(2024, 1, 7))
        assert view.is_empty
        assert view.total == Decimal("0")
        assert view.category_totals == []

    def test_category_total(self):
        total = CategoryTotal(category=UNCATEGORIZED, amount=Decimal("3"))
        assert total.category == "Uncategorized"

    def test_migration_outcome_ok(self):
        outcome = MigrationOutcome.ok(backfilled_rows=2)
        assert outcome.status == MigrationStatus.MIGRATED_OK
        assert outcome.date_column_added is True
        assert outcome.backfilled_rows == 2
        assert not outcome.is_degraded

    def test_migration_outcome_warning(self):
        outcome = MigrationOutcome.warning(reason="ALTER not supported")
        assert outcome.status == MigrationStatus.MIGRATED_WITH_WARNING
        assert outcome.reason == "ALTER not supported"
        assert outcome.is_degraded

    def test_migration_outcome_not_attempted(self):
        outcome = MigrationOutcome.not_attempted()
        assert outcome.status.value == "not_attempted"
        assert outcome.backfilled_rows == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
