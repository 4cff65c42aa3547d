"""
Core Data Models for Expense Ledger

These models define the schemas for all data flowing through the ledger.
They are designed to:
1. Tolerate what is already on disk (legacy rows may lack a date)
2. Be strict about what is about to be written
3. Be serializable for logging

DESIGN DECISION: Amounts are Decimal everywhere above the storage layer.
SQLite stores them as REAL; conversion happens once, on load.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


UNCATEGORIZED = "Uncategorized"

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: Any) -> Optional[dt.date]:
    """
    Parse a stored `YYYY-MM-DD` string into a calendar date.

    Returns None for null, empty or malformed values instead of raising.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not ISO_DATE_PATTERN.match(text):
        return None
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        return None


def to_decimal_or_none(value: Any) -> Optional[Decimal]:
    """
    Convert a stored or user-supplied amount to a finite Decimal.

    bool, NaN, infinities and non-numeric text all come back as None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not amount.is_finite():
        return None
    return amount


# =============================================================================
# ENUMS
# =============================================================================

class FilterMode(str, Enum):
    """
    Time windows the ledger can be viewed through.

    Windows are calendar windows in local time, not elapsed-time ranges.
    """
    ALL = "all"
    WEEK = "week"    # Same Sunday-started week as today
    MONTH = "month"  # Same calendar year and month as today

    @property
    def label(self) -> str:
        return {
            FilterMode.ALL: "All",
            FilterMode.WEEK: "This Week",
            FilterMode.MONTH: "This Month",
        }[self]


# =============================================================================
# CORE RECORD MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    A persisted ledger record.

    Records are immutable once written; the only lifecycle
    transition is deletion by id.

    `amount` and `date` are Optional because rows written before
    validation or before the date column existed are loaded as-is.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        ge=1,
        description="Store-assigned identifier, strictly increasing"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount in currency units (None if the stored value is unusable)"
    )
    category: str = Field(
        default="",
        description="Category as entered, surrounding whitespace trimmed"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional free-text note"
    )
    date: Optional[str] = Field(
        default=None,
        description="Calendar date as YYYY-MM-DD text"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Optional[Decimal]:
        """Unusable stored amounts load as None rather than failing the row."""
        return to_decimal_or_none(v)

    @field_validator('category', mode='before')
    @classmethod
    def coerce_category(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def parsed_date(self) -> Optional[dt.date]:
        """The record's calendar date, or None if it cannot be classified."""
        return parse_iso_date(self.date)

    @classmethod
    def from_row(cls, row: dict) -> "ExpenseRecord":
        """Build a record from a storage row (missing columns become None)."""
        return cls(
            id=row["id"],
            amount=row.get("amount"),
            category=row.get("category"),
            note=row.get("note"),
            date=row.get("date"),
        )


class NewExpense(BaseModel):
    """
    A validated, normalised expense that is ready to be persisted.

    Only the validator creates these; the store never sees raw input.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount in currency units"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Non-empty category"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional note (None when blank)"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date, YYYY-MM-DD by convention"
    )

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found with an expense input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_numeric', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating one expense input.

    `expense` is only set when there are no error-level issues.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    expense: Optional[NewExpense] = None

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @property
    def error_count(self) -> int:
        return len(self.errors)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class CategoryTotal(BaseModel):
    """Summed amount for one category bucket. Derived, never persisted."""
    model_config = ConfigDict(frozen=True)

    category: str
    amount: Decimal


class LedgerView(BaseModel):
    """
    Everything a screen needs for one filter mode:
    the visible records, their total and the per-category breakdown.
    """

    mode: FilterMode
    today: dt.date
    records: list[ExpenseRecord] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    category_totals: list[CategoryTotal] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records
