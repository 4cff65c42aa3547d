"""
Filtering & Aggregation

DESIGN DECISION: Everything here is a pure function of
(record set, today's date). No I/O, no clock access, no caching.
The session re-fetches the full record set after every mutation
and recomputes views from scratch.

Date windows are calendar windows in local time:
- week:  same week-start date (the Sunday on or before) as today.
         This is NOT "within the last 7 days": Saturday and the
         following Sunday are always in different weeks.
- month: same calendar year and month as today.

Records whose date is null or unparseable are never in a week or
month window, but are always visible under "all".
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from expense_ledger.models.expense import (
    UNCATEGORIZED,
    CategoryTotal,
    ExpenseRecord,
    FilterMode,
    LedgerView,
    to_decimal_or_none,
)


def week_start(day: date) -> date:
    """The Sunday on or before `day`."""
    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday=0
    offset = (day.weekday() + 1) % 7
    return day - timedelta(days=offset)


def is_same_week(record_date: Optional[date], today: date) -> bool:
    if record_date is None:
        return False
    return week_start(record_date) == week_start(today)


def is_same_month(record_date: Optional[date], today: date) -> bool:
    if record_date is None:
        return False
    return (record_date.year, record_date.month) == (today.year, today.month)


def apply_filter(
    records: Iterable[ExpenseRecord],
    mode: Union[FilterMode, str],
    today: date,
) -> list[ExpenseRecord]:
    """
    Return the visible subset of `records` for `mode`, in input order.

    Raises:
        ValueError: If `mode` is not one of all / week / month
    """
    mode = FilterMode(mode)
    records = list(records)

    if mode == FilterMode.ALL:
        return records
    if mode == FilterMode.WEEK:
        return [r for r in records if is_same_week(r.parsed_date, today)]
    return [r for r in records if is_same_month(r.parsed_date, today)]


def _amount_or_zero(record: ExpenseRecord) -> Decimal:
    # Only pre-validation legacy rows can lack a usable amount
    amount = to_decimal_or_none(record.amount)
    return amount if amount is not None else Decimal("0")


def normalize_category(category: Optional[str]) -> str:
    """Trim surrounding whitespace; blank categories share one bucket."""
    trimmed = (category or "").strip()
    return trimmed or UNCATEGORIZED


def compute_total(records: Iterable[ExpenseRecord]) -> Decimal:
    """Sum of amounts; unusable amounts count as zero."""
    return sum((_amount_or_zero(r) for r in records), Decimal("0"))


def compute_category_totals(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """
    Sum amounts per category bucket.

    Buckets are keyed by the trimmed category with case preserved,
    so "Food" and "food" are different buckets.

    Returns:
        Totals sorted by amount descending; equal amounts are ordered
        alphabetically by category so the output is deterministic.
    """
    sums: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for record in records:
        sums[normalize_category(record.category)] += _amount_or_zero(record)

    ordered = sorted(sums.items(), key=lambda item: (-item[1], item[0]))
    return [CategoryTotal(category=category, amount=amount) for category, amount in ordered]


def summarize(
    records: Iterable[ExpenseRecord],
    mode: Union[FilterMode, str],
    today: date,
) -> LedgerView:
    """Filter, then total and break down by category."""
    visible = apply_filter(records, mode, today)
    return LedgerView(
        mode=FilterMode(mode),
        today=today,
        records=visible,
        total=compute_total(visible),
        category_totals=compute_category_totals(visible),
    )
