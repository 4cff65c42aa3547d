"""
Ledger Query Engine (CRUD)

Record creation, deletion and listing against an injected store handle.

GUARANTEES:
- Nothing is written unless validation passes
- The store alone assigns ids; they only ever increase
- list_all() returns newest first (id descending)
- Deleting an id that does not exist is a no-op

The engine holds no record cache. Callers re-fetch with list_all()
after every add/delete (LedgerSession does this for them).
"""

from typing import Any, Optional

from expense_ledger.clock import Clock, SystemClock
from expense_ledger.logs import get_logger
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.schema.manager import DATE_COLUMN, EXPENSES_TABLE
from expense_ledger.services.storage import StorageError, StoreHandle
from expense_ledger.validation import ExpenseValidator, ValidationError


class LedgerQueryEngine:
    """
    CRUD over ledger records.

    SchemaManager.ensure_schema() must have completed on the same store
    before any method here is called.
    """

    def __init__(
        self,
        store: StoreHandle,
        clock: Optional[Clock] = None,
        validator: Optional[ExpenseValidator] = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._validator = validator or ExpenseValidator(self._clock)
        self._logger = get_logger(__name__)
        # Resolved on first insert; False only when the date upgrade failed
        self._has_date_column: Optional[bool] = None

    async def _date_column_available(self) -> bool:
        if self._has_date_column is None:
            columns = await self._store.table_columns(EXPENSES_TABLE)
            self._has_date_column = any(col.name == DATE_COLUMN for col in columns)
        return self._has_date_column

    async def add(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        date: Any = None,
    ) -> ExpenseRecord:
        """
        Validate, normalise and persist a new expense.

        Args:
            amount: Positive finite number (Decimal, int, float or numeric text)
            category: Non-blank category text
            note: Optional note; blank becomes None
            date: Optional YYYY-MM-DD; blank becomes today

        Returns:
            The stored record, including its new id

        Raises:
            ValidationError: If amount or category is invalid (nothing written)
            StorageError: If the insert fails
        """
        try:
            result = self._validator.validate_or_raise(amount, category, note=note, date=date)
        except ValidationError as e:
            self._logger.info("expense_rejected", fields=e.fields, reason=str(e))
            raise

        for issue in result.warnings:
            self._logger.warning(
                "expense_input_warning",
                field=issue.field,
                issue_type=issue.issue_type,
                message=issue.message,
            )

        expense = result.expense
        if await self._date_column_available():
            outcome = await self._store.execute(
                f"INSERT INTO {EXPENSES_TABLE} (amount, category, note, date) "
                "VALUES (?, ?, ?, ?)",
                (float(expense.amount), expense.category, expense.note, expense.date),
            )
        else:
            self._logger.warning("expense_date_dropped", date=expense.date)
            outcome = await self._store.execute(
                f"INSERT INTO {EXPENSES_TABLE} (amount, category, note) VALUES (?, ?, ?)",
                (float(expense.amount), expense.category, expense.note),
            )

        if outcome.lastrowid is None:
            raise StorageError("Insert did not return a row id")

        record = await self.get(outcome.lastrowid)
        if record is None:
            raise StorageError(f"Inserted expense {outcome.lastrowid} could not be read back")

        self._logger.info(
            "expense_added",
            expense_id=record.id,
            category=record.category,
            amount=str(record.amount),
            date=record.date,
        )
        return record

    async def delete(self, expense_id: int) -> bool:
        """
        Delete the expense with `expense_id`.

        Returns:
            True if a row was removed, False if there was no such row
        """
        outcome = await self._store.execute(
            f"DELETE FROM {EXPENSES_TABLE} WHERE id = ?",
            (int(expense_id),),
        )
        removed = outcome.rowcount > 0
        self._logger.info("expense_deleted", expense_id=expense_id, removed=removed)
        return removed

    async def get(self, expense_id: int) -> Optional[ExpenseRecord]:
        rows = await self._store.fetch_all(
            f"SELECT * FROM {EXPENSES_TABLE} WHERE id = ?",
            (int(expense_id),),
        )
        return ExpenseRecord.from_row(rows[0]) if rows else None

    async def list_all(self) -> list[ExpenseRecord]:
        """Every record, most recently created first."""
        # SELECT * so a store whose date upgrade failed still loads
        rows = await self._store.fetch_all(
            f"SELECT * FROM {EXPENSES_TABLE} ORDER BY id DESC"
        )
        return [ExpenseRecord.from_row(row) for row in rows]
