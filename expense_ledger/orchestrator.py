"""
Main Orchestrator for Expense Ledger

This module ties the components together for a host application
(a screen, a script, a test). It defines the session lifecycle:
1. Start  (open store → ensure schema → log outcome → load records)
2. Mutate (add/delete → re-fetch the full record set)
3. View   (filter + total + category totals over the current snapshot)

DESIGN DECISION: The session enforces the ordering contract:
- No CRUD runs before ensure_schema has completed
- Every mutation is followed by a full re-fetch (no incremental cache)
- A degraded schema upgrade is logged here, not inside the core
"""

from typing import Any, Optional, Union

from expense_ledger.clock import Clock, SystemClock
from expense_ledger.config import Settings, get_settings
from expense_ledger.logs import configure_logging, get_logger
from expense_ledger.models.expense import ExpenseRecord, FilterMode, LedgerView
from expense_ledger.models.migration import MigrationOutcome, MigrationStatus
from expense_ledger.queries import LedgerQueryEngine, summarize
from expense_ledger.schema import SchemaManager
from expense_ledger.services.storage import SQLiteStoreHandle, StoreHandle


class LedgerSession:
    """
    One host's view of one ledger store.

    Holds the last fetched record snapshot; views are computed from it.
    Not safe for concurrent use: await each call before the next.
    """

    def __init__(
        self,
        store: StoreHandle,
        clock: Optional[Clock] = None,
        schema_manager: Optional[SchemaManager] = None,
        engine: Optional[LedgerQueryEngine] = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._schema_manager = schema_manager or SchemaManager(store, self._clock)
        self._engine = engine or LedgerQueryEngine(store, self._clock)
        self._logger = get_logger(__name__)

        self._outcome: Optional[MigrationOutcome] = None
        self._records: list[ExpenseRecord] = []

    @property
    def records(self) -> list[ExpenseRecord]:
        """Last fetched record set, newest first."""
        return list(self._records)

    @property
    def migration_outcome(self) -> Optional[MigrationOutcome]:
        return self._outcome

    @property
    def is_started(self) -> bool:
        return self._outcome is not None

    async def start(self) -> MigrationOutcome:
        """
        Ensure the schema and load records. Runs once per session.

        Raises:
            SchemaError: If the ledger table cannot be created
        """
        if self._outcome is not None:
            return self._outcome

        outcome = await self._schema_manager.ensure_schema()
        self._log_outcome(outcome)
        self._outcome = outcome

        await self.refresh()
        return outcome

    def _log_outcome(self, outcome: MigrationOutcome) -> None:
        if outcome.status == MigrationStatus.MIGRATED_WITH_WARNING:
            self._logger.warning(
                "schema_migration_failed",
                reason=outcome.reason,
                date_column_added=outcome.date_column_added,
            )
        elif outcome.status == MigrationStatus.MIGRATED_OK:
            self._logger.info(
                "schema_migrated",
                backfilled_rows=outcome.backfilled_rows,
            )
        else:
            self._logger.debug("schema_current")

    async def refresh(self) -> list[ExpenseRecord]:
        """Re-fetch every record from the store."""
        if self._outcome is None:
            await self.start()
            return self.records
        self._records = await self._engine.list_all()
        return self.records

    async def add_expense(
        self,
        amount: Any,
        category: Any,
        note: Any = None,
        date: Any = None,
    ) -> ExpenseRecord:
        """
        Add an expense, then re-fetch.

        Raises:
            ValidationError: Input rejected; snapshot unchanged
            StorageError: Store failure
        """
        await self.start()
        record = await self._engine.add(amount, category, note=note, date=date)
        await self.refresh()
        return record

    async def delete_expense(self, expense_id: int) -> bool:
        """Delete an expense (no-op if absent), then re-fetch."""
        await self.start()
        removed = await self._engine.delete(expense_id)
        await self.refresh()
        return removed

    def view(self, mode: Union[FilterMode, str] = FilterMode.ALL) -> LedgerView:
        """Filtered records, total and category totals for `mode` as of today."""
        return summarize(self._records, mode, self._clock.today())

    async def close(self) -> None:
        await self._store.close()

    async def __aenter__(self) -> "LedgerSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def create_app_components(
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    store: Optional[StoreHandle] = None,
) -> LedgerSession:
    """
    Factory function to create a ready-to-start ledger session.

    Args:
        settings: Settings to use; defaults to get_settings()
        clock: Clock to use; defaults to the system clock
        store: Store handle to use; defaults to SQLite at the configured path

    Returns:
        An unstarted LedgerSession (call start() or use `async with`)
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    store = store or SQLiteStoreHandle.from_settings(settings.storage)
    clock = clock or SystemClock()

    return LedgerSession(store=store, clock=clock)
