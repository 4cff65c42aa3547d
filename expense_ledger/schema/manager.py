"""
Schema Manager

Guarantees the `expenses` table exists with the current columns and
upgrades stores created before the `date` column existed.

DESIGN DECISION: The presence of the `date` column is the only version
signal. There is no schema-version table; a store either has the column
(current) or does not (legacy).

The upgrade is best-effort. If adding the column or backfilling legacy
rows fails, ensure_schema reports MIGRATED_WITH_WARNING instead of
raising: a ledger with degraded week/month filtering is better than
no ledger at all. Creating the table itself is NOT best-effort.
"""

from typing import Optional

from expense_ledger.clock import Clock, SystemClock, today_iso
from expense_ledger.models.migration import MigrationOutcome
from expense_ledger.services.storage import SchemaError, StorageError, StoreHandle


EXPENSES_TABLE = "expenses"

DATE_COLUMN = "date"

CREATE_EXPENSES_SQL = f"""
CREATE TABLE IF NOT EXISTS {EXPENSES_TABLE} (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  amount REAL NOT NULL,
  category TEXT NOT NULL,
  note TEXT,
  date TEXT
)
"""

ADD_DATE_COLUMN_SQL = f"ALTER TABLE {EXPENSES_TABLE} ADD COLUMN {DATE_COLUMN} TEXT"

BACKFILL_DATE_SQL = (
    f"UPDATE {EXPENSES_TABLE} SET {DATE_COLUMN} = ? "
    f"WHERE {DATE_COLUMN} IS NULL OR {DATE_COLUMN} = ''"
)


class SchemaManager:
    """
    Creates and upgrades the ledger table.

    Must complete before any CRUD operation is issued against the
    same store handle.
    """

    def __init__(self, store: StoreHandle, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or SystemClock()

    async def has_date_column(self) -> bool:
        columns = await self._store.table_columns(EXPENSES_TABLE)
        return any(col.name == DATE_COLUMN for col in columns)

    async def ensure_schema(self) -> MigrationOutcome:
        """
        Create the table if absent, then upgrade a legacy table in place.

        Returns:
            NOT_ATTEMPTED if the date column was already there,
            MIGRATED_OK if it was added and legacy rows backfilled,
            MIGRATED_WITH_WARNING if the upgrade failed part-way.

        Raises:
            SchemaError: If the table itself cannot be created
        """
        try:
            await self._store.execute(CREATE_EXPENSES_SQL)
        except StorageError as e:
            raise SchemaError(f"Could not create {EXPENSES_TABLE} table: {e}") from e

        column_added = False
        try:
            if await self.has_date_column():
                return MigrationOutcome.not_attempted()

            await self._store.execute(ADD_DATE_COLUMN_SQL)
            column_added = True

            result = await self._store.execute(
                BACKFILL_DATE_SQL,
                (today_iso(self._clock),),
            )
        except StorageError as e:
            return MigrationOutcome.warning(
                reason=str(e),
                date_column_added=column_added,
            )

        return MigrationOutcome.ok(backfilled_rows=result.rowcount)
