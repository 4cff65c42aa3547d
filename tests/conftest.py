"""
Shared fixtures for Expense Ledger tests.

Every test gets its own in-memory SQLite store and a clock fixed on
Sunday 2024-01-07, so nothing depends on the wall clock or on disk state.
"""

from datetime import date

import pytest
import pytest_asyncio

from expense_ledger.clock import FixedClock
from expense_ledger.queries import LedgerQueryEngine
from expense_ledger.schema import SchemaManager
from expense_ledger.services.storage import SQLiteStoreHandle, StorageError


SUNDAY = date(2024, 1, 7)

LEGACY_TABLE_SQL = """
CREATE TABLE expenses (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  amount REAL NOT NULL,
  category TEXT NOT NULL,
  note TEXT
)
"""


class FailingStoreHandle(SQLiteStoreHandle):
    """
    SQLite handle that refuses statements starting with given keywords.

    Stands in for storage engines without in-place column addition.
    """

    def __init__(self, *refused: str, **kwargs):
        super().__init__(**kwargs)
        self._refused = tuple(word.upper() for word in refused)

    async def execute(self, sql, params=()):
        if sql.lstrip().upper().startswith(self._refused):
            raise StorageError(f"{sql.split()[0]} not supported by this engine")
        return await super().execute(sql, params)


async def create_legacy_table(store, rows=()):
    """Build a pre-date-column expenses table holding `rows` of (amount, category, note)."""
    await store.execute(LEGACY_TABLE_SQL)
    for amount, category, note in rows:
        await store.execute(
            "INSERT INTO expenses (amount, category, note) VALUES (?, ?, ?)",
            (amount, category, note),
        )


@pytest.fixture
def clock():
    return FixedClock(SUNDAY)


@pytest.fixture
def store():
    return SQLiteStoreHandle(":memory:")


@pytest_asyncio.fixture
async def engine(store, clock):
    """A query engine over a freshly created, current-schema store."""
    await SchemaManager(store, clock).ensure_schema()
    yield LedgerQueryEngine(store, clock)
    await store.close()


@pytest_asyncio.fixture
async def legacy_store():
    """In-memory store with a legacy (no date column) table and two rows."""
    store = SQLiteStoreHandle(":memory:")
    await create_legacy_table(store, [(12.5, "Food", None), (40, "Books", "textbook")])
    yield store
    await store.close()


@pytest_asyncio.fixture
async def no_alter_store():
    """Legacy store on an engine that cannot ALTER TABLE."""
    store = FailingStoreHandle("ALTER", path=":memory:")
    await create_legacy_table(store, [(9, "Coffee", None)])
    yield store
    await store.close()
