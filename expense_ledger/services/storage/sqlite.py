"""
SQLite Store Handle

DESIGN DECISION: SQLite is the ledger's durable store because:
1. It lives on the device, no server to run
2. One file per ledger is easy to back up
3. The stdlib driver is enough for a single-user workload

TRADEOFFS:
- One connection, no pooling (single process, sequential callers)
- Autocommit mode: every statement is its own transaction
- No automatic retry; a failure surfaces as StorageError

The implementation follows the abstract interface, so the rest of the
ledger never imports sqlite3 directly.
"""

import re
import sqlite3
from typing import Any, Optional

from expense_ledger.config import StorageSettings
from expense_ledger.logs import get_logger
from expense_ledger.services.storage.interface import (
    ColumnInfo,
    ConnectionError,
    ExecuteResult,
    Params,
    StorageError,
    StoreHandle,
)


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLiteStoreHandle(StoreHandle):
    """
    Store handle backed by a single sqlite3 connection.

    The connection is opened lazily on first use, so constructing a
    handle never touches the disk.
    """

    def __init__(
        self,
        path: str = ":memory:",
        timeout_seconds: float = 5.0,
    ):
        """
        Initialize the handle.

        Args:
            path: Database file path, or ':memory:' for a throwaway store
            timeout_seconds: How long to wait on a locked database
        """
        self._path = path
        self._timeout = timeout_seconds
        self._conn: Optional[sqlite3.Connection] = None
        self._logger = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "SQLiteStoreHandle":
        return cls(path=settings.path, timeout_seconds=settings.timeout_seconds)

    @property
    def path(self) -> str:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = sqlite3.connect(
                    self._path,
                    timeout=self._timeout,
                    check_same_thread=False,
                    isolation_level=None,
                )
            except sqlite3.Error as e:
                raise ConnectionError(
                    f"Could not open SQLite database at {self._path}: {e}"
                ) from e
            conn.row_factory = sqlite3.Row
            self._conn = conn
            self._logger.debug("sqlite_connected", path=self._path)
        return self._conn

    async def fetch_all(
        self,
        sql: str,
        params: Params = (),
    ) -> list[dict[str, Any]]:
        conn = self._connect()
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}") from e
        return [dict(row) for row in rows]

    async def execute(
        self,
        sql: str,
        params: Params = (),
    ) -> ExecuteResult:
        conn = self._connect()
        try:
            cur = conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"Statement failed: {e}") from e
        return ExecuteResult(rowcount=max(cur.rowcount, 0), lastrowid=cur.lastrowid)

    async def table_columns(self, table: str) -> list[ColumnInfo]:
        if not _IDENTIFIER.match(table):
            raise StorageError(f"Invalid table name: {table!r}")
        rows = await self.fetch_all(f"PRAGMA table_info({table})")
        return [
            ColumnInfo(
                name=row["name"],
                type=row["type"] or "",
                not_null=bool(row["notnull"]),
                default=row["dflt_value"],
                primary_key=bool(row["pk"]),
            )
            for row in rows
        ]

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._logger.debug("sqlite_closed", path=self._path)
