"""
Abstract Store Handle Interface

DESIGN DECISION: The ledger talks to storage through a small handle
interface rather than a specific driver. This allows us to:
1. Inject an isolated store per test (no process-wide connection)
2. Simulate storage engines that lack ALTER TABLE support
3. Swap SQLite for another local engine later

The interface is intentionally simple - we're not building an ORM.
Three capabilities: run a statement that returns rows, run a statement
that returns nothing, and list the columns of a table.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel


Params = Union[Sequence[Any], dict[str, Any]]


class ColumnInfo(BaseModel):
    """One column descriptor from schema introspection."""

    name: str
    type: str = ""
    not_null: bool = False
    default: Optional[Any] = None
    primary_key: bool = False


class ExecuteResult(BaseModel):
    """What a row-less statement did."""

    rowcount: int = 0
    lastrowid: Optional[int] = None


class StoreHandle(ABC):
    """
    Abstract interface for the ledger's durable store.

    All methods are async: each may suspend on disk I/O.
    Callers must await one operation before issuing the next;
    implementations provide no internal locking or queuing.
    """

    @abstractmethod
    async def fetch_all(
        self,
        sql: str,
        params: Params = (),
    ) -> list[dict[str, Any]]:
        """
        Execute a statement that returns rows.

        Args:
            sql: Parameterised SQL statement
            params: Positional or named parameters

        Returns:
            Rows as plain dicts keyed by column name

        Raises:
            StorageError: If the statement fails
        """
        pass

    @abstractmethod
    async def execute(
        self,
        sql: str,
        params: Params = (),
    ) -> ExecuteResult:
        """
        Execute a statement with no result rows.

        Args:
            sql: Parameterised SQL statement
            params: Positional or named parameters

        Returns:
            Affected row count and last inserted rowid

        Raises:
            StorageError: If the statement fails
        """
        pass

    @abstractmethod
    async def table_columns(self, table: str) -> list[ColumnInfo]:
        """
        List the columns of a table.

        Args:
            table: Table name

        Returns:
            Column descriptors in declaration order (empty if no such table)

        Raises:
            StorageError: If introspection fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection. Safe to call twice."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not open the storage backend."""
    pass


class SchemaError(StorageError):
    """The ledger table could not be created."""
    pass
