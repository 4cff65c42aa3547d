"""
Storage Services Package

Provides the abstract store handle and its SQLite implementation.
"""

from expense_ledger.services.storage.interface import (
    ColumnInfo,
    ConnectionError,
    ExecuteResult,
    SchemaError,
    StorageError,
    StoreHandle,
)
from expense_ledger.services.storage.sqlite import SQLiteStoreHandle

__all__ = [
    # Interface
    "ColumnInfo",
    "ExecuteResult",
    "StoreHandle",
    # Exceptions
    "ConnectionError",
    "SchemaError",
    "StorageError",
    # SQLite implementation
    "SQLiteStoreHandle",
]
