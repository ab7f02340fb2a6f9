"""SQLite storage implementations."""

from armory.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from armory.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from armory.infrastructure.storage.sqlite.reference_store import SQLiteReferenceStore

# Type aliases for convenience
LedgerStore = SQLiteLedgerStore
ReferenceStore = SQLiteReferenceStore

# Singleton instances
_ledger_store: SQLiteLedgerStore | None = None
_reference_store: SQLiteReferenceStore | None = None


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


async def get_reference_store() -> SQLiteReferenceStore:
    """Get singleton reference store instance."""
    global _reference_store
    if _reference_store is None:
        _reference_store = SQLiteReferenceStore()
    return _reference_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteLedgerStore",
    "SQLiteReferenceStore",
    "LedgerStore",
    "ReferenceStore",
    "get_ledger_store",
    "get_reference_store",
]
