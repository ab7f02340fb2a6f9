"""Core interfaces (ports) for dependency injection."""

from armory.core.interfaces.ledger_store import ILedgerStore, StockGuard
from armory.core.interfaces.reference_store import IReferenceStore

__all__ = [
    "ILedgerStore",
    "IReferenceStore",
    "StockGuard",
]
