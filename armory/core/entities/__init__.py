"""Core domain entities."""

from armory.core.entities.access import PERMISSIONS, Actor, Operation, Role, is_allowed
from armory.core.entities.inventory import AssetSummary, DashboardTotals, InventoryStock
from armory.core.entities.movement import ActionType, MovementLogEntry
from armory.core.entities.reference import Asset, AssetCategory, Base
from armory.core.entities.transaction import (
    Assignment,
    AssignmentItem,
    AssignmentStatus,
    Expenditure,
    LedgerTransaction,
    LineItem,
    Purchase,
    Transaction,
    TransactionKind,
    Transfer,
    UtcDateTime,
    as_naive_utc,
)

__all__ = [
    # Access
    "Actor",
    "Operation",
    "PERMISSIONS",
    "Role",
    "is_allowed",
    # Reference data
    "Asset",
    "AssetCategory",
    "Base",
    # Transactions
    "Assignment",
    "AssignmentItem",
    "AssignmentStatus",
    "Expenditure",
    "LedgerTransaction",
    "LineItem",
    "Purchase",
    "Transaction",
    "TransactionKind",
    "Transfer",
    "UtcDateTime",
    "as_naive_utc",
    # Inventory
    "AssetSummary",
    "DashboardTotals",
    "InventoryStock",
    # Movement
    "ActionType",
    "MovementLogEntry",
]
