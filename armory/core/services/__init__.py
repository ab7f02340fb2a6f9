"""
Core business logic services.

Layer-pure services that depend only on:
- armory/core/entities/*
- armory/core/exceptions.py

NO infrastructure imports. Transactions are passed in, never fetched.
"""

from armory.core.services.assignment_fulfillment import (
    ALLOWED_TRANSITIONS,
    AssignmentFulfillment,
    ExpenditureDetails,
    FulfillmentResult,
    ItemRef,
    check_transition,
)
from armory.core.services.dashboard import DashboardAggregator, resolve_window
from armory.core.services.inventory_ledger import (
    InventoryLedger,
    in_window,
    ledger_order,
    reconcile_window,
    require_non_negative,
    require_stock,
    touches_base,
)
from armory.core.services.movement_log import (
    SORT_KEYS,
    MovementFilter,
    MovementLogCompiler,
    MovementPage,
)
from armory.core.services.query_builder import (
    ALL_SENTINELS,
    SCREEN_PRESETS,
    WIRE_KEYS,
    FilterState,
    build_query,
    to_query_string,
)

__all__ = [
    # Assignment fulfillment
    "ALLOWED_TRANSITIONS",
    "AssignmentFulfillment",
    "ExpenditureDetails",
    "FulfillmentResult",
    "ItemRef",
    "check_transition",
    # Inventory ledger
    "InventoryLedger",
    "in_window",
    "ledger_order",
    "reconcile_window",
    "require_non_negative",
    "require_stock",
    "touches_base",
    # Movement log
    "SORT_KEYS",
    "MovementFilter",
    "MovementLogCompiler",
    "MovementPage",
    # Query builder
    "ALL_SENTINELS",
    "SCREEN_PRESETS",
    "WIRE_KEYS",
    "FilterState",
    "build_query",
    "to_query_string",
    # Dashboard
    "DashboardAggregator",
    "resolve_window",
]
