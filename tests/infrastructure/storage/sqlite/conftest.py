"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from armory.core.entities import Asset, AssetCategory, Base
from armory.infrastructure.storage.sqlite import SQLiteLedgerStore, SQLiteReferenceStore


@pytest.fixture
def reference_store(ledger_db: Path) -> SQLiteReferenceStore:
    return SQLiteReferenceStore()


@pytest.fixture
def ledger_store(ledger_db: Path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
async def seeded(reference_store: SQLiteReferenceStore) -> AsyncGenerator[dict, None]:
    """Two bases (Alpha=1, Bravo=2) and two assets (Rifle=1, Jeep=2)."""
    alpha = await reference_store.create_base(Base(name="Alpha", district="Pune", state="MH"))
    bravo = await reference_store.create_base(Base(name="Bravo", district="Leh", state="LA"))
    rifle = await reference_store.create_asset(Asset(name="Rifle", category=AssetCategory.WEAPON))
    jeep = await reference_store.create_asset(Asset(name="Jeep", category=AssetCategory.VEHICLE))
    yield {"alpha": alpha, "bravo": bravo, "rifle": rifle, "jeep": jeep}
