"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import datetime
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

import armory.config.settings as settings_module
from armory.config.settings import Settings, StorageSettings
from armory.core.entities import (
    Actor,
    Assignment,
    AssignmentItem,
    Expenditure,
    LineItem,
    Purchase,
    Role,
    Transfer,
)


@pytest.fixture
def temp_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Settings pointing storage at a temporary directory."""
    settings = Settings(
        storage=StorageSettings(data_dir=tmp_path, db_name="test.db", pool_size=2, busy_timeout=5000)
    )
    settings_module._settings = settings
    yield settings
    settings_module._settings = None


@pytest.fixture
async def ledger_db(temp_settings: Settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary ledger database; the global pool is closed afterwards."""
    from armory.infrastructure.storage.sqlite import close_pool
    from armory.infrastructure.storage.sqlite.migrations import run_migrations

    await run_migrations(create_backup_before=False)
    yield temp_settings.storage.db_path
    await close_pool()


@pytest.fixture
async def api_client(ledger_db: Path) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the real app and a temporary database."""
    from armory.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# Actors


@pytest.fixture
def admin() -> Actor:
    return Actor(name="root", role=Role.ADMIN)


@pytest.fixture
def commander() -> Actor:
    return Actor(name="cmdr", role=Role.BASE_COMMANDER, base_id=1)


@pytest.fixture
def logistics() -> Actor:
    return Actor(name="lo", role=Role.LOGISTICS_OFFICER, base_id=1)


def headers_for(actor: Actor) -> dict[str, str]:
    headers = {"X-User-Name": actor.name, "X-User-Role": actor.role.value}
    if actor.base_id is not None:
        headers["X-User-Base"] = str(actor.base_id)
    return headers


@pytest.fixture
def auth_headers():
    """Gateway headers for an actor."""
    return headers_for


# Transaction builders


@pytest.fixture
def make_purchase():
    def make(base_id=1, items=None, day=datetime(2025, 1, 1, 9), **kwargs) -> Purchase:
        return Purchase(
            base_id=base_id,
            purchase_date=day,
            invoice_number=kwargs.pop("invoice_number", "INV-1"),
            items=[LineItem(asset_id=a, quantity=q) for a, q in (items or {1: 100}).items()],
            **kwargs,
        )

    return make


@pytest.fixture
def make_transfer():
    def make(from_base_id=1, to_base_id=2, items=None, day=datetime(2025, 1, 2, 9), **kwargs) -> Transfer:
        return Transfer(
            from_base_id=from_base_id,
            to_base_id=to_base_id,
            transfer_date=day,
            invoice_number=kwargs.pop("invoice_number", "TRF-1"),
            items=[LineItem(asset_id=a, quantity=q) for a, q in (items or {1: 10}).items()],
            **kwargs,
        )

    return make


@pytest.fixture
def make_assignment():
    def make(base_id=1, items=None, day=datetime(2025, 1, 3, 9), **kwargs) -> Assignment:
        return Assignment(
            base_id=base_id,
            assigned_to=kwargs.pop("assigned_to", "Sgt. Rao"),
            assign_date=day,
            items=items or [AssignmentItem(id=1, asset_id=1, quantity=10)],
            **kwargs,
        )

    return make


@pytest.fixture
def make_expenditure():
    def make(base_id=1, items=None, day=datetime(2025, 1, 4, 9), **kwargs) -> Expenditure:
        return Expenditure(
            base_id=base_id,
            expended_by=kwargs.pop("expended_by", "Cpl. Iyer"),
            expend_date=day,
            items=[LineItem(asset_id=a, quantity=q) for a, q in (items or {1: 5}).items()],
            **kwargs,
        )

    return make
