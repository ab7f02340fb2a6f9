"""Tests for the error body and request middleware."""

import pytest


@pytest.mark.asyncio
async def test_request_validation_body(seeded_api, logistics, auth_headers):
    response = await seeded_api.post(
        "/api/purchase/create",
        json={"invoiceNumber": "INV-1", "items": []},
        headers=auth_headers(logistics),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["message"] == "Request validation failed"
    assert "items" in body["detail"]
    assert body["path"] == "/api/purchase/create"


@pytest.mark.asyncio
async def test_domain_error_message_is_shown_as_is(seeded_api, commander, auth_headers):
    response = await seeded_api.post(
        "/api/purchase/create",
        json={"invoiceNumber": "INV-1", "items": [{"asset": 1, "quantity": 1}]},
        headers=auth_headers(commander),
    )

    assert response.status_code == 403
    body = response.json()
    assert body["message"] == "Role 'base_commander' may not record purchase"
    assert body["hint"]


@pytest.mark.asyncio
async def test_unknown_role_header(api_client):
    response = await api_client.get(
        "/api/stocks/my", headers={"X-User-Name": "x", "X-User-Role": "general"}
    )

    assert response.status_code == 400
    assert "unknown role" in response.json()["message"]


@pytest.mark.asyncio
async def test_non_numeric_base_header(api_client):
    response = await api_client.get(
        "/api/stocks/my", headers={"X-User-Role": "user", "X-User-Base": "alpha"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_request_id_header(api_client):
    response = await api_client.get("/health")

    assert len(response.headers["X-Request-ID"]) == 8


@pytest.mark.asyncio
async def test_locked_database_is_500_with_code(api_client, monkeypatch):
    from armory.core.exceptions import DatabaseError
    from armory.infrastructure.storage.sqlite import SQLiteReferenceStore

    async def locked(self):
        raise DatabaseError("read", "database is locked")

    monkeypatch.setattr(SQLiteReferenceStore, "list_assets", locked)
    response = await api_client.get(
        "/api/settings/assets/get", headers={"X-User-Name": "root", "X-User-Role": "admin"}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "DATABASE_ERROR"
    assert body["message"] == "Database error during read: database is locked"
