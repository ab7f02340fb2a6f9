"""Fixtures for API route tests."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def seeded_api(api_client: AsyncClient, admin, auth_headers) -> AsyncClient:
    """Bases Alpha (1) and Bravo (2); assets Rifle (1) and Jeep (2)."""
    headers = auth_headers(admin)
    for body in (
        {"name": "Alpha", "district": "Pune", "state": "MH"},
        {"name": "Bravo", "district": "Leh", "state": "LA"},
    ):
        response = await api_client.post("/api/settings/bases/create", json=body, headers=headers)
        assert response.status_code == 201
    for body in (
        {"name": "Rifle", "category": "weapon"},
        {"name": "Jeep", "category": "vehicle"},
    ):
        response = await api_client.post("/api/settings/assets/create", json=body, headers=headers)
        assert response.status_code == 201
    return api_client


@pytest.fixture
def purchase_body():
    def make(quantity=100, asset=1, base=None, day="2025-01-01T09:00:00"):
        body = {
            "purchaseDate": day,
            "invoiceNumber": "INV-1",
            "items": [{"asset": asset, "quantity": quantity}],
        }
        if base is not None:
            body["base"] = base
        return body

    return make
