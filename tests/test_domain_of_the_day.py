"""
Testes do CRUD de domínio do dia (token de desenvolvimento "test")
"""
from unittest.mock import patch
import pytest
from mainalysis.config import settings

AUTH = {"Authorization": "Bearer test"}


@pytest.fixture(autouse=True)
def dev_mode():
    with patch.object(settings, "DEV_MODE", True):
        yield


def _create(client, **fields):
    body = {"domain_name": "example.ai", "featured_date": "2025-09-20", "valuation": 12.5, "tags": ["ai"]}
    body.update(fields)
    return client.post("/api/v1/domain-of-the-day", json=body, headers=AUTH)


def test_requires_auth(client, db_session):
    response = client.get("/api/v1/domain-of-the-day")

    assert response.status_code == 401


def test_invalid_token(client, db_session):
    with patch.object(settings, "SUPABASE_JWT_SECRET", "secret"):
        response = client.get("/api/v1/domain-of-the-day", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401


def test_create_and_get(client, db_session):
    created = _create(client)

    assert created.status_code == 201
    data = created.json()["data"]
    assert data["domain_name"] == "example.ai"
    assert data["created_by"] == "00000000-0000-0000-0000-000000000001"

    response = client.get("/api/v1/domain-of-the-day", params={"date": "2025-09-20"}, headers=AUTH)
    assert response.json()["data"]["id"] == data["id"]


def test_latest_when_no_date(client, db_session):
    _create(client, domain_name="older.ai", featured_date="2025-09-01")
    _create(client, domain_name="newer.ai", featured_date="2025-09-15")

    response = client.get("/api/v1/domain-of-the-day", headers=AUTH)

    assert response.json()["data"]["domain_name"] == "newer.ai"


def test_get_missing_date_returns_null(client, db_session):
    response = client.get("/api/v1/domain-of-the-day", params={"date": "2030-01-01"}, headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {"data": None}


def test_create_requires_fields(client, db_session):
    response = client.post("/api/v1/domain-of-the-day", json={"description": "x"}, headers=AUTH)

    assert response.status_code == 400


def test_update_and_delete(client, db_session):
    entry_id = _create(client).json()["data"]["id"]

    updated = client.put(
        "/api/v1/domain-of-the-day",
        params={"id": entry_id},
        json={"market_score": 9},
        headers=AUTH,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["market_score"] == 9
    assert updated.json()["data"]["domain_name"] == "example.ai"

    deleted = client.delete("/api/v1/domain-of-the-day", params={"id": entry_id}, headers=AUTH)
    assert deleted.status_code == 200

    again = client.delete("/api/v1/domain-of-the-day", params={"id": entry_id}, headers=AUTH)
    assert again.status_code == 404


def test_update_requires_id(client, db_session):
    response = client.put("/api/v1/domain-of-the-day", json={"market_score": 9}, headers=AUTH)

    assert response.status_code == 400
