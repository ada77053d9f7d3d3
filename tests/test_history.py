"""
Testes do histórico de domínios consultados
"""
import uuid
from datetime import datetime, timedelta, timezone
from mainalysis.models.domain_history import DomainHistoryItem
from mainalysis.services.history_service import add_history_item, get_history


def test_duplicate_within_window_is_skipped(db_session, test_account):
    first = add_history_item(db_session, test_account.id, "example.ai", "100")
    second = add_history_item(db_session, test_account.id, "example.ai", "100")

    assert first is not None
    assert second is None
    assert db_session.query(DomainHistoryItem).count() == 1


def test_other_domain_is_recorded(db_session, test_account):
    add_history_item(db_session, test_account.id, "example.ai", "100")
    add_history_item(db_session, test_account.id, "other.io", "0")

    assert db_session.query(DomainHistoryItem).count() == 2


def test_history_newest_first(db_session, test_account):
    now = datetime.now(timezone.utc)
    db_session.add_all([
        DomainHistoryItem(account_id=test_account.id, domain_name="old.ai", price="0",
                          analyzed_at=now - timedelta(days=2)),
        DomainHistoryItem(account_id=test_account.id, domain_name="new.ai", price="0",
                          analyzed_at=now),
        DomainHistoryItem(account_id=test_account.id, domain_name="mid.ai", price="0",
                          analyzed_at=now - timedelta(days=1)),
    ])
    db_session.commit()

    items = get_history(db_session, test_account.id, limit=2)

    assert [i.domain_name for i in items] == ["new.ai", "mid.ai"]


def test_history_endpoints(client, db_session, test_account):
    body = {"accountId": str(test_account.id), "domainName": "example.ai", "price": "5"}

    assert client.post("/api/v1/history", json=body).json() == {"recorded": True}
    assert client.post("/api/v1/history", json=body).json() == {"recorded": False}

    response = client.get(f"/api/v1/history/{test_account.id}")
    assert response.status_code == 200
    assert [i["domain_name"] for i in response.json()] == ["example.ai"]


def test_history_unknown_account(client, db_session):
    response = client.post(
        "/api/v1/history",
        json={"accountId": str(uuid.uuid4()), "domainName": "example.ai"},
    )

    assert response.status_code == 404
