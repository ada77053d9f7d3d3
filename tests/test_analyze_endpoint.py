"""
Testes do endpoint /analyze-domain
"""
import uuid
from datetime import datetime, timezone
from mainalysis.exceptions import ConfigurationError
from mainalysis.models.analyzed_domain import AnalysisClaim
from mainalysis.services import credit_service
from mainalysis.services.valuation_client import ValuationProviderError
from conftest import make_account


def _analyze(client, account_id, domain="Example.AI", **extra):
    return client.post(
        "/api/v1/analyze-domain",
        json={"domainName": domain, "accountId": str(account_id), **extra},
    )


def test_analyze_new_then_cached(client, db_session, test_account, fake_valuation):
    first = _analyze(client, test_account.id, source="new_analysis")
    second = _analyze(client, test_account.id, source="new_analysis")

    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert body["cached"] is False
    assert body["creditsCharged"] == 3
    assert body["data"]["marketScore"] == 7

    assert second.status_code == 200
    assert second.json()["cached"] is True
    assert second.json()["creditsCharged"] == 0

    # domínio normalizado para minúsculas
    assert fake_valuation.calls == [("example.ai", None)]

    db_session.expire_all()
    assert credit_service.get_balance(db_session, test_account.id).balance == 7


def test_analyze_passes_price(client, db_session, test_account, fake_valuation):
    response = _analyze(client, test_account.id, price=1500000000000000000, source="search_listed")

    assert response.status_code == 200
    assert response.json()["price"] == "1500000000000000000"
    assert response.json()["creditsCharged"] == 1
    assert fake_valuation.calls == [("example.ai", 1500000000000000000)]


def test_analyze_insufficient_credits(client, db_session, fake_valuation):
    account = make_account(db_session, wallet_address="0xbroke", balance=0)

    response = _analyze(client, account.id)

    assert response.status_code == 402
    assert "Insufficient credits" in response.json()["error"]
    assert fake_valuation.calls == []


def test_analyze_unknown_account(client, db_session):
    response = _analyze(client, uuid.uuid4())

    assert response.status_code == 404


def test_analyze_missing_fields(client, db_session):
    response = client.post("/api/v1/analyze-domain", json={"domainName": "example.ai"})

    assert response.status_code == 400
    assert "accountId" in response.json()["error"]


def test_analyze_provider_error(client, db_session, test_account, fake_valuation):
    fake_valuation.error = ValuationProviderError("Missing required fields in AI response: seoMetrics")

    response = _analyze(client, test_account.id)

    assert response.status_code == 500
    assert "seoMetrics" in response.json()["error"]
    db_session.expire_all()
    assert credit_service.get_balance(db_session, test_account.id).balance == 10


def test_analyze_provider_not_configured(client, db_session, test_account, fake_valuation):
    fake_valuation.error = ConfigurationError("Valuation provider not configured. Set LLM_API_KEY")

    response = _analyze(client, test_account.id)

    assert response.status_code == 500
    assert "LLM_API_KEY" in response.json()["error"]


def test_analyze_in_progress(client, db_session, test_account, fake_valuation):
    db_session.add(AnalysisClaim(
        account_id=test_account.id,
        domain_name="example.ai",
        created_at=datetime.now(timezone.utc),
    ))
    db_session.commit()

    response = _analyze(client, test_account.id)

    assert response.status_code == 409
    assert fake_valuation.calls == []
