"""
Fixtures compartilhadas: banco SQLite local, contas de teste e TestClient
com os clientes externos substituídos.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_mainalysis.db")
os.environ.setdefault("DEV_MODE", "true")
os.environ.setdefault("DEBUG", "false")

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from mainalysis.database import SessionLocal, Base, engine
from mainalysis.main import app
from mainalysis.models.account import Account
from mainalysis.models.credit import CreditBalance
from mainalysis.services.paypal_client import get_paypal_client
from mainalysis.services.registry_client import get_registry_client
from mainalysis.services.valuation_client import get_valuation_client

SAMPLE_ANALYSIS = {
    "valueHistory": [{"month": "Mar", "value": 1200}, {"month": "Apr", "value": 1350}],
    "trafficData": [{"month": "Mar", "visits": 300}, {"month": "Apr", "visits": 410}],
    "seoMetrics": [{"label": "Domain Authority", "score": 42, "max": 100}],
    "keywordData": [{"keyword": "crypto", "volume": 22000, "difficulty": 70}],
    "marketScore": 7,
    "estimatedGrowth": "+12%",
    "searchVolume": "12.5K",
    "summary": "Short and brandable.",
}


class FakeValuationClient:
    """Substitui o LLM: devolve uma análise fixa e conta as chamadas."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else dict(SAMPLE_ANALYSIS)
        self.error = error
        self.calls = []

    def analyze(self, domain_name, price_wei=None):
        self.calls.append((domain_name, price_wei))
        if self.error:
            raise self.error
        return dict(self.result)


@pytest.fixture(scope="function")
def db_session():
    """Cria uma sessão de banco de dados para testes"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


def make_account(db, wallet_address="0xabc0000000000000000000000000000000000001", balance=0):
    account = Account(wallet_address=wallet_address, display_name="", email="", avatar_url="")
    db.add(account)
    db.flush()
    db.add(CreditBalance(account_id=account.id, balance=balance, total_purchased=balance, total_used=0))
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture
def test_account(db_session):
    """Conta com 10 créditos"""
    return make_account(db_session, balance=10)


@pytest.fixture
def fake_valuation():
    return FakeValuationClient()


@pytest.fixture
def fake_paypal():
    return MagicMock()


@pytest.fixture
def fake_registry():
    return AsyncMock()


@pytest.fixture
def client(db_session, fake_valuation, fake_paypal, fake_registry):
    app.dependency_overrides[get_valuation_client] = lambda: fake_valuation
    app.dependency_overrides[get_paypal_client] = lambda: fake_paypal
    app.dependency_overrides[get_registry_client] = lambda: fake_registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
