"""
Testes do cliente GraphQL do registry (httpx.MockTransport)
"""
import asyncio
import json
import httpx
import pytest
from mainalysis.services.registry_client import RegistryClient, RegistryError, split_domain


def _client(handler):
    return RegistryClient(transport=httpx.MockTransport(handler))


def _run(coro):
    return asyncio.run(coro)


def test_split_domain():
    assert split_domain("example.ai") == {"name": "example", "extension": ".ai"}
    assert split_domain("my.domain.io") == {"name": "my", "extension": ".domain.io"}
    assert split_domain("plain") == {"name": "plain", "extension": ".com"}


def test_fetch_listings():
    seen = {}

    def handler(request):
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"data": {"listings": {
            "currentPage": 1, "hasNextPage": False, "hasPreviousPage": False,
            "items": [{"name": "example.ai", "price": "1000"}],
            "pageSize": 20, "totalPages": 1,
        }}})

    listings = _run(_client(handler).fetch_listings(take=20, skip=0, tlds=["ai"]))

    assert listings["items"][0]["name"] == "example.ai"
    assert seen["variables"] == {"take": 20, "skip": 0, "tlds": ["ai"]}


def test_graphql_errors_raise():
    def handler(request):
        return httpx.Response(200, json={"errors": [{"message": "Unauthorized"}]})

    with pytest.raises(RegistryError, match="Unauthorized"):
        _run(_client(handler).fetch_listings())


def test_http_error_raises():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(RegistryError):
        _run(_client(handler).fetch_fractional_tokens())


def test_check_domain_listed():
    def handler(request):
        variables = json.loads(request.content)["variables"]
        assert variables == {"sld": "example", "tlds": ["ai"]}
        return httpx.Response(200, json={"data": {"listings": {"items": [{"name": "example.ai"}]}}})

    assert _run(_client(handler).check_domain_listed("example", ".ai")) is True


def test_check_domain_listed_error_is_false():
    def handler(request):
        return httpx.Response(500)

    assert _run(_client(handler).check_domain_listed("example", ".ai")) is False


def test_fetch_wallet_domains_uses_caip10():
    seen = {}

    def handler(request):
        seen.update(json.loads(request.content)["variables"])
        return httpx.Response(200, json={"data": {"names": {"items": [{"name": "alpha.ai"}, {"name": "beta"}]}}})

    client = _client(handler)
    domains = _run(client.fetch_wallet_domains("0xabc"))

    assert seen["ownedBy"] == [f"eip155:{client.chain_id}:0xabc"]
    assert domains == [
        {"name": "alpha", "extension": ".ai"},
        {"name": "beta", "extension": ".com"},
    ]


def test_registry_router_maps_errors(client, fake_registry):
    fake_registry.fetch_listings.side_effect = RegistryError("GraphQL request failed")

    response = client.get("/api/v1/registry/listings")

    assert response.status_code == 502


def test_registry_router_listed(client, fake_registry):
    fake_registry.check_domain_listed.return_value = True

    response = client.get("/api/v1/registry/listed", params={"name": "example", "extension": ".ai"})

    assert response.json() == {"listed": True}
