"""FastAPI endpoints and the explorer proxy."""

import httpx
import pytest
from fastapi.testclient import TestClient

from bridgedash.api.main import create_app
from bridgedash.config.settings import Settings
from bridgedash.ingestion.hyperlane.client import EXPLORER_MIN_TIMESTAMP_MS
from bridgedash.pipeline import BridgeDataService

from conftest import NOW_MS, StaticSource, make_message


def _client(handler=None, messages=None):
    settings = Settings.from_dict({"hyperlane": {"api_base": "https://explorer.test/api"}})
    source = StaticSource(messages if messages is not None else [make_message("a", body="2 WETH")])
    service = BridgeDataService([source], clock=lambda: NOW_MS)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler or (lambda r: httpx.Response(500))))
    app = create_app(settings=settings, service=service, http_client=http_client)
    return TestClient(app), source


def test_health():
    client, _ = _client()
    with client:
        assert client.get("/health").json() == {"status": "ok"}


def test_transactions_are_camel_case():
    client, source = _client()
    with client:
        r = client.get("/transactions", params={"timeframe": "7d", "chain": "all"})
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    tx = data["transactions"][0]
    assert tx["sourceChain"] == "Ethereum"
    assert tx["destinationChain"] == "Hyperliquid"
    assert tx["usdValue"] == 3000.0
    assert tx["txHash"] == "0x" + "ab" * 32
    assert data["status"]["usedFallback"] is False
    assert source.calls[0][1] is None


def test_default_chain_comes_from_settings():
    client, source = _client()
    with client:
        r = client.get("/transactions")
    assert r.json()["chain"] == "Hyperliquid"
    assert source.calls[0][1] == "hyperliquid"


def test_stats_endpoint():
    client, _ = _client()
    with client:
        data = client.get("/stats", params={"timeframe": "24h"}).json()
    assert data["stats"]["totalTransactions"] == 1
    assert data["stats"]["totalValueLocked"] == 3000.0
    assert data["stats"]["chainStats"][0]["chainId"] == data["stats"]["chainStats"][0]["chainName"]


def test_stats_falls_back_when_nothing_fetched():
    client, _ = _client(messages=[])
    with client:
        data = client.get("/stats").json()
    assert data["status"]["usedFallback"] is True
    assert data["stats"]["totalTransactions"] > 0


@pytest.mark.parametrize("path", ["/transactions", "/stats", "/chains/solana/series"])
def test_unknown_timeframe_is_400(path):
    client, _ = _client()
    with client:
        r = client.get(path, params={"timeframe": "fortnight"})
    assert r.status_code == 400
    assert r.json()["code"] == "unknown_timeframe"


def test_chain_series():
    client, _ = _client(messages=[make_message("s", origin="solana", body="SOL")])
    with client:
        data = client.get("/chains/solana/series").json()
    assert data["chain"] == "Solana"
    assert [(p["asset"], p["chain"]) for p in data["points"]] == [("SOL", "Solana")]


def test_discovered_endpoints():
    client, _ = _client(messages=[make_message("z", origin="zora", body="BONK")])
    with client:
        client.get("/transactions")
        assets = client.get("/discovered/assets").json()
        chains = client.get("/discovered/chains").json()
    assert "BONK" in assets["items"]
    assert assets["total"] == len(assets["items"])
    assert "Zora" in chains["items"]


def test_proxy_clamps_and_raises_small_limit():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"messages": [make_message("1")]})

    client, _ = _client(handler)
    with client:
        r = client.get("/hyperlane/messages", params={"fromTimestamp": "0", "limit": "10", "status": "delivered"})
    assert r.status_code == 200
    assert "x-mock-data" not in r.headers
    assert r.headers["cache-control"] == "public, s-maxage=300, stale-while-revalidate=600"
    assert r.json()["messages"][0]["id"] == "1"
    params = seen[0].url.params
    assert seen[0].url.path == "/api/messages"
    assert int(params["fromTimestamp"]) > EXPLORER_MIN_TIMESTAMP_MS
    assert params["limit"] == "250"
    assert params["status"] == "delivered"


def test_proxy_serves_mock_on_upstream_error():
    client, _ = _client(lambda r: httpx.Response(500))
    with client:
        r = client.get("/hyperlane/messages")
    assert r.status_code == 200
    assert r.headers["x-mock-data"] == "true"
    assert r.headers["x-error"] == "upstream status 500"
    assert len(r.json()["messages"]) == 30


def test_proxy_serves_mock_when_empty():
    client, _ = _client(lambda r: httpx.Response(200, json={"messages": []}))
    with client:
        r = client.get("/hyperlane/messages", params={"limit": "500"})
    assert r.headers["x-mock-data"] == "true"
    assert "x-error" not in r.headers
    assert r.json()["messages"]
