"""Normalization: RawMessage -> CanonicalTransaction."""

import pytest

from bridgedash.models import RawMessage, parse_raw_message
from bridgedash.normalize import (
    DiscoveredSet,
    DiscoveryRegistry,
    canonical_chain_name,
    chain_query_id,
    normalize_message,
    normalize_messages,
)

from conftest import NOW_MS, make_message

WETH_BODY = (
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2 "
    "0x0000000000000000000000000000000000000000000000004563918244f40000"
)


def test_weth_address_and_hex_amount():
    msg = RawMessage.model_validate(
        make_message("m1", origin="ethereum", destination="hyperliquid", body=WETH_BODY, timestamp=1_700_000_000_000)
    )
    tx = normalize_message(msg, fetched_at_ms=NOW_MS)
    assert tx.asset == "WETH"
    assert tx.amount == "5"
    assert tx.usd_value == 15000.0
    assert tx.source_chain == "Ethereum"
    assert tx.destination_chain == "Hyperliquid"
    assert tx.timestamp == 1_700_000_000_000
    assert tx.tx_hash == "0x" + "ab" * 32


def test_empty_body_uses_route_heuristic():
    msg = RawMessage(id="m2", origin="solana", destination="hyperliquid", body="")
    tx = normalize_message(msg, fetched_at_ms=NOW_MS)
    assert (tx.asset, tx.amount, tx.usd_value) == ("USDC", "1000", 1000.0)


def test_missing_timestamp_defaults_to_fetch_time():
    tx = normalize_message(RawMessage(id="m3", origin="1", destination="999"), fetched_at_ms=NOW_MS)
    assert tx.timestamp == NOW_MS
    assert tx.status == "unknown"


def test_normalization_is_idempotent():
    msg = RawMessage.model_validate(make_message("m4", body="moving 3 SOL"))
    registry = DiscoveryRegistry()
    a = normalize_message(msg, fetched_at_ms=NOW_MS, registry=registry)
    b = normalize_message(msg, fetched_at_ms=NOW_MS, registry=registry)
    assert a == b
    assert a.model_dump() == b.model_dump()


def test_unknown_asset_when_no_signal():
    msg = RawMessage(id="m5", origin="polygon", destination="base", body="opaque payload")
    tx = normalize_message(msg, fetched_at_ms=NOW_MS)
    assert (tx.asset, tx.amount, tx.usd_value) == ("Unknown", "1", 1.0)


def test_inference_error_degrades_to_unknown(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("bad body")

    monkeypatch.setattr("bridgedash.normalize.engine.extract_candidates", boom)
    tx = normalize_message(RawMessage.model_validate(make_message("m6", body="USDC")), fetched_at_ms=NOW_MS)
    assert tx.asset == "Unknown"
    assert tx.amount == "1"
    assert tx.id == "m6"


def test_usd_value_matches_amount_times_price():
    txs = normalize_messages(
        [make_message("a", body="12 WETH"), make_message("b", body="3 WBTC"), make_message("c", body="x PURR")],
        fetched_at_ms=NOW_MS,
    )
    for tx in txs:
        assert tx.asset
    prices = {"WETH": 3000.0, "WBTC": 60000.0}
    by_id = {tx.id: tx for tx in txs}
    assert by_id["a"].usd_value == pytest.approx(float(by_id["a"].amount) * prices["WETH"])
    assert by_id["b"].usd_value == pytest.approx(float(by_id["b"].amount) * prices["WBTC"])


def test_non_objects_dropped():
    items = [None, 42, "not a message", ["list"], {"origin": "ethereum"}, make_message("ok")]
    txs = normalize_messages(items, fetched_at_ms=NOW_MS)
    assert [tx.id for tx in txs] == ["ok"]


def test_registry_records_assets_and_chains():
    registry = DiscoveryRegistry(seed_assets=["USDC"], seed_chains=[])
    normalize_messages(
        [make_message("a", origin="zora", destination="hyperliquid", body="bridging 3 BONK")],
        fetched_at_ms=NOW_MS,
        registry=registry,
    )
    assert registry.assets.snapshot() == ["BONK", "USDC"]
    assert registry.chains.snapshot() == ["Hyperliquid", "Zora"]


def test_discovered_set_is_append_only():
    s = DiscoveredSet(["b"])
    assert s.add("a") is True
    assert s.add("a") is False
    assert s.add("") is False
    assert s.add("Unknown") is False
    assert s.snapshot() == ["a", "b"]
    assert "a" in s and len(s) == 2


def test_parse_raw_message_variants():
    assert parse_raw_message("x") is None
    assert parse_raw_message({"id": ""}) is None
    msg = parse_raw_message(
        {"id": 7, "origin": 1, "destination": {"name": "solana"}, "timestamp": "2024-01-01T00:00:00Z",
         "originTransactionHash": "0xabc"}
    )
    assert msg.id == "7"
    assert msg.origin == "1"
    assert msg.destination == "solana"
    assert msg.timestamp == 1_704_067_200_000
    assert msg.transaction_hash == "0xabc"
    assert parse_raw_message({"id": "t", "timestamp": "not a date"}).timestamp is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", "Ethereum"),
        ("ethereum", "Ethereum"),
        ("42161", "Arbitrum"),
        ("1399811149", "Solana"),
        ("Hyperliquid", "Hyperliquid"),
        ("mantle", "Mantle"),
        ("zk-sync_era", "Zk Sync Era"),
        ("", "Unknown"),
        (None, "Unknown"),
    ],
)
def test_canonical_chain_name(raw, expected):
    assert canonical_chain_name(raw) == expected


def test_chain_query_id():
    assert chain_query_id("Hyperliquid") == "hyperliquid"
    assert chain_query_id("999") == "hyperliquid"
    assert chain_query_id("BNB Chain") == "bsc"
    assert chain_query_id("Zora") == "zora"


@pytest.mark.parametrize("ts", [float("inf"), float("-inf"), float("nan"), "1e400", "inf"])
def test_non_finite_timestamp_is_treated_as_missing(ts):
    msg = parse_raw_message(make_message("x", timestamp=ts))
    assert msg is not None
    assert msg.timestamp is None


def test_non_finite_timestamp_does_not_break_batch():
    txs = normalize_messages(
        [make_message("ok"), make_message("inf", timestamp=float("inf"))],
        fetched_at_ms=NOW_MS,
    )
    assert [tx.id for tx in txs] == ["ok", "inf"]
    assert txs[1].timestamp == NOW_MS


def test_naive_iso_timestamp_is_utc():
    msg = parse_raw_message({"id": "n", "timestamp": "2024-01-01T00:00:00"})
    assert msg.timestamp == 1_704_067_200_000
