"""Aggregation: totals, per-chain summaries, daily per-asset series."""

import pytest

from bridgedash.aggregation import asset_totals, chain_series, compute_stats, day_start, placeholder_series
from bridgedash.config.timeframes import DAY_MS
from bridgedash.models import CanonicalTransaction

from conftest import DAY1, DAY2, NOW_MS


def _tx(tx_id, ts, asset, value, src="Solana", dst="Hyperliquid"):
    return CanonicalTransaction(
        id=tx_id,
        timestamp=ts,
        source_chain=src,
        destination_chain=dst,
        asset=asset,
        amount="1",
        usd_value=value,
    )


@pytest.fixture
def two_days():
    return [
        _tx("a", DAY1 + 3_600_000, "SOL", 500.0),
        _tx("b", DAY1 + 7_200_000, "SOL", 300.0),
        _tx("c", DAY2 + 60_000, "USDC", 100.0, src="Ethereum"),
    ]


def test_daily_asset_buckets(two_days):
    stats = compute_stats(two_days)
    series = [(p.timestamp, p.asset, p.value) for p in stats.time_series_data]
    assert series == [(DAY1, "SOL", 800.0), (DAY2, "USDC", 100.0)]
    assert all(p.chain == "all" for p in stats.time_series_data)
    assert stats.total_value_locked == 900.0
    assert stats.total_transactions == 3
    assert stats.unique_assets == 2


def test_series_conserves_value(two_days):
    stats = compute_stats(two_days)
    assert sum(p.value for p in stats.time_series_data) == pytest.approx(stats.total_value_locked)


def test_chain_summaries(two_days):
    stats = compute_stats(two_days)
    assert stats.active_chains == 3
    assert len(stats.chain_stats) == stats.active_chains
    by_name = {c.chain_name: c for c in stats.chain_stats}
    assert by_name["Hyperliquid"].total_transactions == 3
    assert by_name["Hyperliquid"].total_value == 900.0
    assert by_name["Hyperliquid"].active_assets == ["SOL", "USDC"]
    assert by_name["Solana"].total_value == 800.0
    assert by_name["Ethereum"].active_assets == ["USDC"]
    assert by_name["Ethereum"].chain_id == "Ethereum"
    assert [c.chain_name for c in stats.chain_stats] == ["Hyperliquid", "Solana", "Ethereum"]


def test_scoped_to_chain(two_days):
    stats = compute_stats(two_days, chain="Ethereum")
    assert stats.total_transactions == 1
    assert stats.total_value_locked == 100.0
    assert {p.chain for p in stats.time_series_data} == {"Ethereum"}


def test_empty_input_gives_placeholder_series():
    stats = compute_stats([], now_ms=NOW_MS)
    assert stats.total_value_locked == 0
    assert stats.total_transactions == 0
    assert stats.unique_assets == 0
    assert stats.active_chains == 0
    assert stats.chain_stats == []
    points = stats.time_series_data
    assert len(points) == 7
    assert all(p.value == 0 and p.asset == "Unknown" for p in points)
    assert points[-1].timestamp == day_start(NOW_MS)
    assert points[0].timestamp == day_start(NOW_MS) - 6 * DAY_MS


def test_placeholder_series_tagged_with_chain():
    points = placeholder_series(NOW_MS, days=3, chain="Solana")
    assert [p.chain for p in points] == ["Solana"] * 3


def test_chain_series_filters_and_tags(two_days):
    points = chain_series(two_days, "Ethereum")
    assert [(p.timestamp, p.asset, p.value, p.chain) for p in points] == [(DAY2, "USDC", 100.0, "Ethereum")]
    assert chain_series(two_days, "Base") == []


def test_asset_totals_largest_first(two_days):
    assert asset_totals(two_days) == {"SOL": 800.0, "USDC": 100.0}
    assert list(asset_totals(two_days)) == ["SOL", "USDC"]


def test_camel_case_serialization(two_days):
    data = compute_stats(two_days).model_dump(by_alias=True)
    assert set(data) == {
        "totalValueLocked",
        "totalTransactions",
        "uniqueAssets",
        "activeChains",
        "timeSeriesData",
        "chainStats",
    }
    assert "chainId" in data["chainStats"][0]
    assert "activeAssets" in data["chainStats"][0]


def test_day_start():
    assert day_start(DAY1) == DAY1
    assert day_start(DAY1 + DAY_MS - 1) == DAY1


def test_label_tags_without_filtering(two_days):
    stats = compute_stats(two_days, label="Hyperliquid")
    assert stats.total_transactions == 3
    assert {p.chain for p in stats.time_series_data} == {"Hyperliquid"}
