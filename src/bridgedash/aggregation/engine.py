"""Fold CanonicalTransactions into BridgeStats - totals, per-chain summaries, daily series."""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Iterable, Sequence

from bridgedash.config.timeframes import DAY_MS
from bridgedash.models.stats import ALL_CHAINS, BridgeStats, ChainSummary, TimeSeriesPoint
from bridgedash.models.transaction import CanonicalTransaction
from bridgedash.normalize.tables import UNKNOWN


def day_start(ts_ms: int) -> int:
    """UTC midnight (ms) of the day containing ts_ms."""
    return (ts_ms // DAY_MS) * DAY_MS


def time_series(
    transactions: Iterable[CanonicalTransaction], chain: str = ALL_CHAINS
) -> list[TimeSeriesPoint]:
    """One point per non-empty (day, asset) group, tagged with chain. Sorted by day, then asset."""
    buckets: dict[tuple[int, str], float] = defaultdict(float)
    for tx in transactions:
        buckets[(day_start(tx.timestamp), tx.asset)] += tx.usd_value
    return [
        TimeSeriesPoint(timestamp=day, value=value, chain=chain, asset=asset)
        for (day, asset), value in sorted(buckets.items())
    ]


def chain_series(
    transactions: Iterable[CanonicalTransaction], chain: str
) -> list[TimeSeriesPoint]:
    """Daily series over the transactions touching chain (per-chain charts)."""
    return time_series((tx for tx in transactions if tx.touches(chain)), chain=chain)


def chain_names(transactions: Iterable[CanonicalTransaction]) -> set[str]:
    names: set[str] = set()
    for tx in transactions:
        names.add(tx.source_chain)
        names.add(tx.destination_chain)
    return names


def chain_summaries(transactions: Sequence[CanonicalTransaction]) -> list[ChainSummary]:
    """Per-chain count, value and assets. Sorted by total value desc, then name."""
    out = []
    for name in chain_names(transactions):
        touching = [tx for tx in transactions if tx.touches(name)]
        out.append(
            ChainSummary(
                chain_id=name,
                chain_name=name,
                total_transactions=len(touching),
                total_value=sum(tx.usd_value for tx in touching),
                active_assets=sorted({tx.asset for tx in touching}),
            )
        )
    out.sort(key=lambda c: (-c.total_value, c.chain_name))
    return out


def asset_totals(transactions: Iterable[CanonicalTransaction]) -> dict[str, float]:
    """USD value per asset, largest first."""
    totals: dict[str, float] = defaultdict(float)
    for tx in transactions:
        totals[tx.asset] += tx.usd_value
    return dict(sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])))


def placeholder_series(now_ms: int, days: int = 7, chain: str = ALL_CHAINS) -> list[TimeSeriesPoint]:
    """Zero-valued daily points so an empty window still renders a chart."""
    today = day_start(now_ms)
    return [
        TimeSeriesPoint(timestamp=today - i * DAY_MS, value=0.0, chain=chain, asset=UNKNOWN)
        for i in range(days - 1, -1, -1)
    ]


def compute_stats(
    transactions: Sequence[CanonicalTransaction],
    *,
    chain: str | None = None,
    label: str | None = None,
    now_ms: int | None = None,
) -> BridgeStats:
    """Pure fold. chain scopes the set to transactions touching that chain and tags the series.

    label tags the series without filtering (a chain-scoped query whose rows are already
    selected upstream); it defaults to chain, then "all".
    """
    txs = list(transactions)
    tag = label or chain or ALL_CHAINS
    if chain:
        txs = [tx for tx in txs if tx.touches(chain)]
    if not txs:
        now = now_ms if now_ms is not None else int(time.time() * 1000)
        return BridgeStats(time_series_data=placeholder_series(now, chain=tag))
    summaries = chain_summaries(txs)
    return BridgeStats(
        total_value_locked=sum(tx.usd_value for tx in txs),
        total_transactions=len(txs),
        unique_assets=len({tx.asset for tx in txs}),
        active_chains=len(summaries),
        time_series_data=time_series(txs, chain=tag),
        chain_stats=summaries,
    )
