"""Fetch orchestration - ingestion -> normalization -> aggregation with guaranteed non-empty output."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
import structlog

from bridgedash.aggregation.engine import chain_series, compute_stats, placeholder_series
from bridgedash.config.settings import Settings
from bridgedash.config.timeframes import window_start
from bridgedash.fallback import synthetic_transactions
from bridgedash.ingestion.base import BridgeSource, SourceResult
from bridgedash.ingestion.debridge.client import DeBridgeClient
from bridgedash.ingestion.hyperlane.client import HyperlaneExplorerClient
from bridgedash.ingestion.retry import RetryPolicy
from bridgedash.models import BridgeStats, CanonicalTransaction, FetchStatus, TimeSeriesPoint
from bridgedash.normalize.chains import canonical_chain_name
from bridgedash.normalize.engine import normalize_messages
from bridgedash.normalize.registry import DiscoveryRegistry
from bridgedash.normalize.tables import DEFAULT_TABLES, AssetTables

log = structlog.get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class DashboardSnapshot:
    """One read of the dashboard: transactions, the stats over them, and how they were obtained."""

    timeframe: str
    chain: str | None
    transactions: list[CanonicalTransaction]
    stats: BridgeStats
    status: FetchStatus


class BridgeDataService:
    """Runs all enabled bridge sources for a timeframe and folds the result into stats.

    Never raises for upstream trouble: if nothing usable comes back, a synthetic
    dataset is served instead and the failure is reported through FetchStatus.
    """

    def __init__(
        self,
        sources: list[BridgeSource],
        *,
        registry: DiscoveryRegistry | None = None,
        tables: AssetTables = DEFAULT_TABLES,
        fallback_count: int = 30,
        fallback_seed: int = 42,
        cache_ttl_sec: float = 0.0,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.sources = sources
        self.registry = registry or DiscoveryRegistry()
        self.tables = tables
        self.fallback_count = fallback_count
        self.fallback_seed = fallback_seed
        self.cache_ttl_sec = cache_ttl_sec
        self._clock = clock
        self._cache: dict[tuple[str, str | None], tuple[int, DashboardSnapshot]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        client: httpx.AsyncClient | None = None,
        registry: DiscoveryRegistry | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> BridgeDataService:
        retry = RetryPolicy(
            max_attempts=settings.retry_max_attempts,
            base_delay_sec=settings.retry_base_delay_sec,
            max_delay_sec=settings.retry_max_delay_sec,
            sleep=sleep,
        )
        sources: list[BridgeSource] = [
            HyperlaneExplorerClient(
                settings.hyperlane_api_base,
                page_size=settings.page_size,
                page_delay_sec=settings.page_delay_sec,
                timeout_sec=settings.request_timeout_sec,
                status=settings.message_status,
                user_agent=settings.user_agent,
                retry=retry,
                client=client,
                sleep=sleep,
            )
        ]
        if settings.debridge_api_base:
            sources.append(
                DeBridgeClient(
                    settings.debridge_api_base,
                    timeout_sec=settings.request_timeout_sec,
                    retry=retry,
                    client=client,
                )
            )
        return cls(
            sources,
            registry=registry,
            fallback_count=settings.fallback_count,
            fallback_seed=settings.fallback_seed,
            cache_ttl_sec=settings.cache_ttl_sec,
        )

    async def _fetch_source(self, source: BridgeSource, from_timestamp: int, chain: str | None) -> SourceResult:
        try:
            return await source.fetch(from_timestamp, chain)
        except Exception as e:
            log.error("source_failed", source=source.name, error=str(e))
            return SourceResult(source=source.name, failures=[f"{source.name} failed: {e}"])

    def _collect(self, results: list[SourceResult], now_ms: int) -> list[CanonicalTransaction]:
        txs: list[CanonicalTransaction] = []
        for result in results:
            if result.messages:
                txs.extend(
                    normalize_messages(
                        result.messages,
                        fetched_at_ms=now_ms,
                        tables=self.tables,
                        registry=self.registry,
                        bridge_protocol=result.source,
                    )
                )
            for tx in result.transactions:
                self.registry.record(tx.asset, tx.source_chain, tx.destination_chain)
                txs.append(tx)
        return txs

    async def load(self, timeframe: str, chain: str | None = None) -> DashboardSnapshot:
        """Fetch, normalize and aggregate. Raises only UnknownTimeframeError, before any I/O."""
        now = self._clock()
        from_timestamp = window_start(timeframe, now)
        chain_name = canonical_chain_name(chain, self.tables.chains) if chain else None

        key = (timeframe, chain_name)
        cached = self._cache.get(key)
        if cached is not None and now < cached[0]:
            return cached[1]

        results = await asyncio.gather(
            *(self._fetch_source(s, from_timestamp, chain) for s in self.sources)
        )
        failures = [f for r in results for f in r.failures]
        txs = self._collect(list(results), now)

        used_fallback = False
        error = "; ".join(failures) or None
        if not txs:
            used_fallback = True
            error = "Live bridge data unavailable, showing synthetic data" + (f": {error}" if error else "")
            log.warning("using_fallback_data", timeframe=timeframe, chain=chain_name, failures=len(failures))
            txs = synthetic_transactions(
                now,
                count=self.fallback_count,
                seed=self.fallback_seed,
                chain=chain_name,
                tables=self.tables,
            )
        txs.sort(key=lambda t: t.timestamp, reverse=True)

        snapshot = DashboardSnapshot(
            timeframe=timeframe,
            chain=chain_name,
            transactions=txs,
            stats=compute_stats(txs, label=chain_name, now_ms=now),
            status=FetchStatus(
                ok=not failures,
                used_fallback=used_fallback,
                error=error,
                failures=failures,
                fetched_at=now,
            ),
        )
        log.info(
            "dashboard_loaded",
            timeframe=timeframe,
            chain=chain_name,
            transactions=len(txs),
            fallback=used_fallback,
        )
        if self.cache_ttl_sec > 0:
            self._cache[key] = (now + int(self.cache_ttl_sec * 1000), snapshot)
        return snapshot

    async def transactions(
        self, timeframe: str, chain: str | None = None, limit: int | None = None
    ) -> tuple[list[CanonicalTransaction], FetchStatus]:
        snap = await self.load(timeframe, chain)
        txs = snap.transactions[:limit] if limit else snap.transactions
        return txs, snap.status

    async def stats(self, timeframe: str, chain: str | None = None) -> tuple[BridgeStats, FetchStatus]:
        snap = await self.load(timeframe, chain)
        return snap.stats, snap.status

    async def chain_series(self, timeframe: str, chain: str) -> tuple[list[TimeSeriesPoint], FetchStatus]:
        """Daily per-asset series for one chain (per-chain charts). Never empty."""
        snap = await self.load(timeframe, chain)
        name = snap.chain or chain
        points = chain_series(snap.transactions, name)
        if not points:
            log.info("chain_series_empty", chain=name, transactions=len(snap.transactions))
            points = placeholder_series(snap.status.fetched_at or self._clock(), chain=name)
        return points, snap.status

    def discovered_assets(self) -> list[str]:
        return self.registry.assets.snapshot()

    def discovered_chains(self) -> list[str]:
        return self.registry.chains.snapshot()

    async def aclose(self) -> None:
        for source in self.sources:
            await source.aclose()

    async def __aenter__(self) -> BridgeDataService:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
