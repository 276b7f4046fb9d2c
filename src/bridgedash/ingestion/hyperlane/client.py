"""Hyperlane Explorer API client - paginated message fetch, directional union, dedup."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

from bridgedash.config.timeframes import DAY_MS
from bridgedash.ingestion.base import BridgeSource, SourceResult
from bridgedash.ingestion.retry import RetryPolicy
from bridgedash.models import RawMessage, parse_raw_message
from bridgedash.normalize.chains import chain_query_id
from bridgedash.normalize.tables import CHAIN_NAMES

log = structlog.get_logger(__name__)

EXPLORER_API_BASE = "https://explorer.hyperlane.xyz/api"
# Nothing on the explorer predates this (2022-01-01 UTC)
EXPLORER_MIN_TIMESTAMP_MS = 1_640_995_200_000


def _now_ms() -> int:
    return int(time.time() * 1000)


def clamp_from_timestamp(from_timestamp: int, now_ms: int) -> int:
    """Future or pre-explorer timestamps are replaced with now - 24h."""
    if from_timestamp > now_ms or from_timestamp < EXPLORER_MIN_TIMESTAMP_MS:
        corrected = now_ms - DAY_MS
        log.warning("from_timestamp_clamped", requested=from_timestamp, corrected=corrected)
        return corrected
    return from_timestamp


def extract_message_list(data: Any) -> list[Any] | None:
    """The `messages` array of an explorer payload, or None if the payload is malformed."""
    if not isinstance(data, dict):
        return None
    messages = data.get("messages")
    if not isinstance(messages, list):
        return None
    return messages


class HyperlaneExplorerClient(BridgeSource):
    """Reads delivered Hyperlane messages for a window, optionally scoped to one chain."""

    name = "hyperlane"

    def __init__(
        self,
        api_base: str = EXPLORER_API_BASE,
        *,
        page_size: int = 1000,
        page_delay_sec: float = 0.2,
        timeout_sec: float = 15.0,
        status: str = "delivered",
        user_agent: str = "Hyperliquid-Bridge-Dashboard/1.0",
        retry: RetryPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        chain_table: dict[str, str] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.messages_url = api_base.rstrip("/") + "/messages"
        self.page_size = page_size
        self.page_delay_sec = page_delay_sec
        self.status = status
        self.retry = retry or RetryPolicy()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout_sec,
            headers={"Accept": "application/json", "User-Agent": user_agent},
        )
        self._chains = CHAIN_NAMES if chain_table is None else chain_table
        self._sleep = sleep
        self._clock = clock

    async def _get_page(self, params: dict[str, Any]) -> list[Any] | None:
        async def call() -> Any:
            resp = await self._client.get(self.messages_url, params=params)
            resp.raise_for_status()
            return resp.json()

        data = await self.retry.run(call, name="hyperlane_messages")
        return extract_message_list(data)

    async def _paginate(
        self, label: str, base_params: dict[str, Any]
    ) -> tuple[dict[str, RawMessage], str | None]:
        """Walk pages until a short page. Errors end this sub-query; what was read is kept."""
        collected: dict[str, RawMessage] = {}
        failure: str | None = None
        offset = 0
        pages = 0
        while True:
            params = {**base_params, "limit": self.page_size, "offset": offset}
            try:
                page = await self._get_page(params)
            except Exception as e:
                failure = f"{label} query failed at offset {offset}: {e}"
                log.warning("page_failed", query=label, offset=offset, error=str(e))
                break
            if page is None:
                failure = f"{label} query returned a malformed payload at offset {offset}"
                log.warning("page_malformed", query=label, offset=offset)
                break
            pages += 1
            new_ids = 0
            for item in page:
                msg = parse_raw_message(item)
                if msg is None:
                    continue
                if msg.id not in collected:
                    new_ids += 1
                collected[msg.id] = msg
            if len(page) < self.page_size:
                break
            if new_ids == 0:
                # Server ignoring offset; another page would repeat this one
                log.warning("pagination_stalled", query=label, offset=offset)
                break
            offset += self.page_size
            await self._sleep(self.page_delay_sec)
        log.debug("query_done", query=label, pages=pages, messages=len(collected))
        return collected, failure

    async def fetch(self, from_timestamp: int, chain: str | None = None) -> SourceResult:
        """Messages since from_timestamp. A chain filter queries inbound and outbound and unions them."""
        start = clamp_from_timestamp(int(from_timestamp), self._clock())
        base = {
            "fromTimestamp": start,
            "status": self.status,
            "orderBy": "timestamp",
            "order": "desc",
        }
        if chain:
            slug = chain_query_id(chain, self._chains)
            queries = [
                ("inbound", {**base, "destination": slug}),
                ("outbound", {**base, "origin": slug}),
            ]
        else:
            queries = [("all", base)]
        results = await asyncio.gather(*(self._paginate(label, params) for label, params in queries))
        # Merge only after every query settled; later queries win on duplicate ids
        merged: dict[str, RawMessage] = {}
        failures: list[str] = []
        for collected, failure in results:
            merged.update(collected)
            if failure:
                failures.append(failure)
        log.info(
            "hyperlane_fetched",
            chain=chain,
            from_timestamp=start,
            messages=len(merged),
            failures=len(failures),
        )
        return SourceResult(source=self.name, messages=list(merged.values()), failures=failures)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
