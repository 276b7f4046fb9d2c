"""deBridge transfers API client. Rows arrive already shaped as transfers."""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from bridgedash.ingestion.base import BridgeSource, SourceResult
from bridgedash.ingestion.retry import RetryPolicy
from bridgedash.models import CanonicalTransaction
from bridgedash.normalize.chains import canonical_chain_name
from bridgedash.normalize.engine import usd_value
from bridgedash.normalize.tables import DEFAULT_TABLES, UNKNOWN, AssetTables

log = structlog.get_logger(__name__)


def parse_transfer(raw: Any, tables: AssetTables = DEFAULT_TABLES) -> CanonicalTransaction | None:
    """Validate one transfer row; chain names and USD value are recomputed locally."""
    if not isinstance(raw, dict):
        return None
    row = dict(raw)
    row.setdefault("timestamp", int(time.time() * 1000))
    row["asset"] = row.get("asset") or UNKNOWN
    row["amount"] = str(row.get("amount") or "1")
    try:
        tx = CanonicalTransaction.model_validate(row)
        value = usd_value(tx.amount, tx.asset, tables)
    except (ValidationError, ValueError) as e:
        log.warning("skip_transfer", transfer_id=raw.get("id"), error=str(e))
        return None
    return tx.model_copy(
        update={
            "source_chain": canonical_chain_name(tx.source_chain, tables.chains),
            "destination_chain": canonical_chain_name(tx.destination_chain, tables.chains),
            "usd_value": value,
            "bridge_protocol": "debridge",
        }
    )


class DeBridgeClient(BridgeSource):
    """GET {api_base}/transfers. Disabled unless an api_base is configured."""

    name = "debridge"

    def __init__(
        self,
        api_base: str,
        *,
        timeout_sec: float = 15.0,
        retry: RetryPolicy | None = None,
        client: httpx.AsyncClient | None = None,
        tables: AssetTables = DEFAULT_TABLES,
    ) -> None:
        self.transfers_url = api_base.rstrip("/") + "/transfers"
        self.retry = retry or RetryPolicy()
        self.tables = tables
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_sec)

    async def fetch(self, from_timestamp: int, chain: str | None = None) -> SourceResult:
        params: dict[str, Any] = {"fromTimestamp": from_timestamp}

        async def call() -> Any:
            resp = await self._client.get(self.transfers_url, params=params)
            resp.raise_for_status()
            return resp.json()

        try:
            data = await self.retry.run(call, name="debridge_transfers")
        except Exception as e:
            log.warning("debridge_failed", error=str(e))
            return SourceResult(source=self.name, failures=[f"debridge transfers failed: {e}"])
        rows = data.get("transfers", data.get("data")) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            log.warning("debridge_malformed")
            return SourceResult(source=self.name, failures=["debridge returned a malformed payload"])
        txs = []
        for row in rows:
            tx = parse_transfer(row, self.tables)
            if tx is None or tx.timestamp < from_timestamp:
                continue
            if chain and not tx.touches(canonical_chain_name(chain, self.tables.chains)):
                continue
            txs.append(tx)
        log.info("debridge_fetched", transfers=len(txs), chain=chain)
        return SourceResult(source=self.name, transactions=txs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
