"""RawMessage -> CanonicalTransaction."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

import structlog

from bridgedash.models.message import RawMessage, parse_raw_message
from bridgedash.models.transaction import CanonicalTransaction
from bridgedash.normalize.assets import extract_candidates, select_candidate
from bridgedash.normalize.chains import canonical_chain_name
from bridgedash.normalize.registry import DiscoveryRegistry
from bridgedash.normalize.tables import DEFAULT_AMOUNT, DEFAULT_TABLES, UNKNOWN, AssetTables

log = structlog.get_logger(__name__)


def usd_value(amount: str, symbol: str, tables: AssetTables = DEFAULT_TABLES) -> float:
    """parseFloat(amount) * unit price."""
    return float(amount) * tables.unit_price(symbol)


def _infer_asset(
    msg: RawMessage,
    source_chain: str,
    destination_chain: str,
    tables: AssetTables,
    registry: DiscoveryRegistry | None,
) -> tuple[str, str]:
    extra = registry.assets.snapshot() if registry is not None else ()
    candidates = extract_candidates(
        msg.body,
        source_chain,
        destination_chain,
        tables=tables,
        extra_symbols=extra,
    )
    best = select_candidate(candidates)
    if best is None:
        return UNKNOWN, DEFAULT_AMOUNT
    return best.symbol, best.amount


def normalize_message(
    msg: RawMessage,
    *,
    fetched_at_ms: int,
    tables: AssetTables = DEFAULT_TABLES,
    registry: DiscoveryRegistry | None = None,
    bridge_protocol: str = "hyperlane",
) -> CanonicalTransaction:
    """Build one CanonicalTransaction. Inference errors degrade to Unknown / '1'."""
    source_chain = canonical_chain_name(msg.origin, tables.chains)
    destination_chain = canonical_chain_name(msg.destination, tables.chains)
    try:
        asset, amount = _infer_asset(msg, source_chain, destination_chain, tables, registry)
        value = usd_value(amount, asset, tables)
    except Exception as e:
        log.warning("normalize_failed", message_id=msg.id, error=str(e))
        asset, amount = UNKNOWN, DEFAULT_AMOUNT
        value = usd_value(amount, asset, tables)
    if registry is not None:
        registry.record(asset, source_chain, destination_chain)
    return CanonicalTransaction(
        id=msg.id,
        timestamp=msg.timestamp if msg.timestamp is not None else fetched_at_ms,
        source_chain=source_chain,
        destination_chain=destination_chain,
        asset=asset,
        amount=amount,
        usd_value=value,
        status=msg.status or "unknown",
        tx_hash=msg.transaction_hash or "",
        bridge_protocol=bridge_protocol,
    )


def normalize_messages(
    items: Iterable[Any],
    *,
    fetched_at_ms: int | None = None,
    tables: AssetTables = DEFAULT_TABLES,
    registry: DiscoveryRegistry | None = None,
    bridge_protocol: str = "hyperlane",
) -> list[CanonicalTransaction]:
    """Normalize a batch. Items that are not well-formed records are dropped."""
    now_ms = fetched_at_ms if fetched_at_ms is not None else int(time.time() * 1000)
    out: list[CanonicalTransaction] = []
    dropped = 0
    for item in items:
        msg = parse_raw_message(item)
        if msg is None:
            dropped += 1
            continue
        out.append(
            normalize_message(
                msg,
                fetched_at_ms=now_ms,
                tables=tables,
                registry=registry,
                bridge_protocol=bridge_protocol,
            )
        )
    if dropped:
        log.info("messages_dropped", dropped=dropped, kept=len(out))
    return out
