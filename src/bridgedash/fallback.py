"""Synthetic bridge data substituted when no real data can be fetched.

Messages follow the common routes into and out of Hyperliquid with realistic
per-asset amounts. When the asset has a known contract the body carries the
address and the hex-encoded amount, so normalization recovers exact amounts.
Output is deterministic for a given seed and now_ms.
"""

from __future__ import annotations

import random
from decimal import Decimal
from typing import Any

from bridgedash.models import CanonicalTransaction
from bridgedash.normalize.chains import chain_query_id
from bridgedash.normalize.engine import normalize_messages
from bridgedash.normalize.tables import DEFAULT_TABLES, AssetTables

HOUR_MS = 3_600_000

CHAINS = ["ethereum", "polygon", "arbitrum", "base", "hyperliquid", "solana", "optimism", "avalanche"]
ASSETS = ["USDC", "WETH", "WBTC", "DAI", "USDT", "SOL", "stBTC", "ETH", "MATIC", "AVAX", "LINK", "UNI", "stETH", "rETH"]

# (source, destination, probability, assets)
ROUTES: list[tuple[str, str, float, list[str]]] = [
    ("ethereum", "hyperliquid", 0.3, ["USDC", "WETH", "ETH", "stETH"]),
    ("solana", "hyperliquid", 0.25, ["SOL", "USDC"]),
    ("arbitrum", "hyperliquid", 0.15, ["WETH", "USDC", "ETH"]),
    ("hyperliquid", "ethereum", 0.1, ["USDC", "WETH"]),
    ("hyperliquid", "solana", 0.1, ["SOL", "USDC"]),
    ("polygon", "hyperliquid", 0.05, ["MATIC", "USDC"]),
    ("base", "hyperliquid", 0.05, ["ETH", "USDC"]),
]
ROUTE_SHARE = 0.8


def _amount(rng: random.Random, asset: str) -> str:
    if asset in ("WETH", "ETH", "stETH", "rETH"):
        return f"{0.1 + rng.random() * 5:.3f}"
    if asset in ("WBTC", "stBTC"):
        return f"{0.001 + rng.random() * 0.1:.5f}"
    if asset == "SOL":
        return f"{1 + rng.random() * 50:.2f}"
    if asset in ("MATIC", "AVAX"):
        return f"{5 + rng.random() * 100:.2f}"
    return f"{100 + rng.random() * 10000:.2f}"


def _pick_route(rng: random.Random) -> tuple[str, str, str]:
    if rng.random() < ROUTE_SHARE:
        roll = rng.random()
        cumulative = 0.0
        selected = ROUTES[0]
        for route in ROUTES:
            cumulative += route[2]
            if roll <= cumulative:
                selected = route
                break
        origin, destination, _, assets = selected
        return origin, destination, rng.choice(assets)
    origin = rng.choice(CHAINS)
    destination = rng.choice([c for c in CHAINS if c != origin])
    return origin, destination, rng.choice(ASSETS)


def _hex(rng: random.Random, nbytes: int) -> str:
    return "0x" + format(rng.getrandbits(nbytes * 8), f"0{nbytes * 2}x")


def synthetic_messages(
    now_ms: int,
    count: int = 30,
    seed: int = 42,
    chain: str | None = None,
    tables: AssetTables = DEFAULT_TABLES,
) -> list[dict[str, Any]]:
    """Explorer-shaped message dicts. With chain set, every message touches that chain."""
    rng = random.Random(seed)
    contract_of: dict[str, str] = {}
    for address, symbol in tables.addresses.items():
        contract_of.setdefault(symbol, address)
    pinned = chain_query_id(chain, tables.chains) if chain else None

    out = []
    for i in range(count):
        origin, destination, asset = _pick_route(rng)
        if pinned and pinned not in (origin, destination):
            if origin == "hyperliquid":
                origin = pinned
            else:
                destination = pinned
        amount = _amount(rng, asset)
        body = f"Bridge transfer of {amount} {asset} from {origin} to {destination}"
        address = contract_of.get(asset)
        if address:
            raw_amount = int(Decimal(amount).scaleb(tables.token_decimals(asset)))
            body += f" for token at {address} with amount {hex(raw_amount)}"
        out.append(
            {
                "id": f"synthetic-{i}-{now_ms:x}",
                "origin": origin,
                "destination": destination,
                "body": body,
                "sender": _hex(rng, 20),
                "recipient": _hex(rng, 20),
                "status": "delivered",
                "timestamp": now_ms - int(i * HOUR_MS * (1 + rng.random())),
                "blockNumber": 10_000_000 + rng.randrange(5_000_000),
                "transactionHash": _hex(rng, 32),
            }
        )
    return out


def synthetic_transactions(
    now_ms: int,
    count: int = 30,
    seed: int = 42,
    chain: str | None = None,
    tables: AssetTables = DEFAULT_TABLES,
) -> list[CanonicalTransaction]:
    """synthetic_messages run through the normal normalization path."""
    messages = synthetic_messages(now_ms, count=count, seed=seed, chain=chain, tables=tables)
    return normalize_messages(messages, fetched_at_ms=now_ms, tables=tables)
