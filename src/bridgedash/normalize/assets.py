"""Asset/amount inference over opaque message bodies.

Candidates are collected in three passes and ranked by confidence:

1. recognized token contract addresses (0.9 with a decoded hex amount, 0.8 with
   the table default amount),
2. plain-text symbol mentions (0.7 exact case, 0.6 case-insensitive) and
   irregular aliases (0.6),
3. a known source -> destination route (0.5), only when nothing else matched.

The highest confidence wins; among equals the first recorded wins, so pass
order breaks ties.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from decimal import Decimal, localcontext
from functools import lru_cache

from bridgedash.models.transaction import AssetCandidate
from bridgedash.normalize.tables import AssetTables

CONF_ADDRESS_AMOUNT = 0.9
CONF_ADDRESS = 0.8
CONF_SYMBOL_EXACT = 0.7
CONF_SYMBOL = 0.6
CONF_ALIAS = 0.6
CONF_ROUTE = 0.5

MAX_AMOUNT = Decimal(10) ** 9

# 0x + exactly 40 hex chars, not part of a longer hex run
_ADDRESS_RE = re.compile(r"(?<![0-9A-Za-z])0x[0-9a-fA-F]{40}(?![0-9a-fA-F])")
_HEX_RE = re.compile(r"(?<![0-9A-Za-z])0x[0-9a-fA-F]+(?![0-9A-Za-z])")


@lru_cache(maxsize=512)
def _word_pattern(term: str) -> re.Pattern[str]:
    return re.compile(r"(?<![0-9A-Za-z])" + re.escape(term) + r"(?![0-9A-Za-z])", re.IGNORECASE)


def format_amount(value: Decimal) -> str:
    """Plain decimal string: no exponent, no trailing zeros."""
    with localcontext() as ctx:
        ctx.prec = 80
        return format(value.normalize(), "f")


def decode_hex_amount(hex_str: str, decimals: int) -> Decimal | None:
    """Hex integer scaled down by 10**decimals; None unless the result is in (0, 1e9)."""
    try:
        raw = int(hex_str, 16)
    except ValueError:
        return None
    with localcontext() as ctx:
        ctx.prec = 80
        value = Decimal(raw).scaleb(-decimals)
    if 0 < value < MAX_AMOUNT:
        return value
    return None


def _address_candidates(body: str, tables: AssetTables) -> list[AssetCandidate]:
    out: list[AssetCandidate] = []
    hexes = _HEX_RE.findall(body)
    seen: set[str] = set()
    for match in _ADDRESS_RE.finditer(body):
        address = match.group(0).lower()
        if address in seen:
            continue
        seen.add(address)
        symbol = tables.addresses.get(address)
        if symbol is None:
            continue
        decimals = tables.token_decimals(symbol)
        for other in hexes:
            if other.lower() == address:
                continue
            value = decode_hex_amount(other, decimals)
            if value is not None:
                out.append(
                    AssetCandidate(
                        symbol=symbol,
                        amount=format_amount(value),
                        confidence=CONF_ADDRESS_AMOUNT,
                        source="address_amount",
                    )
                )
                break
        out.append(
            AssetCandidate(
                symbol=symbol,
                amount=tables.default_amount(symbol),
                confidence=CONF_ADDRESS,
                source="address",
            )
        )
    return out


def _text_candidates(
    body: str, tables: AssetTables, extra_symbols: Iterable[str]
) -> list[AssetCandidate]:
    # (position, candidate); one per symbol
    found: dict[str, tuple[int, AssetCandidate]] = {}
    symbols = list(dict.fromkeys([*tables.symbols, *extra_symbols]))
    for symbol in symbols:
        if not symbol or symbol == "Unknown":
            continue
        matches = list(_word_pattern(symbol).finditer(body))
        if not matches:
            continue
        exact = any(m.group(0) == symbol for m in matches)
        found[symbol] = (
            matches[0].start(),
            AssetCandidate(
                symbol=symbol,
                amount=tables.default_amount(symbol),
                confidence=CONF_SYMBOL_EXACT if exact else CONF_SYMBOL,
                source="symbol",
            ),
        )
    for alias, symbol in tables.aliases.items():
        if symbol in found:
            continue
        m = _word_pattern(alias).search(body)
        if m is None:
            continue
        found[symbol] = (
            m.start(),
            AssetCandidate(
                symbol=symbol,
                amount=tables.default_amount(symbol),
                confidence=CONF_ALIAS,
                source="alias",
            ),
        )
    return [c for _, c in sorted(found.values(), key=lambda pc: pc[0])]


def _route_candidate(
    source_chain: str, destination_chain: str, tables: AssetTables
) -> AssetCandidate | None:
    symbol = tables.routes.get((source_chain, destination_chain))
    if symbol is None:
        return None
    return AssetCandidate(
        symbol=symbol,
        amount=tables.default_amount(symbol),
        confidence=CONF_ROUTE,
        source="route",
    )


def extract_candidates(
    body: str | None,
    source_chain: str,
    destination_chain: str,
    *,
    tables: AssetTables,
    extra_symbols: Iterable[str] = (),
) -> list[AssetCandidate]:
    """All asset hypotheses for one message, in recording order.

    ``source_chain``/``destination_chain`` are canonical display names (they key
    the route table). ``extra_symbols`` widens the text scan beyond the tables.
    """
    text = body or ""
    candidates = _address_candidates(text, tables)
    candidates.extend(_text_candidates(text, tables, extra_symbols))
    if not candidates:
        route = _route_candidate(source_chain, destination_chain, tables)
        if route is not None:
            candidates.append(route)
    return candidates


def select_candidate(candidates: list[AssetCandidate]) -> AssetCandidate | None:
    """Highest confidence; first recorded wins ties."""
    if not candidates:
        return None
    # max() keeps the first maximal element
    return max(candidates, key=lambda c: c.confidence)
