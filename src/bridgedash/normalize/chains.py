"""Chain identifier canonicalization."""

from __future__ import annotations

import re
from typing import Any

from bridgedash.normalize.tables import CHAIN_NAMES, UNKNOWN

_SEPARATORS = re.compile(r"[-_\s]+")


def canonical_chain_name(raw: Any, table: dict[str, str] | None = None) -> str:
    """Display name for a chain id / slug / name. Unlisted ids are title-cased."""
    names = CHAIN_NAMES if table is None else table
    if raw is None:
        return UNKNOWN
    key = str(raw).strip()
    if not key:
        return UNKNOWN
    hit = names.get(key) or names.get(key.lower())
    if hit:
        return hit
    # Already a display name in the table?
    for name in names.values():
        if name.lower() == key.lower():
            return name
    return _SEPARATORS.sub(" ", key).title()


def chain_query_id(name_or_id: str, table: dict[str, str] | None = None) -> str:
    """Explorer slug for a display name or raw identifier (e.g. 'Hyperliquid' -> 'hyperliquid')."""
    names = CHAIN_NAMES if table is None else table
    key = (name_or_id or "").strip()
    display = canonical_chain_name(key, names)
    slugs = [k for k, v in names.items() if v == display and not k.isdigit()]
    if slugs:
        return slugs[0]
    return key.lower()
