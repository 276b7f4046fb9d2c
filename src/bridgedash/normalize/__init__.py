"""Normalization: asset inference, valuation, chain naming."""

from bridgedash.normalize.assets import extract_candidates, select_candidate
from bridgedash.normalize.chains import canonical_chain_name, chain_query_id
from bridgedash.normalize.engine import normalize_message, normalize_messages, usd_value
from bridgedash.normalize.registry import DiscoveredSet, DiscoveryRegistry
from bridgedash.normalize.tables import DEFAULT_TABLES, UNKNOWN, AssetTables

__all__ = [
    "extract_candidates",
    "select_candidate",
    "canonical_chain_name",
    "chain_query_id",
    "normalize_message",
    "normalize_messages",
    "usd_value",
    "DiscoveredSet",
    "DiscoveryRegistry",
    "AssetTables",
    "DEFAULT_TABLES",
    "UNKNOWN",
]
