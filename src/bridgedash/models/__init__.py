"""Canonical schema (Pydantic) - RawMessage, CanonicalTransaction, BridgeStats."""

from bridgedash.models.message import RawMessage, parse_raw_message
from bridgedash.models.stats import BridgeStats, ChainSummary, TimeSeriesPoint
from bridgedash.models.status import FetchStatus
from bridgedash.models.transaction import AssetCandidate, CanonicalTransaction

__all__ = [
    "RawMessage",
    "parse_raw_message",
    "CanonicalTransaction",
    "AssetCandidate",
    "TimeSeriesPoint",
    "ChainSummary",
    "BridgeStats",
    "FetchStatus",
]
