"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bridgedash.models import BridgeStats, CanonicalTransaction, FetchStatus, TimeSeriesPoint


class _Response(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Health ---
class HealthResponse(_Response):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(_Response):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. unknown_timeframe")


# --- Transactions ---
class TransactionsResponse(_Response):
    timeframe: str
    chain: str | None = None
    transactions: list[CanonicalTransaction]
    total: int
    status: FetchStatus


# --- Stats ---
class StatsResponse(_Response):
    timeframe: str
    chain: str | None = None
    stats: BridgeStats
    status: FetchStatus


class ChainSeriesResponse(_Response):
    timeframe: str
    chain: str
    points: list[TimeSeriesPoint]
    status: FetchStatus


# --- Discovery ---
class DiscoveredResponse(_Response):
    items: list[str]
    total: int
