"""TimeSeriesPoint, ChainSummary, BridgeStats - aggregate snapshots."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ALL_CHAINS = "all"


class _Aggregate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeSeriesPoint(_Aggregate):
    """Summed USD value for one (day, asset) bucket."""

    timestamp: int  # ms epoch, UTC midnight
    value: float
    chain: str = ALL_CHAINS
    asset: str


class ChainSummary(_Aggregate):
    chain_id: str
    chain_name: str
    total_transactions: int = 0
    total_value: float = 0.0
    active_assets: list[str] = Field(default_factory=list)


class BridgeStats(_Aggregate):
    total_value_locked: float = 0.0
    total_transactions: int = 0
    unique_assets: int = 0
    active_chains: int = 0
    time_series_data: list[TimeSeriesPoint] = Field(default_factory=list)
    chain_stats: list[ChainSummary] = Field(default_factory=list)
