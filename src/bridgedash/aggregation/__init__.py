from bridgedash.aggregation.engine import (
    asset_totals,
    chain_series,
    chain_summaries,
    compute_stats,
    day_start,
    placeholder_series,
    time_series,
)

__all__ = [
    "asset_totals",
    "chain_series",
    "chain_summaries",
    "compute_stats",
    "day_start",
    "placeholder_series",
    "time_series",
]
