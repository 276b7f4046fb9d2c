"""Bridge data sources: Hyperlane Explorer (messages) and deBridge (transfers)."""

from bridgedash.ingestion.base import BridgeSource, SourceResult
from bridgedash.ingestion.debridge.client import DeBridgeClient
from bridgedash.ingestion.hyperlane.client import HyperlaneExplorerClient
from bridgedash.ingestion.retry import RetryExhaustedError, RetryPolicy

__all__ = [
    "BridgeSource",
    "SourceResult",
    "DeBridgeClient",
    "HyperlaneExplorerClient",
    "RetryExhaustedError",
    "RetryPolicy",
]
