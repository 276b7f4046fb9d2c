"""Bridge activity dashboard - Hyperlane/deBridge transfer ingestion, normalization, and stats."""

__version__ = "0.1.0"
