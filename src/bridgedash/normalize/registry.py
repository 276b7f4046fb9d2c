"""Append-only memo of every asset symbol and chain name seen so far."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

from bridgedash.normalize.tables import SEED_ASSETS, SEED_CHAINS, UNKNOWN


class DiscoveredSet:
    """Grow-only set. add() is atomic; snapshot() returns a sorted copy."""

    def __init__(self, seed: Iterable[str] = ()) -> None:
        self._items: set[str] = set()
        self._lock = Lock()
        for item in seed:
            self.add(item)

    def add(self, item: str) -> bool:
        """Add item. Return True if it was new. Empty and 'Unknown' are ignored."""
        if not item or item == UNKNOWN:
            return False
        with self._lock:
            if item in self._items:
                return False
            self._items.add(item)
            return True

    def snapshot(self) -> list[str]:
        with self._lock:
            return sorted(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __len__(self) -> int:
        return len(self._items)


class DiscoveryRegistry:
    """Discovered assets and chains, seeded with static defaults."""

    def __init__(
        self,
        seed_assets: Iterable[str] = SEED_ASSETS,
        seed_chains: Iterable[str] = SEED_CHAINS,
    ) -> None:
        self.assets = DiscoveredSet(seed_assets)
        self.chains = DiscoveredSet(seed_chains)

    def record(self, asset: str, *chains: str) -> None:
        self.assets.add(asset)
        for chain in chains:
            self.chains.add(chain)
