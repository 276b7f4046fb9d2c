"""Abstract bridge source for pluggable protocols (Hyperlane, deBridge, ...)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from bridgedash.models import CanonicalTransaction, RawMessage


@dataclass
class SourceResult:
    """What one source produced for a window. failures are human-readable sub-query errors."""

    source: str
    messages: list[RawMessage] = field(default_factory=list)
    transactions: list[CanonicalTransaction] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.messages and not self.transactions


class BridgeSource(ABC):
    """Fetches one bridge protocol's activity. Implementations never raise on upstream failure."""

    name: str = ""

    @abstractmethod
    async def fetch(self, from_timestamp: int, chain: str | None = None) -> SourceResult:
        """Return raw messages (to be normalized) and/or already-canonical transactions."""
        ...

    async def aclose(self) -> None:
        return None
