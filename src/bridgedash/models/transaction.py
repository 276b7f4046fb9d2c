"""CanonicalTransaction and AssetCandidate - normalized transfer records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AssetCandidate(BaseModel):
    """One hypothesis about a message's asset and amount."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    amount: str
    confidence: float = Field(..., ge=0, le=1)
    source: str = "symbol"  # address_amount | address | symbol | alias | route


class CanonicalTransaction(BaseModel):
    """Normalized, display-ready transfer. Immutable once built."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    timestamp: int  # ms epoch
    source_chain: str
    destination_chain: str
    asset: str = Field("Unknown", min_length=1)
    amount: str = "1"  # decimal string
    usd_value: float = 0.0
    status: str = "unknown"
    tx_hash: str = ""
    bridge_protocol: str = "hyperlane"

    def touches(self, chain: str) -> bool:
        return chain in (self.source_chain, self.destination_chain)
