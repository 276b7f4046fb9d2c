"""RawMessage - one bridge event as returned by the explorer API."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

log = structlog.get_logger(__name__)


def _timestamp_ms(value: Any) -> int | None:
    """Epoch ms from int/float, numeric string or ISO-8601 string. None if unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            number = float(s)
        except ValueError:
            pass
        else:
            return int(number) if math.isfinite(number) else None
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    return None


class RawMessage(BaseModel):
    """Unprocessed bridge message. Chain identifiers are not canonicalized."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1)
    origin: str = ""
    destination: str = ""
    body: str | None = None
    timestamp: int | None = None  # ms epoch
    status: str | None = None
    transaction_hash: str | None = Field(
        None,
        validation_alias=AliasChoices("transactionHash", "originTransactionHash", "transaction_hash"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _chain_str(cls, v: Any) -> str:
        if v is None:
            return ""
        if isinstance(v, dict):
            # Some explorer payloads nest the chain as {"name": ..., "domainId": ...}
            v = v.get("name") or v.get("domainId") or ""
        return str(v)

    @field_validator("body", mode="before")
    @classmethod
    def _body_str(cls, v: Any) -> str | None:
        if v is None:
            return None
        return v if isinstance(v, str) else str(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _ts(cls, v: Any) -> int | None:
        return _timestamp_ms(v)


def parse_raw_message(obj: Any) -> RawMessage | None:
    """Validate one explorer record. Returns None (and logs) for anything unusable."""
    if isinstance(obj, RawMessage):
        return obj
    if not isinstance(obj, dict):
        return None
    try:
        return RawMessage.model_validate(obj)
    except ValidationError as e:
        log.warning("skip_message", message_id=obj.get("id"), error=str(e.errors()[0]["msg"]))
        return None
    except (TypeError, ValueError, OverflowError) as e:
        log.warning("skip_message", message_id=obj.get("id"), error=str(e))
        return None
