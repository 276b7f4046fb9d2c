"""Shared fixtures: fixed clock, no-op sleep, message factory."""

from __future__ import annotations

import pytest

from bridgedash.config.timeframes import DAY_MS
from bridgedash.ingestion import BridgeSource, SourceResult
from bridgedash.models import RawMessage

# 2025-10-09T00:00:00Z
NOW_MS = 1_759_968_000_000
DAY1 = 1_704_067_200_000  # 2024-01-01T00:00:00Z
DAY2 = DAY1 + DAY_MS


async def no_sleep(_delay: float) -> None:
    return None


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


def make_message(msg_id: str, **fields) -> dict:
    """Explorer-shaped message dict."""
    msg = {
        "id": msg_id,
        "origin": "ethereum",
        "destination": "hyperliquid",
        "body": "",
        "status": "delivered",
        "timestamp": NOW_MS - 60_000,
        "transactionHash": "0x" + "ab" * 32,
    }
    msg.update(fields)
    return msg


class StaticSource(BridgeSource):
    """BridgeSource returning fixed messages and failures; records its calls."""

    name = "static"

    def __init__(self, messages=(), failures=()):
        self.messages = [RawMessage.model_validate(m) for m in messages]
        self.failures = list(failures)
        self.calls = []
        self.closed = False

    async def fetch(self, from_timestamp, chain=None):
        self.calls.append((from_timestamp, chain))
        return SourceResult(source=self.name, messages=list(self.messages), failures=list(self.failures))

    async def aclose(self):
        self.closed = True
