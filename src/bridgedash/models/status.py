"""FetchStatus - diagnostic channel for a dashboard read."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FetchStatus(BaseModel):
    """Whether real data was served. Failures never replace the data itself."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    used_fallback: bool = False
    error: str | None = None
    failures: list[str] = Field(default_factory=list)
    fetched_at: int | None = None  # ms epoch
