from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class SinkStatus(BaseModel):
    name: str
    running: bool
    queued: int = Field(ge=0)
    maxsize: int = Field(ge=0)


class SinkListResponse(BaseModel):
    registered: int = Field(ge=0, description="Subscriber channels in the registry")
    dropped: int = Field(ge=0, description="Access events dropped on full channels")
    workers: List[SinkStatus] = Field(default_factory=list)

