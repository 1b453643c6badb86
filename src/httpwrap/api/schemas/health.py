from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    ok: bool = True
    service: str = "httpwrap"
    version: str
    content_type: str
    accept_type: str
    allowed_methods: List[str] = Field(default_factory=list)
