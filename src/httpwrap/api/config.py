from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from httpwrap.core.access import COMMON_LOG_FMT


def _split_csv(v: str) -> List[str]:
    parts = [p.strip() for p in (v or "").split(",")]
    return [p for p in parts if p]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ApiConfig:
    """
    API runtime config (env-driven, HTTPWRAP_* variables).
    Keep it dependency-light.
    """

    host: str = "0.0.0.0"
    port: int = 8000

    # Logging knobs
    log_level: str = "INFO"
    log_path: str = ""
    log_format: str = COMMON_LOG_FMT

    # Wrapping handler
    # Fixed response Content-Type ("" = leave to the inner app)
    content_type: str = "application/json"
    # Accepted media type ("" = accept all)
    accept_type: str = ""
    # Which request header the media check reads: accept | content-type
    negotiation_header: str = "accept"
    # Allowed methods, e.g. HTTPWRAP_ALLOWED_METHODS="GET,POST" (empty = all)
    allowed_methods: List[str] = field(default_factory=list)

    # Per-sink queue capacity; a full queue drops events
    sink_queue_size: int = 64


def load_config() -> ApiConfig:
    return ApiConfig(
        host=os.getenv("HTTPWRAP_HOST", "0.0.0.0"),
        port=_env_int("HTTPWRAP_PORT", 8000),
        log_level=os.getenv("HTTPWRAP_LOG_LEVEL", "INFO"),
        log_path=os.getenv("HTTPWRAP_LOG_PATH", ""),
        log_format=os.getenv("HTTPWRAP_LOG_FORMAT", "") or COMMON_LOG_FMT,
        content_type=os.getenv("HTTPWRAP_CONTENT_TYPE", "application/json"),
        accept_type=os.getenv("HTTPWRAP_ACCEPT_TYPE", ""),
        negotiation_header=os.getenv("HTTPWRAP_NEGOTIATION_HEADER", "accept").strip().lower(),
        allowed_methods=[m.upper() for m in _split_csv(os.getenv("HTTPWRAP_ALLOWED_METHODS", ""))],
        sink_queue_size=max(1, _env_int("HTTPWRAP_SINK_QUEUE_SIZE", 64)),
    )
