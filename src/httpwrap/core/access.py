# src/httpwrap/core/access.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from starlette.datastructures import Headers
from starlette.types import Scope

# Common Log Format, extended with referer, user agent and duration.
# See <http://httpd.apache.org/docs/1.3/logs.html#common>
COMMON_LOG_FMT = (
    '{remote_addr} - - [{time}] "{method} {request_uri} {proto}" '
    '{status_code} {content_length} "{referer}" "{user_agent}" {duration_ms}ms'
)

CLF_TIME_FMT = "%d/%b/%Y:%H:%M:%S %z"


@dataclass(frozen=True)
class AccessEvent:
    """
    A single answered HTTP request.

    Built once when the request finishes and handed to every registered sink.
    `request` is a back-reference to the ASGI scope for sinks that need more
    than the logged fields; it takes no part in equality or repr.
    """

    remote_addr: str
    time: datetime
    method: str
    request_uri: str
    proto: str
    status_code: int
    content_length: int
    referer: str
    user_agent: str
    duration: timedelta
    bytes_sent: int = 0
    request: Optional[Scope] = field(default=None, compare=False, repr=False)

    @property
    def duration_ms(self) -> int:
        return int(self.duration / timedelta(milliseconds=1))

    def format(self, fmt: str = COMMON_LOG_FMT) -> str:
        return fmt.format(**self.log_fields())

    def log_fields(self) -> dict[str, Any]:
        return {
            "remote_addr": self.remote_addr,
            "time": self.time.strftime(CLF_TIME_FMT),
            "method": self.method,
            "request_uri": self.request_uri,
            "proto": self.proto,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "referer": self.referer,
            "user_agent": self.user_agent,
            "duration_ms": self.duration_ms,
            "bytes_sent": self.bytes_sent,
        }

    def __str__(self) -> str:
        return self.format()


def _header_or_dash(headers: Headers, name: str) -> str:
    v = headers.get(name)
    return v if v else "-"


def remote_addr_of(scope: Scope, headers: Optional[Headers] = None) -> str:
    """
    Best-effort client address:
    - first hop of X-Forwarded-For
    - else connection peer host
    - else "?"
    """
    headers = headers if headers is not None else Headers(scope=scope)
    fwd = headers.get("x-forwarded-for")
    if fwd:
        first = fwd.split(",", 1)[0].strip()
        if first:
            return first

    client = scope.get("client")
    try:
        host = client[0] if client else None
    except (TypeError, IndexError):
        host = None
    return host if isinstance(host, str) and host else "?"


def request_uri_of(scope: Scope) -> str:
    raw = scope.get("raw_path")
    if raw:
        path = raw.decode("latin-1") if isinstance(raw, (bytes, bytearray)) else str(raw)
    else:
        path = scope.get("path") or "/"
    qs = scope.get("query_string") or b""
    if qs:
        return f"{path}?{qs.decode('latin-1')}"
    return path


def content_length_of(headers: Headers) -> int:
    v = headers.get("content-length")
    if v is None:
        return -1
    try:
        n = int(v.strip())
    except ValueError:
        return -1
    return n if n >= 0 else -1


def build_access_event(
    scope: Scope,
    *,
    status_code: int,
    duration: timedelta,
    bytes_sent: int = 0,
    now: Optional[datetime] = None,
) -> AccessEvent:
    headers = Headers(scope=scope)
    return AccessEvent(
        remote_addr=remote_addr_of(scope, headers),
        time=now if now is not None else datetime.now().astimezone(),
        method=scope.get("method", "-"),
        request_uri=request_uri_of(scope),
        proto=f"HTTP/{scope.get('http_version', '1.1')}",
        status_code=int(status_code),
        content_length=content_length_of(headers),
        referer=_header_or_dash(headers, "referer"),
        user_agent=_header_or_dash(headers, "user-agent"),
        duration=duration,
        bytes_sent=bytes_sent,
        request=scope,
    )
