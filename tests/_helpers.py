# tests/_helpers.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from httpwrap.core.access import AccessEvent


class ListSink:
    """Sink that keeps every event; never full."""

    def __init__(self) -> None:
        self.events: List[AccessEvent] = []

    def put_nowait(self, item: AccessEvent) -> None:
        self.events.append(item)


class SendRecorder:
    """ASGI send that records messages."""

    def __init__(self) -> None:
        self.messages: List[Dict[str, Any]] = []

    async def __call__(self, message: Dict[str, Any]) -> None:
        self.messages.append(message)

    def starts(self) -> List[Dict[str, Any]]:
        return [m for m in self.messages if m["type"] == "http.response.start"]

    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")


def make_scope(
    *,
    method: str = "GET",
    path: str = "/",
    query: bytes = b"",
    headers: Optional[List[tuple[bytes, bytes]]] = None,
    client: Any = ("10.0.0.1", 54321),
) -> Dict[str, Any]:
    return {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query,
        "headers": headers or [],
        "client": client,
    }


def make_event(**overrides: Any) -> AccessEvent:
    fields: Dict[str, Any] = dict(
        remote_addr="10.0.0.1",
        time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=-7))),
        method="GET",
        request_uri="/x?a=1",
        proto="HTTP/1.1",
        status_code=200,
        content_length=-1,
        referer="-",
        user_agent="-",
        duration=timedelta(milliseconds=12),
    )
    fields.update(overrides)
    return AccessEvent(**fields)


async def text_app(scope: Any, receive: Any, send: Any) -> None:
    await send({"type": "http.response.start", "status": 200, "headers": [(b"content-type", b"text/plain")]})
    await send({"type": "http.response.body", "body": b"hello"})
