# src/httpwrap/core/writer.py
from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.types import Message, Send


class ResponseWriter:
    """
    Wraps an ASGI `send` and observes what the inner app does with it.

    - status_code: first status seen on http.response.start (0 = none yet).
      Later start messages are still forwarded, but do not change it.
    - headers: pending headers merged into the outgoing start message.
      A header the inner app sets itself wins over a pending one.
    - content_type: fixed Content-Type for this response, if configured.
    - finished: a final body message (more_body false) went out.

    The writer is itself a valid ASGI `send`, so it can be handed to the
    inner app directly.
    """

    def __init__(self, send: Send, content_type: str = "") -> None:
        self._send = send
        self.status_code = 0
        self.content_type = content_type
        self.bytes_sent = 0
        self.finished = False
        self.headers = MutableHeaders(raw=[])
        if content_type:
            self.headers["content-type"] = content_type

    def has_status(self) -> bool:
        return self.status_code != 0

    async def __call__(self, message: Message) -> None:
        await self.send(message)

    async def send(self, message: Message) -> None:
        mtype = message.get("type")
        if mtype == "http.response.start":
            if not self.has_status():
                self.status_code = int(message.get("status", 200))
            message = self._merge_headers(message)
        elif mtype == "http.response.body":
            self.bytes_sent += len(message.get("body", b""))
            if not message.get("more_body", False):
                self.finished = True
        await self._send(message)

    async def write_header(self, status: int) -> None:
        await self.send({"type": "http.response.start", "status": status, "headers": []})

    async def write(self, body: bytes, *, more_body: bool = True) -> int:
        if not self.has_status():
            await self.write_header(200)
        await self.send({"type": "http.response.body", "body": body, "more_body": more_body})
        return len(body)

    async def finish(self) -> None:
        await self.write(b"", more_body=False)

    def _merge_headers(self, message: Message) -> Message:
        pending = self.headers.raw
        if not pending:
            return message
        own = list(message.get("headers", []))
        present = {k.lower() for k, _ in own}
        merged = own + [(k, v) for k, v in pending if k not in present]
        return {**message, "headers": merged}
