# src/httpwrap/core/handler.py
from __future__ import annotations

import time
from datetime import timedelta
from typing import Iterable, Optional

from starlette.types import ASGIApp, Receive, Scope, Send

from httpwrap.core.access import build_access_event
from httpwrap.core.guard import AdmissionGuard, NegotiationHeader
from httpwrap.core.sinks import SinkRegistry
from httpwrap.core.writer import ResponseWriter
from httpwrap.utils.logger import get_logger

logger = get_logger("httpwrap.handler")

STATUS_OK = 200
STATUS_INTERNAL_SERVER_ERROR = 500


class WrappingHandler:
    """
    ASGI middleware around exactly one inner app.

    Per HTTP request:
    - wraps `send` in a ResponseWriter (fixed Content-Type applied)
    - runs the admission guard; a rejected request never reaches the inner app
    - calls the inner app; if it returns without responding an empty 200
      is sent; any Exception is caught here, a 500 is forced if
      no status went out yet and the traceback is logged
    - a started but unfinished response is closed with an empty final body
    - publishes exactly one AccessEvent to the sink registry

    Duration covers the whole call, guard included.
    Non-HTTP scopes (lifespan, websocket) pass straight through.

    Works both as a plain wrapper and via `app.add_middleware(WrappingHandler, ...)`.
    """

    def __init__(
        self,
        app: ASGIApp,
        content_type: str = "",
        *,
        registry: Optional[SinkRegistry] = None,
        accept: str = "",
        allow: Iterable[str] = (),
        negotiation_header: NegotiationHeader | str = NegotiationHeader.ACCEPT,
    ) -> None:
        self.app = app
        self.content_type = content_type
        self.registry = registry if registry is not None else SinkRegistry()
        self.guard = AdmissionGuard(allow=allow, accept=accept, header=negotiation_header)

    # setup-time only; not safe to call while serving
    def set_accepted_type(self, mime: str) -> None:
        """Only fulfil requests declaring `mime` (or a wildcard); others get 406."""
        self.guard.accept = mime

    def set_allowed_methods(self, *methods: str) -> None:
        """Only fulfil requests using one of `methods`; others get 405."""
        self.guard.allow = tuple(m.upper() for m in methods)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rw = ResponseWriter(send, self.content_type)
        scope.setdefault("state", {})["response_writer"] = rw
        start = time.perf_counter()
        try:
            rejection = self.guard.check(scope)
            if rejection is not None:
                await self.guard.reject(rw, rejection)
                return
            await self.app(scope, receive, rw)
            # implicit 200 if nothing went out; close an unfinished body
            await self._complete(rw, STATUS_OK)
        except Exception as exc:
            await self._recover(scope, rw, exc)
        finally:
            duration = timedelta(seconds=time.perf_counter() - start)
            self._log_request(scope, rw, duration)

    async def _recover(self, scope: Scope, rw: ResponseWriter, exc: Exception) -> None:
        logger.exception(
            "panic: %s method=%s path=%s",
            exc,
            scope.get("method"),
            scope.get("path"),
        )
        try:
            await self._complete(rw, STATUS_INTERNAL_SERVER_ERROR)
        except Exception:
            # client gone or transport closed; the access event is still logged
            logger.warning("RECOVER_WRITE_FAILED path=%s", scope.get("path"), exc_info=True)

    async def _complete(self, rw: ResponseWriter, status: int) -> None:
        """Send `status` if nothing went out yet, then close an open body."""
        if not rw.has_status():
            await rw.write_header(status)
        if not rw.finished:
            await rw.finish()

    def _log_request(self, scope: Scope, rw: ResponseWriter, duration: timedelta) -> None:
        status = rw.status_code if rw.has_status() else STATUS_OK
        event = build_access_event(
            scope,
            status_code=status,
            duration=duration,
            bytes_sent=rw.bytes_sent,
        )
        self.registry.publish(event)
