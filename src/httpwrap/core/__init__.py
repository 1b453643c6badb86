from __future__ import annotations

from httpwrap.core.access import COMMON_LOG_FMT, AccessEvent, build_access_event
from httpwrap.core.errors import error_response, format_error, write_error
from httpwrap.core.guard import AdmissionGuard, NegotiationHeader, Rejection
from httpwrap.core.handler import WrappingHandler
from httpwrap.core.sinks import SinkRegistry
from httpwrap.core.worker import AccessLogWorker, CallbackWorker, SinkWorker
from httpwrap.core.writer import ResponseWriter

__all__ = [
    "COMMON_LOG_FMT",
    "AccessEvent",
    "AccessLogWorker",
    "AdmissionGuard",
    "CallbackWorker",
    "NegotiationHeader",
    "Rejection",
    "ResponseWriter",
    "SinkRegistry",
    "SinkWorker",
    "WrappingHandler",
    "build_access_event",
    "error_response",
    "format_error",
    "write_error",
]
