# src/httpwrap/core/sinks.py
from __future__ import annotations

import asyncio
import queue
import threading
from typing import Any, Protocol, Tuple

from httpwrap.core.access import AccessEvent
from httpwrap.utils.logger import get_logger

logger = get_logger("httpwrap.sinks")


class EventChannel(Protocol):
    def put_nowait(self, item: Any) -> None: ...


# Both stdlib queue flavours signal "full" differently.
_FULL_ERRORS = (asyncio.QueueFull, queue.Full)


class SinkRegistry:
    """
    Append-only list of access event subscribers.

    - register_sink() may race with publish(): the subscriber tuple is
      replaced under a lock and publish() iterates over a snapshot.
    - publish() never blocks. A full channel drops the event and the drop
      is counted.
    - asyncio.Queue channels are not thread-safe: publish() must run on the
      event loop that owns them. queue.Queue channels accept any thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sinks: Tuple[EventChannel, ...] = ()
        self._dropped = 0

    def register_sink(self, channel: EventChannel) -> None:
        with self._lock:
            self._sinks = self._sinks + (channel,)

    def sinks(self) -> Tuple[EventChannel, ...]:
        return self._sinks

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    def publish(self, event: AccessEvent) -> int:
        """Broadcast to every sink; returns how many accepted the event."""
        delivered = 0
        for ch in self._sinks:
            try:
                ch.put_nowait(event)
            except _FULL_ERRORS:
                with self._lock:
                    self._dropped += 1
                logger.debug("ACCESS_EVENT_DROPPED sink=%r", ch)
                continue
            except Exception:
                logger.exception("ACCESS_EVENT_PUBLISH_FAILED sink=%r", ch)
                continue
            delivered += 1
        return delivered
