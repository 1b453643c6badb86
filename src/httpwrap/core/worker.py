# src/httpwrap/core/worker.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from httpwrap.core.access import COMMON_LOG_FMT, AccessEvent
from httpwrap.core.sinks import SinkRegistry
from httpwrap.utils.logger import get_logger

logger = get_logger("httpwrap.worker")


class SinkWorker:
    """
    Owns one bounded subscriber queue and a task draining it.

    - start(): registers the queue (once) and spawns the drain task
    - stop(): handles whatever is still queued, then cancels the task

    Registration has no undo: after stop() the queue stays subscribed,
    fills up and further events for it are dropped.
    """

    name = "sink"

    def __init__(self, registry: SinkRegistry, *, maxsize: int = 64) -> None:
        self.registry = registry
        self.queue: asyncio.Queue[AccessEvent] = asyncio.Queue(maxsize=maxsize)
        self._task: Optional[asyncio.Task[None]] = None
        self._registered = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        if not self._registered:
            self.registry.register_sink(self.queue)
            self._registered = True
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"httpwrap-{self.name}")
        logger.info("SINK_WORKER_STARTED name=%s", self.name)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._drain()
        logger.info("SINK_WORKER_STOPPED name=%s", self.name)

    def handle(self, event: AccessEvent) -> None:
        raise NotImplementedError

    async def _run(self) -> None:
        while True:
            event = await self.queue.get()
            self._handle_safely(event)

    def _drain(self) -> None:
        while True:
            try:
                event = self.queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._handle_safely(event)

    def _handle_safely(self, event: AccessEvent) -> None:
        try:
            self.handle(event)
        except Exception:
            logger.exception("SINK_WORKER_HANDLE_FAILED name=%s", self.name)


class AccessLogWorker(SinkWorker):
    """Default sink: one formatted line per access event."""

    name = "access-log"

    def __init__(
        self,
        registry: SinkRegistry,
        *,
        maxsize: int = 64,
        log_format: str = COMMON_LOG_FMT,
        access_logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(registry, maxsize=maxsize)
        self.log_format = log_format
        self.access_logger = access_logger or get_logger("httpwrap.access")

    def handle(self, event: AccessEvent) -> None:
        self.access_logger.info(event.format(self.log_format))


class CallbackWorker(SinkWorker):
    """Sink that forwards every event to a plain callable."""

    def __init__(
        self,
        registry: SinkRegistry,
        callback: Callable[[AccessEvent], None],
        *,
        name: str = "callback",
        maxsize: int = 64,
    ) -> None:
        super().__init__(registry, maxsize=maxsize)
        self.callback = callback
        self.name = name

    def handle(self, event: AccessEvent) -> None:
        self.callback(event)
