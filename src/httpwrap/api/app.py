# src/httpwrap/api/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI

from httpwrap import __version__
from httpwrap.api.config import ApiConfig, load_config
from httpwrap.api.metrics import Metrics, record_access
from httpwrap.api.middlewares.error_handler import install_error_handlers
from httpwrap.api.routes import api_router
from httpwrap.core.handler import WrappingHandler
from httpwrap.core.sinks import SinkRegistry
from httpwrap.core.worker import AccessLogWorker, CallbackWorker, SinkWorker
from httpwrap.utils.logger import configure_logging, get_logger, resolve_level

logger = get_logger("httpwrap")


def _build_workers(cfg: ApiConfig, registry: SinkRegistry, metrics: Metrics) -> List[SinkWorker]:
    return [
        AccessLogWorker(registry, maxsize=cfg.sink_queue_size, log_format=cfg.log_format),
        CallbackWorker(
            registry,
            lambda event: record_access(metrics, event),
            name="metrics",
            maxsize=cfg.sink_queue_size,
        ),
    ]


def create_app(cfg: Optional[ApiConfig] = None) -> FastAPI:
    cfg = cfg or load_config()

    # The app owns its sink registry; workers subscribe on startup.
    registry = SinkRegistry()
    metrics = Metrics()
    workers = _build_workers(cfg, registry, metrics)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        # Process-level logging baseline:
        # - console -> stderr at cfg.log_level
        # - optional process log file -> cfg.log_path (if set)
        configure_logging(
            logger_name="httpwrap",
            console_level=resolve_level(cfg.log_level),
            file_level=logging.DEBUG,
            log_path=(cfg.log_path or None),
        )
        for w in workers:
            w.start()
        logger.info("API_STARTUP")
        try:
            yield
        finally:
            for w in workers:
                await w.stop()
            logger.info("API_SHUTDOWN")

    app = FastAPI(
        title="httpwrap",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = cfg
    app.state.sink_registry = registry
    app.state.metrics = metrics
    app.state.sink_workers = workers

    # Access log + recovery + admission guard around everything below it
    app.add_middleware(
        WrappingHandler,
        content_type=cfg.content_type,
        registry=registry,
        accept=cfg.accept_type,
        allow=cfg.allowed_methods,
        negotiation_header=cfg.negotiation_header,
    )

    # Error handlers (stable error JSON for typed API errors)
    install_error_handlers(app)

    # Routers
    app.include_router(api_router)

    return app


app = create_app()
