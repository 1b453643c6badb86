from __future__ import annotations

from fastapi import APIRouter

# Root router to be included by app.py
api_router = APIRouter()

from httpwrap.api.routes.health import router as health_router  # noqa: E402
from httpwrap.api.routes.metrics import router as metrics_router  # noqa: E402
from httpwrap.api.routes.sinks import router as sinks_router  # noqa: E402

api_router.include_router(health_router)
api_router.include_router(metrics_router)
api_router.include_router(sinks_router)
