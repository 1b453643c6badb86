from __future__ import annotations

from fastapi import APIRouter, Request

from httpwrap import __version__
from httpwrap.api.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """
    Human/debug-friendly health: includes the wrapping handler's config.
    """
    cfg = request.app.state.config
    return HealthResponse(
        version=__version__,
        content_type=cfg.content_type,
        accept_type=cfg.accept_type,
        allowed_methods=list(cfg.allowed_methods),
    )


@router.get("/healthz")
def healthz() -> dict:
    """
    Liveness: must be fast and never block on external deps.
    """
    return {"ok": True}
