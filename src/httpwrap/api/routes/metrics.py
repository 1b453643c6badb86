# src/httpwrap/api/routes/metrics.py
from __future__ import annotations

from fastapi import APIRouter, Request, Response

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def prom_metrics(request: Request) -> Response:
    """
    Prometheus scrape endpoint.
    """
    state = request.app.state
    body = state.metrics.to_prometheus_text(state.sink_registry)
    return Response(content=body, media_type="text/plain; version=0.0.4; charset=utf-8")
