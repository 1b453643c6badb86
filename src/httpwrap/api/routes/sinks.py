from __future__ import annotations

from fastapi import APIRouter, Request

from httpwrap.api.errors import NotFoundError
from httpwrap.api.schemas.sinks import SinkListResponse, SinkStatus
from httpwrap.core.worker import SinkWorker

router = APIRouter(prefix="/v1/sinks", tags=["sinks"])


def _status(w: SinkWorker) -> SinkStatus:
    return SinkStatus(name=w.name, running=w.running, queued=w.queue.qsize(), maxsize=w.queue.maxsize)


@router.get("", response_model=SinkListResponse)
def list_sinks(request: Request) -> SinkListResponse:
    state = request.app.state
    registry = state.sink_registry
    return SinkListResponse(
        registered=len(registry.sinks()),
        dropped=registry.dropped,
        workers=[_status(w) for w in state.sink_workers],
    )


@router.get("/{name}", response_model=SinkStatus)
def get_sink(name: str, request: Request) -> SinkStatus:
    for w in request.app.state.sink_workers:
        if w.name == name:
            return _status(w)
    raise NotFoundError(f"unknown sink worker: {name}", details={"name": name})
