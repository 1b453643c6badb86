from __future__ import annotations

import logging
from typing import Any

import pytest

fastapi = pytest.importorskip("fastapi")
from fastapi.testclient import TestClient  # noqa: E402

from httpwrap.api.app import create_app  # noqa: E402
from httpwrap.api.config import ApiConfig  # noqa: E402


def test_health_and_access_log_line(caplog: Any) -> None:
    app = create_app(ApiConfig(content_type="application/json"))

    with caplog.at_level(logging.INFO, logger="httpwrap"):
        with TestClient(app) as client:
            resp = client.get("/health", headers={"user-agent": "probe/1.0"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["content_type"] == "application/json"

    lines = [r.getMessage() for r in caplog.records if r.name == "httpwrap.access"]
    assert len(lines) == 1
    assert lines[0].startswith("testclient - - [")
    assert '"GET /health HTTP/1.1" 200 -1 "-" "probe/1.0" ' in lines[0]
    assert lines[0].endswith("ms")


def test_metrics_sink_counts_requests() -> None:
    app = create_app(ApiConfig())

    with TestClient(app) as client:
        client.get("/healthz")
        client.get("/healthz")
        client.get("/nope")

    m = app.state.metrics
    assert m.get("httpwrap_http_requests_total", labels={"method": "GET", "status": "200"}) == 2
    assert m.get("httpwrap_http_requests_total", labels={"method": "GET", "status": "404"}) == 1


def test_metrics_endpoint_exports_drop_counter() -> None:
    app = create_app(ApiConfig())

    with TestClient(app) as client:
        resp = client.get("/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "httpwrap_access_events_dropped_total 0" in resp.text


def test_allowed_methods_from_config() -> None:
    app = create_app(ApiConfig(allowed_methods=["GET"]))

    with TestClient(app) as client:
        resp = client.post("/healthz")

    assert resp.status_code == 405
    assert resp.headers["allow"] == "GET"
    assert resp.json() == {"error": "method not allowed", "status": 405}


def test_accept_type_from_config() -> None:
    app = create_app(ApiConfig(accept_type="application/json"))

    with TestClient(app) as client:
        rejected = client.get("/healthz", headers={"accept": "text/csv"})
        accepted = client.get("/healthz", headers={"accept": "application/json"})

    assert rejected.status_code == 406
    assert rejected.headers["accept"] == "application/json"
    assert accepted.status_code == 200


def test_unhandled_route_error_is_recovered(caplog: Any) -> None:
    app = create_app(ApiConfig())

    @app.get("/crash")
    def crash() -> dict:
        raise RuntimeError("route blew up")

    with caplog.at_level(logging.INFO, logger="httpwrap"):
        with TestClient(app) as client:
            resp = client.get("/crash")
            after = client.get("/healthz")

    assert resp.status_code == 500
    assert after.status_code == 200
    assert any(r.name == "httpwrap.handler" and "route blew up" in r.getMessage() for r in caplog.records)
    access = [r.getMessage() for r in caplog.records if r.name == "httpwrap.access"]
    assert len(access) == 2
    assert '"GET /crash HTTP/1.1" 500' in access[0]


def test_sink_workers_listing_and_unknown_sink() -> None:
    app = create_app(ApiConfig(sink_queue_size=16))

    with TestClient(app) as client:
        listing = client.get("/v1/sinks")
        one = client.get("/v1/sinks/metrics")
        missing = client.get("/v1/sinks/nope")

    assert listing.status_code == 200
    data = listing.json()
    assert data["registered"] == 2
    assert {w["name"] for w in data["workers"]} == {"access-log", "metrics"}
    assert all(w["running"] and w["maxsize"] == 16 for w in data["workers"])

    assert one.json()["name"] == "metrics"

    assert missing.status_code == 404
    assert missing.json()["code"] == "not_found"
