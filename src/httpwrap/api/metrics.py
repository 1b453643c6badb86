# src/httpwrap/api/metrics.py
from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from httpwrap.core.access import AccessEvent
from httpwrap.core.sinks import SinkRegistry


@dataclass(frozen=True)
class MetricKey:
    name: str
    labels: Tuple[Tuple[str, str], ...] = ()

    def render_prom(self) -> str:
        if not self.labels:
            return self.name
        inner = ",".join([f'{k}="{v}"' for k, v in self.labels])
        return f"{self.name}{{{inner}}}"


class Metrics:
    """
    Ultra-light metrics registry (no external deps).
    - Counters only
    - Prometheus text exposition format (subset)

    NOTE:
    - This is process-local. Scrape per process.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Counter[MetricKey] = Counter()

    def inc(self, name: str, *, labels: Dict[str, str] | None = None, value: int = 1) -> None:
        key = MetricKey(name=name, labels=tuple(sorted((labels or {}).items())))
        with self._lock:
            self._counters[key] += int(value)

    def set(self, name: str, value: int, *, labels: Dict[str, str] | None = None) -> None:
        key = MetricKey(name=name, labels=tuple(sorted((labels or {}).items())))
        with self._lock:
            self._counters[key] = int(value)

    def get(self, name: str, *, labels: Dict[str, str] | None = None) -> int:
        key = MetricKey(name=name, labels=tuple(sorted((labels or {}).items())))
        with self._lock:
            return self._counters.get(key, 0)

    def snapshot(self) -> Dict[MetricKey, int]:
        with self._lock:
            return dict(self._counters)

    def to_prometheus_text(self, registry: Optional[SinkRegistry] = None) -> str:
        if registry is not None:
            self.set("httpwrap_access_events_dropped_total", registry.dropped)
        snap = self.snapshot()
        # Minimal exposition: one line per metric series
        lines: list[str] = []
        for k in sorted(snap.keys(), key=lambda x: (x.name, x.labels)):
            lines.append(f"{k.render_prom()} {snap[k]}")
        return "\n".join(lines) + ("\n" if lines else "")


def record_access(m: Metrics, event: AccessEvent) -> None:
    m.inc(
        "httpwrap_http_requests_total",
        labels={"method": event.method, "status": str(event.status_code)},
        value=1,
    )
    m.inc("httpwrap_http_request_duration_ms_total", value=event.duration_ms)
