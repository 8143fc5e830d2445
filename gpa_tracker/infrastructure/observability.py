# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

from gpa_tracker.shared.config import load_config

_config = load_config()

REQUEST_LATENCY = Histogram(
    "gpa_tracker_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
REQUEST_COUNTER = Counter(
    "gpa_tracker_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
RESET_TOKENS_GAUGE = Gauge("gpa_tracker_reset_tokens", "Outstanding password reset tokens")


def metrics_enabled() -> bool:
    return _config.observability.metrics_enabled


def observe_request(endpoint: str, status: int, duration: float) -> None:
    if not metrics_enabled():
        return
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def configure_metrics(app: Flask) -> None:
    if not metrics_enabled():
        return

    @app.before_request
    def _start_timer() -> None:
        g.metrics_start = time.perf_counter()

    @app.after_request
    def _observe(response: Response) -> Response:
        start = getattr(g, "metrics_start", None)
        if start is not None:
            observe_request(
                request.endpoint or "unmatched",
                response.status_code,
                time.perf_counter() - start,
            )
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), headers={"Content-Type": CONTENT_TYPE_LATEST})


__all__ = [
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "RESET_TOKENS_GAUGE",
    "configure_metrics",
    "metrics_enabled",
    "metrics_response",
    "observe_request",
]
