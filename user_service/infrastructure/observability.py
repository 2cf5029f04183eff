# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

from user_service.shared.config import load_config
from user_service.shared.result import Result

_config = load_config()

REQUEST_LATENCY = Histogram(
    "user_service_request_latency_seconds",
    "Request latency",
    labelnames=("method", "status"),
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
AUTH_OPERATIONS = Counter(
    "user_service_auth_operations_total",
    "Account operations by outcome",
    labelnames=("operation", "outcome"),
)
EVENTS_PUBLISHED = Counter(
    "user_service_events_total",
    "Account change events by delivery status",
    labelnames=("topic", "status"),
)
EVENT_QUEUE_DEPTH = Gauge("user_service_event_queue_depth", "Events awaiting delivery")


def observe_request(method: str, status: int, duration: float) -> None:
    if not _config.observability.metrics_enabled:
        return
    REQUEST_LATENCY.labels(method=method, status=str(status)).observe(duration)


def record_outcome(operation: str, result: Result) -> None:
    if not _config.observability.metrics_enabled:
        return
    outcome = "ok" if result.ok else result.error.code
    AUTH_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def record_event(topic: str, status: str) -> None:
    if not _config.observability.metrics_enabled:
        return
    EVENTS_PUBLISHED.labels(topic=topic, status=status).inc()


__all__ = [
    "AUTH_OPERATIONS",
    "EVENTS_PUBLISHED",
    "EVENT_QUEUE_DEPTH",
    "REQUEST_LATENCY",
    "observe_request",
    "record_event",
    "record_outcome",
]
