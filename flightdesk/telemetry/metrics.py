"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "flightdesk_http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "flightdesk_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

ERROR_COUNTER = Counter(
    "flightdesk_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

CONTRACT_CALLS = Counter(
    "flightdesk_contract_calls_total",
    "Contract reads and writes issued against the node",
    ("operation", "outcome"),
)

SYNC_DURATION = Histogram(
    "flightdesk_sync_duration_seconds",
    "Duration of a dashboard sync",
    ("scope", "outcome"),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

SYNCED_FLIGHTS = Gauge(
    "flightdesk_synced_flights",
    "Number of flights in the latest applied snapshot",
)

ACTION_OUTCOMES = Counter(
    "flightdesk_actions_total",
    "Mutating dashboard actions by result",
    ("action", "outcome"),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=str(status_code),
    ).inc()
    REQUEST_LATENCY.labels(method=safe_method, route=safe_route).observe(
        max(duration_seconds, 0)
    )

    if status_code >= 500:
        ERROR_COUNTER.labels(method=safe_method, route=safe_route).inc()


def observe_contract_call(operation: str, outcome: str) -> None:
    CONTRACT_CALLS.labels(operation=operation, outcome=outcome).inc()


def observe_sync(scope: str, outcome: str, duration_seconds: float) -> None:
    SYNC_DURATION.labels(scope=scope, outcome=outcome).observe(max(duration_seconds, 0))


def record_action(action: str, outcome: str) -> None:
    ACTION_OUTCOMES.labels(action=action, outcome=outcome).inc()
