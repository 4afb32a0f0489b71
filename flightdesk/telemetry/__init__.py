"""Telemetry helpers and metrics."""

from .metrics import (
    ACTION_OUTCOMES,
    CONTRACT_CALLS,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SYNC_DURATION,
    SYNCED_FLIGHTS,
    observe_contract_call,
    observe_request,
    observe_sync,
    record_action,
)

__all__ = [
    "ACTION_OUTCOMES",
    "CONTRACT_CALLS",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SYNC_DURATION",
    "SYNCED_FLIGHTS",
    "observe_contract_call",
    "observe_request",
    "observe_sync",
    "record_action",
]
