"""Dashboard state events, the reducer that applies them and the store that owns them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from flightdesk.domain.models import (
    ActionKind,
    ActionPhase,
    DashboardState,
    ErrorKind,
    Flight,
    Notification,
    NotificationLevel,
    ProviderStatus,
    SyncStatus,
)
from flightdesk.domain.services import CurrencyDomainService

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_LIMIT = 20


@dataclass(frozen=True)
class ProviderDetected:
    available: bool


@dataclass(frozen=True)
class SessionConnected:
    account: str


@dataclass(frozen=True)
class SyncStarted:
    """Reserve the next sync generation."""


@dataclass(frozen=True)
class FlightsSynced:
    generation: int
    flights: Dict[int, Flight]


@dataclass(frozen=True)
class BalanceSynced:
    generation: int
    balance_wei: int


@dataclass(frozen=True)
class SyncFailed:
    generation: int
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ActionTransitioned:
    action: ActionKind
    phase: ActionPhase


@dataclass(frozen=True)
class NotificationPushed:
    level: NotificationLevel
    message: str
    kind: Optional[ErrorKind] = None


@dataclass(frozen=True)
class NotificationsDismissed:
    up_to: Optional[int] = None


DashboardEvent = Union[
    ProviderDetected,
    SessionConnected,
    SyncStarted,
    FlightsSynced,
    BalanceSynced,
    SyncFailed,
    ActionTransitioned,
    NotificationPushed,
    NotificationsDismissed,
]


def _push_notification(
    state: DashboardState,
    level: NotificationLevel,
    message: str,
    kind: Optional[ErrorKind],
    now: datetime,
    limit: int,
) -> DashboardState:
    notification = Notification(
        id=state.next_notification_id,
        level=level,
        message=message,
        kind=kind,
        created_at=now,
    )
    notifications = (state.notifications + (notification,))[-limit:]
    return state.model_copy(
        update={
            "notifications": notifications,
            "next_notification_id": state.next_notification_id + 1,
        }
    )


def _settle_sync(state: DashboardState, generation: int) -> DashboardState:
    # A failure recorded for the latest generation stays until a new sync starts.
    if generation != state.sync.latest_generation or state.sync.status is not SyncStatus.SYNCING:
        return state
    return state.model_copy(
        update={
            "sync": state.sync.model_copy(
                update={"status": SyncStatus.IDLE, "error_kind": None, "error_message": None}
            )
        }
    )


def reduce(
    state: DashboardState,
    event: DashboardEvent,
    *,
    now: Optional[datetime] = None,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> DashboardState:
    """Return the state that results from applying ``event``.

    Sync results carry the generation they were started with. A result older
    than the one already applied is dropped, so a slow refresh can never
    overwrite the output of a newer one.
    """

    now = now or datetime.now(timezone.utc)

    if isinstance(event, ProviderDetected):
        if not event.available:
            return state.model_copy(
                update={"provider_status": ProviderStatus.UNAVAILABLE, "account": None}
            )
        status = ProviderStatus.CONNECTED if state.account else ProviderStatus.DISCONNECTED
        return state.model_copy(update={"provider_status": status})

    if isinstance(event, SessionConnected):
        return state.model_copy(
            update={"provider_status": ProviderStatus.CONNECTED, "account": event.account}
        )

    if isinstance(event, SyncStarted):
        sync = state.sync.model_copy(
            update={
                "status": SyncStatus.SYNCING,
                "latest_generation": state.sync.latest_generation + 1,
            }
        )
        return state.model_copy(update={"sync": sync})

    if isinstance(event, FlightsSynced):
        if event.generation < state.snapshot.flights_generation:
            logger.debug(
                "Dropping stale flight sync %s (applied %s)",
                event.generation,
                state.snapshot.flights_generation,
            )
            return state
        snapshot = state.snapshot.model_copy(
            update={
                "flights": dict(event.flights),
                "flight_count": len(event.flights),
                "flights_generation": event.generation,
                "synced_at": now,
            }
        )
        return _settle_sync(state.model_copy(update={"snapshot": snapshot}), event.generation)

    if isinstance(event, BalanceSynced):
        if event.generation < state.snapshot.balance_generation:
            logger.debug(
                "Dropping stale balance sync %s (applied %s)",
                event.generation,
                state.snapshot.balance_generation,
            )
            return state
        snapshot = state.snapshot.model_copy(
            update={
                "balance_wei": event.balance_wei,
                "balance": CurrencyDomainService.to_display_units(event.balance_wei),
                "balance_generation": event.generation,
                "synced_at": now,
            }
        )
        return _settle_sync(state.model_copy(update={"snapshot": snapshot}), event.generation)

    if isinstance(event, SyncFailed):
        if event.generation == state.sync.latest_generation:
            sync = state.sync.model_copy(
                update={
                    "status": SyncStatus.FAILED,
                    "error_kind": event.kind,
                    "error_message": event.message,
                }
            )
            state = state.model_copy(update={"sync": sync})
        return _push_notification(
            state,
            NotificationLevel.ERROR,
            f"Sync failed: {event.message}",
            event.kind,
            now,
            notification_limit,
        )

    if isinstance(event, ActionTransitioned):
        actions = dict(state.actions)
        actions[event.action] = event.phase
        return state.model_copy(update={"actions": actions})

    if isinstance(event, NotificationPushed):
        return _push_notification(
            state, event.level, event.message, event.kind, now, notification_limit
        )

    if isinstance(event, NotificationsDismissed):
        if event.up_to is None:
            remaining = ()
        else:
            remaining = tuple(n for n in state.notifications if n.id > event.up_to)
        return state.model_copy(update={"notifications": remaining})

    raise TypeError(f"Unsupported dashboard event: {event!r}")


class DashboardStore:
    """Single writer for the dashboard state.

    Every change goes through :meth:`dispatch`, which applies the pure
    :func:`reduce` under a lock so concurrent request handlers cannot
    interleave partial updates.
    """

    def __init__(
        self,
        initial: Optional[DashboardState] = None,
        *,
        notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> None:
        self._state = initial or DashboardState()
        self._notification_limit = notification_limit
        self._lock = asyncio.Lock()

    @property
    def state(self) -> DashboardState:
        return self._state

    async def dispatch(self, event: DashboardEvent) -> DashboardState:
        async with self._lock:
            self._state = reduce(
                self._state,
                event,
                notification_limit=self._notification_limit,
            )
            return self._state


__all__ = [
    "ActionTransitioned",
    "BalanceSynced",
    "DashboardEvent",
    "DashboardStore",
    "FlightsSynced",
    "NotificationPushed",
    "NotificationsDismissed",
    "ProviderDetected",
    "SessionConnected",
    "SyncFailed",
    "SyncStarted",
    "reduce",
]
