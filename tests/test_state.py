"""Reducer behaviour: whole-snapshot replacement, stale results, notifications."""

from __future__ import annotations

import asyncio
from decimal import Decimal

from flightdesk.application.state import (
    ActionTransitioned,
    BalanceSynced,
    DashboardStore,
    FlightsSynced,
    NotificationPushed,
    NotificationsDismissed,
    ProviderDetected,
    SessionConnected,
    SyncFailed,
    SyncStarted,
    reduce,
)
from flightdesk.domain.models import (
    ActionKind,
    ActionPhase,
    DashboardState,
    ErrorKind,
    NotificationLevel,
    ProviderStatus,
    SyncStatus,
)
from flightdesk.domain.services import build_flight


def _flights(*names: str):
    return {
        index: build_flight(index, name, 10, 10**18, True)
        for index, name in enumerate(names, start=1)
    }


def test_sync_generations_increase():
    state = reduce(DashboardState(), SyncStarted())
    state = reduce(state, SyncStarted())

    assert state.sync.latest_generation == 2
    assert state.sync.status is SyncStatus.SYNCING


def test_flights_replace_the_whole_snapshot():
    state = reduce(DashboardState(), SyncStarted())
    state = reduce(state, FlightsSynced(1, _flights("A", "B", "C")))
    state = reduce(state, SyncStarted())
    state = reduce(state, FlightsSynced(2, _flights("Z")))

    assert state.snapshot.flight_count == 1
    assert list(state.snapshot.flights) == [1]
    assert state.snapshot.flights[1].name == "Z"
    assert state.sync.status is SyncStatus.IDLE


def test_stale_flight_sync_is_dropped():
    state = reduce(DashboardState(), SyncStarted())
    state = reduce(state, SyncStarted())
    state = reduce(state, FlightsSynced(2, _flights("new")))
    state = reduce(state, FlightsSynced(1, _flights("old", "older")))

    assert state.snapshot.flights[1].name == "new"
    assert state.snapshot.flights_generation == 2


def test_balance_sync_converts_and_ignores_stale_results():
    state = reduce(DashboardState(), SyncStarted())
    state = reduce(state, SyncStarted())
    state = reduce(state, BalanceSynced(2, 3 * 10**18))
    state = reduce(state, BalanceSynced(1, 10**18))

    assert state.snapshot.balance_wei == 3 * 10**18
    assert state.snapshot.balance == Decimal(3)


def test_failed_sync_keeps_previous_snapshot():
    state = reduce(DashboardState(), SyncStarted())
    state = reduce(state, FlightsSynced(1, _flights("kept")))
    state = reduce(state, SyncStarted())
    state = reduce(state, SyncFailed(2, ErrorKind.NETWORK_FAILURE, "node down"))

    assert state.snapshot.flights[1].name == "kept"
    assert state.sync.status is SyncStatus.FAILED
    assert state.sync.error_kind is ErrorKind.NETWORK_FAILURE
    assert state.notifications[-1].level is NotificationLevel.ERROR
    assert state.notifications[-1].kind is ErrorKind.NETWORK_FAILURE


def test_reduce_does_not_mutate_its_input():
    original = DashboardState()
    reduce(original, SyncStarted())

    assert original.sync.latest_generation == 0


def test_provider_and_session_transitions():
    state = reduce(DashboardState(), ProviderDetected(available=False))
    assert state.provider_status is ProviderStatus.UNAVAILABLE

    state = reduce(DashboardState(), ProviderDetected(available=True))
    assert state.provider_status is ProviderStatus.DISCONNECTED

    state = reduce(state, SessionConnected("0xabc"))
    assert state.provider_status is ProviderStatus.CONNECTED
    assert state.account == "0xabc"


def test_action_phase_tracking():
    state = reduce(DashboardState(), ActionTransitioned(ActionKind.BOOK, ActionPhase.SUBMITTED))

    assert state.actions[ActionKind.BOOK] is ActionPhase.SUBMITTED
    assert state.actions[ActionKind.DEPOSIT] is ActionPhase.IDLE


def test_notifications_are_bounded_and_dismissable():
    state = DashboardState()
    for index in range(5):
        state = reduce(
            state,
            NotificationPushed(NotificationLevel.INFO, f"message {index}"),
            notification_limit=3,
        )

    assert [n.message for n in state.notifications] == ["message 2", "message 3", "message 4"]
    assert [n.id for n in state.notifications] == [3, 4, 5]

    state = reduce(state, NotificationsDismissed(up_to=4))
    assert [n.id for n in state.notifications] == [5]

    state = reduce(state, NotificationsDismissed())
    assert state.notifications == ()


def test_store_dispatch_returns_the_new_state():
    store = DashboardStore()

    state = asyncio.run(store.dispatch(SyncStarted()))

    assert state is store.state
    assert store.state.sync.latest_generation == 1
