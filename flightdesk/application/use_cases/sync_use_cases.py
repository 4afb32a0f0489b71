import logging
import time
from typing import Any, Awaitable, Callable, Dict, List

from flightdesk.application.interfaces import FlightContractInterface
from flightdesk.application.session import WalletSession
from flightdesk.application.state import (
    BalanceSynced,
    DashboardEvent,
    DashboardStore,
    FlightsSynced,
    SyncFailed,
    SyncStarted,
)
from flightdesk.domain.errors import DashboardError
from flightdesk.domain.models import DashboardState, Flight
from flightdesk.domain.services import build_flight, index_flights
from flightdesk.telemetry import SYNCED_FLIGHTS, observe_sync

logger = logging.getLogger(__name__)


async def fetch_flights(contract: FlightContractInterface) -> Dict[int, Flight]:
    """Read the flight counter once, then every flight from 1 to that count.

    Fetches run one after another; the result reflects whatever each
    individual read returned, with no consistency across reads.
    """
    count = await contract.flight_counter()
    flights: List[Flight] = []
    for flight_id in range(1, count + 1):
        name = await contract.flight_name(flight_id)
        seats = await contract.seats_available(flight_id)
        price_wei = await contract.price_per_seat(flight_id)
        active = await contract.is_active(flight_id)
        flights.append(build_flight(flight_id, name, seats, price_wei, active))
    return index_flights(flights)


async def _timed_read(scope: str, read: Callable[[], Awaitable[Any]]) -> Any:
    start_time = time.perf_counter()
    try:
        result = await read()
    except DashboardError:
        observe_sync(scope, "failed", time.perf_counter() - start_time)
        raise
    observe_sync(scope, "ok", time.perf_counter() - start_time)
    return result


class RefreshFlightsUseCase:
    """Use case for rebuilding the flight map from the contract"""

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    async def execute(self) -> DashboardState:
        """Full flight re-sync; a no-op without a contract handle"""
        contract = self.session.contract
        if contract is None:
            logger.debug("Flight refresh skipped: no wallet session")
            return self.store.state

        started = await self.store.dispatch(SyncStarted())
        generation = started.sync.latest_generation
        try:
            flights = await _timed_read("flights", lambda: fetch_flights(contract))
        except DashboardError as exc:
            logger.warning("Flight sync %s failed: %s", generation, exc)
            return await self.store.dispatch(SyncFailed(generation, exc.kind, exc.message))

        state = await self.store.dispatch(FlightsSynced(generation, flights))
        SYNCED_FLIGHTS.set(state.snapshot.flight_count)
        logger.info("Flight sync %s loaded %d flight(s)", generation, len(flights))
        return state


class RefreshBalanceUseCase:
    """Use case for reading the connected account's deposited balance"""

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    async def execute(self) -> DashboardState:
        contract = self.session.contract
        if contract is None:
            logger.debug("Balance refresh skipped: no wallet session")
            return self.store.state

        started = await self.store.dispatch(SyncStarted())
        generation = started.sync.latest_generation
        try:
            balance_wei = await _timed_read(
                "balance", lambda: contract.balance_of(contract.account)
            )
        except DashboardError as exc:
            logger.warning("Balance sync %s failed: %s", generation, exc)
            return await self.store.dispatch(SyncFailed(generation, exc.kind, exc.message))

        return await self.store.dispatch(BalanceSynced(generation, balance_wei))


class FullSyncUseCase:
    """Use case for refreshing both the flight map and the balance.

    Both reads share one sync generation. Successful reads are applied
    first and failures last, so a partial failure leaves the sync marked
    failed while the read that did succeed still lands.
    """

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    async def execute(self) -> DashboardState:
        contract = self.session.contract
        if contract is None:
            logger.debug("Full sync skipped: no wallet session")
            return self.store.state

        started = await self.store.dispatch(SyncStarted())
        generation = started.sync.latest_generation
        applied: List[DashboardEvent] = []
        failures: List[DashboardEvent] = []

        try:
            flights = await _timed_read("flights", lambda: fetch_flights(contract))
            applied.append(FlightsSynced(generation, flights))
        except DashboardError as exc:
            logger.warning("Flight sync %s failed: %s", generation, exc)
            failures.append(SyncFailed(generation, exc.kind, exc.message))

        try:
            balance_wei = await _timed_read(
                "balance", lambda: contract.balance_of(contract.account)
            )
            applied.append(BalanceSynced(generation, balance_wei))
        except DashboardError as exc:
            logger.warning("Balance sync %s failed: %s", generation, exc)
            failures.append(SyncFailed(generation, exc.kind, exc.message))

        state = self.store.state
        for event in applied + failures:
            state = await self.store.dispatch(event)
            if isinstance(event, FlightsSynced):
                SYNCED_FLIGHTS.set(state.snapshot.flight_count)
        return state
