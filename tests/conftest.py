"""Shared in-memory stand-ins for the wallet provider and the contract."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from flightdesk.application.interfaces import (  # noqa: E402
    FlightContractInterface,
    WalletProviderInterface,
)
from flightdesk.application.session import WalletSession  # noqa: E402
from flightdesk.application.state import DashboardStore  # noqa: E402
from flightdesk.config.dependencies import DashboardContext  # noqa: E402
from flightdesk.domain.errors import (  # noqa: E402
    AuthorizationDeniedError,
    CallRevertedError,
    NetworkFailureError,
)

ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ETHER = 10**18


class FakeWalletProvider(WalletProviderInterface):
    def __init__(
        self,
        *,
        available: bool = True,
        accounts: Optional[List[str]] = None,
        authorized: Optional[List[str]] = None,
        deny: bool = False,
    ) -> None:
        self.available = available
        self.accounts = [ACCOUNT] if accounts is None else accounts
        self.authorized = [] if authorized is None else authorized
        self.deny = deny
        self.requests: list[str] = []

    async def is_available(self) -> bool:
        return self.available

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        self.requests.append(method)
        if method == "eth_accounts":
            return list(self.authorized)
        if method == "eth_requestAccounts":
            if self.deny:
                raise AuthorizationDeniedError("User rejected the request.")
            self.authorized = list(self.accounts)
            return list(self.accounts)
        raise NetworkFailureError(f"unsupported method {method}")


class FakeFlightContract(FlightContractInterface):
    """Mimics FlightManagement: seats are paid for out of deposited balances."""

    def __init__(self, account: str = ACCOUNT) -> None:
        self._account = account
        self.flights: list[dict[str, Any]] = []
        self.balances: dict[str, int] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.fail_reads_after: Optional[int] = None
        self.revert_next_receipt = False
        self.offline = False
        self._reads = 0
        self._tx_counter = 0
        self._pending: dict[str, bool] = {}

    @property
    def account(self) -> str:
        return self._account

    def seed_flight(self, name: str, seats: int, price_wei: int, active: bool = True) -> int:
        self.flights.append(
            {"name": name, "seats": seats, "price": price_wei, "active": active}
        )
        return len(self.flights)

    def _read(self, label: str, *args: Any) -> None:
        if self.offline:
            raise NetworkFailureError("connection refused")
        self._reads += 1
        self.calls.append((label, *args))
        if self.fail_reads_after is not None and self._reads > self.fail_reads_after:
            raise NetworkFailureError("node stopped answering")

    def _flight(self, flight_id: int) -> dict[str, Any]:
        if flight_id < 1 or flight_id > len(self.flights):
            raise CallRevertedError(reason="Invalid flight ID")
        return self.flights[flight_id - 1]

    def _submit(self, label: str, *args: Any) -> str:
        if self.offline:
            raise NetworkFailureError("connection refused")
        self.calls.append((label, *args))
        self._tx_counter += 1
        tx_hash = f"0x{self._tx_counter:064x}"
        self._pending[tx_hash] = self.revert_next_receipt
        self.revert_next_receipt = False
        return tx_hash

    async def flight_counter(self) -> int:
        self._read("flightCounter")
        return len(self.flights)

    async def flight_name(self, flight_id: int) -> str:
        self._read("flightNames", flight_id)
        return self._flight(flight_id)["name"]

    async def seats_available(self, flight_id: int) -> int:
        self._read("seatsAvailable", flight_id)
        return self._flight(flight_id)["seats"]

    async def price_per_seat(self, flight_id: int) -> int:
        self._read("pricePerSeat", flight_id)
        return self._flight(flight_id)["price"]

    async def is_active(self, flight_id: int) -> bool:
        self._read("isActive", flight_id)
        return self._flight(flight_id)["active"]

    async def balance_of(self, address: str) -> int:
        self._read("balances", address)
        return self.balances.get(address, 0)

    async def book_seat(self, flight_id: int, seats: int) -> str:
        flight = self._flight(flight_id)
        cost = flight["price"] * seats
        if not flight["active"] or seats > flight["seats"]:
            raise CallRevertedError(reason="Not enough seats available")
        if self.balances.get(self._account, 0) < cost:
            raise CallRevertedError(reason="Insufficient balance")
        tx_hash = self._submit("bookSeat", flight_id, seats)
        if not self._pending[tx_hash]:
            flight["seats"] -= seats
            self.balances[self._account] -= cost
        return tx_hash

    async def cancel_booking(self, flight_id: int, seats: int) -> str:
        flight = self._flight(flight_id)
        tx_hash = self._submit("cancelBooking", flight_id, seats)
        if not self._pending[tx_hash]:
            flight["seats"] += seats
            self.balances[self._account] = (
                self.balances.get(self._account, 0) + flight["price"] * seats
            )
        return tx_hash

    async def deposit_funds(self, amount_wei: int) -> str:
        tx_hash = self._submit("depositFunds", amount_wei)
        if not self._pending[tx_hash]:
            self.balances[self._account] = self.balances.get(self._account, 0) + amount_wei
        return tx_hash

    async def add_flight(self, name: str, seats: int, price_wei: int) -> str:
        tx_hash = self._submit("addFlight", name, seats, price_wei)
        if not self._pending[tx_hash]:
            self.seed_flight(name, seats, price_wei)
        return tx_hash

    async def wait_for_confirmation(self, tx_hash: str) -> None:
        if self._pending.pop(tx_hash):
            raise CallRevertedError(f"Transaction {tx_hash} reverted")


@pytest.fixture
def contract() -> FakeFlightContract:
    return FakeFlightContract()


@pytest.fixture
def provider() -> FakeWalletProvider:
    return FakeWalletProvider()


@pytest.fixture
def store() -> DashboardStore:
    return DashboardStore()


@pytest.fixture
def session(provider: FakeWalletProvider, contract: FakeFlightContract) -> WalletSession:
    return WalletSession(provider, lambda _provider, _account: contract)


@pytest.fixture
def connected_session(session: WalletSession) -> WalletSession:
    session.bind(ACCOUNT)
    return session


@pytest.fixture
def dashboard_context(store: DashboardStore, session: WalletSession) -> DashboardContext:
    return DashboardContext(store=store, session=session)
