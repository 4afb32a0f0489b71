from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from flightdesk.domain.models import (
    ActionOutcome,
    DashboardState,
    Flight,
    Notification,
    ProviderStatus,
)

_STATUS_MESSAGES = {
    ProviderStatus.UNKNOWN: "Wallet provider has not been probed yet",
    ProviderStatus.UNAVAILABLE: "Please install or start a wallet provider to use this app.",
    ProviderStatus.DISCONNECTED: "Connect your wallet to continue.",
}


def format_ether(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return format(value.normalize(), "f")


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None


class BookingRequest(BaseModel):
    """Request DTO for booking or cancelling seats"""

    seats: int


class FlightCreateRequest(BaseModel):
    """Request DTO for creating a flight; price is in ether"""

    name: str
    seats: int
    price: Union[str, int]


class DepositRequest(BaseModel):
    """Request DTO for a deposit; amount is in ether"""

    amount: Union[str, int]


class FlightResponse(BaseModel):
    id: int
    name: str
    seats_available: int
    price_per_seat: str
    price_per_seat_wei: int
    is_active: bool

    @classmethod
    def from_domain(cls, flight: Flight) -> "FlightResponse":
        return cls(
            id=flight.id,
            name=flight.name,
            seats_available=flight.seats_available,
            price_per_seat=format_ether(flight.price_per_seat),
            price_per_seat_wei=flight.price_per_seat_wei,
            is_active=flight.is_active,
        )


class SessionResponse(BaseModel):
    provider_status: str
    account: Optional[str] = None
    connected: bool
    message: Optional[str] = None

    @classmethod
    def from_state(cls, state: DashboardState) -> "SessionResponse":
        return cls(
            provider_status=state.provider_status.value,
            account=state.account,
            connected=state.provider_status is ProviderStatus.CONNECTED,
            message=_STATUS_MESSAGES.get(state.provider_status),
        )


class BalanceResponse(BaseModel):
    account: Optional[str] = None
    balance: str
    balance_wei: int

    @classmethod
    def from_state(cls, state: DashboardState) -> "BalanceResponse":
        snapshot = state.snapshot
        return cls(
            account=state.account,
            balance=format_ether(snapshot.balance) or "0",
            balance_wei=snapshot.balance_wei or 0,
        )


class SyncResponse(BaseModel):
    status: str
    latest_generation: int
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    synced_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    id: int
    level: str
    message: str
    kind: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            level=notification.level.value,
            message=notification.message,
            kind=notification.kind.value if notification.kind else None,
            created_at=notification.created_at,
        )


class DashboardResponse(BaseModel):
    """Everything the dashboard renders, in one payload"""

    session: SessionResponse
    balance: BalanceResponse
    flight_count: int
    flights: List[FlightResponse]
    sync: SyncResponse
    actions: Dict[str, str]
    notifications: List[NotificationResponse]

    @classmethod
    def from_state(cls, state: DashboardState) -> "DashboardResponse":
        snapshot = state.snapshot
        return cls(
            session=SessionResponse.from_state(state),
            balance=BalanceResponse.from_state(state),
            flight_count=snapshot.flight_count,
            flights=[
                FlightResponse.from_domain(snapshot.flights[flight_id])
                for flight_id in sorted(snapshot.flights)
            ],
            sync=SyncResponse(
                status=state.sync.status.value,
                latest_generation=state.sync.latest_generation,
                error_kind=state.sync.error_kind.value if state.sync.error_kind else None,
                error_message=state.sync.error_message,
                synced_at=snapshot.synced_at,
            ),
            actions={kind.value: phase.value for kind, phase in state.actions.items()},
            notifications=[
                NotificationResponse.from_domain(n) for n in state.notifications
            ],
        )


class ActionResponse(BaseModel):
    action: str
    executed: bool
    phase: str
    tx_hash: Optional[str] = None
    message: Optional[str] = None
    dashboard: DashboardResponse

    @classmethod
    def from_outcome(cls, outcome: ActionOutcome, state: DashboardState) -> "ActionResponse":
        return cls(
            action=outcome.action.value,
            executed=outcome.executed,
            phase=outcome.phase.value,
            tx_hash=outcome.tx_hash,
            message=outcome.message,
            dashboard=DashboardResponse.from_state(state),
        )
