from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ProviderStatus(str, Enum):
    UNKNOWN = "unknown"
    UNAVAILABLE = "unavailable"
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    FAILED = "failed"


class ActionKind(str, Enum):
    BOOK = "book"
    CANCEL = "cancel"
    DEPOSIT = "deposit"
    CREATE_FLIGHT = "create_flight"


class ActionPhase(str, Enum):
    IDLE = "idle"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    REFRESHING = "refreshing"
    FAILED = "failed"


class ErrorKind(str, Enum):
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    AUTHORIZATION_DENIED = "authorization_denied"
    CALL_REVERTED = "call_reverted"
    NETWORK_FAILURE = "network_failure"
    INVALID_INPUT = "invalid_input"


class NotificationLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


class Flight(BaseModel):
    """Domain model for a flight recorded in the contract"""
    id: int = Field(ge=1)
    name: str
    seats_available: int = Field(ge=0)
    price_per_seat: Decimal
    price_per_seat_wei: int = Field(ge=0)
    is_active: bool

    model_config = ConfigDict(frozen=True)


class DashboardSnapshot(BaseModel):
    """Client-side projection of the contract, rebuilt on every sync"""
    flights: Dict[int, Flight] = Field(default_factory=dict)
    flight_count: int = 0
    balance_wei: Optional[int] = None
    balance: Optional[Decimal] = None
    flights_generation: int = 0
    balance_generation: int = 0
    synced_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class SyncState(BaseModel):
    status: SyncStatus = SyncStatus.IDLE
    latest_generation: int = 0
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Notification(BaseModel):
    id: int
    level: NotificationLevel
    message: str
    kind: Optional[ErrorKind] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


def _idle_actions() -> Dict[ActionKind, ActionPhase]:
    return {kind: ActionPhase.IDLE for kind in ActionKind}


class DashboardState(BaseModel):
    """Everything the dashboard displays, replaced wholesale by the reducer"""
    provider_status: ProviderStatus = ProviderStatus.UNKNOWN
    account: Optional[str] = None
    snapshot: DashboardSnapshot = Field(default_factory=DashboardSnapshot)
    sync: SyncState = Field(default_factory=SyncState)
    actions: Dict[ActionKind, ActionPhase] = Field(default_factory=_idle_actions)
    notifications: Tuple[Notification, ...] = ()
    next_notification_id: int = 1

    model_config = ConfigDict(frozen=True)


class ActionOutcome(BaseModel):
    """Result of a mutating action as reported back to the caller"""
    action: ActionKind
    executed: bool
    phase: ActionPhase
    tx_hash: Optional[str] = None
    message: Optional[str] = None
