"""Error taxonomy shared by the session, sync and action layers."""

from __future__ import annotations

from typing import Optional

from .models import ErrorKind


class DashboardError(RuntimeError):
    """Base class for failures the dashboard reports to the user."""

    kind: ErrorKind = ErrorKind.NETWORK_FAILURE
    default_message = "Dashboard operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ProviderUnavailableError(DashboardError):
    """No wallet provider is configured or reachable."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE
    default_message = "A wallet provider is required to connect"


class AuthorizationDeniedError(DashboardError):
    """The wallet provider refused to expose an account or sign."""

    kind = ErrorKind.AUTHORIZATION_DENIED
    default_message = "Wallet authorization was denied"


class CallRevertedError(DashboardError):
    """The contract rejected a call."""

    kind = ErrorKind.CALL_REVERTED
    default_message = "Contract call reverted"

    def __init__(self, message: Optional[str] = None, *, reason: Optional[str] = None) -> None:
        self.reason = reason
        if message is None and reason:
            message = f"Contract call reverted: {reason}"
        super().__init__(message)


class NetworkFailureError(DashboardError):
    """The node could not be reached or did not answer in time."""

    kind = ErrorKind.NETWORK_FAILURE
    default_message = "Blockchain node is unreachable"


class InvalidInputError(DashboardError, ValueError):
    """User input failed client-side bounds checks."""

    kind = ErrorKind.INVALID_INPUT
    default_message = "Invalid input"


__all__ = [
    "DashboardError",
    "ProviderUnavailableError",
    "AuthorizationDeniedError",
    "CallRevertedError",
    "NetworkFailureError",
    "InvalidInputError",
]
