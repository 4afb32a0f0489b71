"""Application use cases for the wallet session, syncing and contract actions."""

from .action_use_cases import (
    BookSeatsUseCase,
    CancelBookingUseCase,
    CreateFlightUseCase,
    DepositFundsUseCase,
)
from .session_use_cases import ConnectWalletUseCase, DetectProviderUseCase
from .sync_use_cases import (
    FullSyncUseCase,
    RefreshBalanceUseCase,
    RefreshFlightsUseCase,
    fetch_flights,
)

__all__ = [
    "BookSeatsUseCase",
    "CancelBookingUseCase",
    "CreateFlightUseCase",
    "DepositFundsUseCase",
    "ConnectWalletUseCase",
    "DetectProviderUseCase",
    "FullSyncUseCase",
    "RefreshBalanceUseCase",
    "RefreshFlightsUseCase",
    "fetch_flights",
]
