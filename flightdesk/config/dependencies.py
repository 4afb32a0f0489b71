"""Process-wide dashboard wiring exposed as FastAPI dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends

from flightdesk.application.session import WalletSession
from flightdesk.application.state import DashboardStore
from flightdesk.infrastructure.blockchain.web3_adapter import (
    Web3FlightContractFactory,
    Web3WalletProvider,
)

from .settings import Settings, settings


@dataclass
class DashboardContext:
    """The single state store and wallet session shared by all requests"""

    store: DashboardStore
    session: WalletSession


def build_dashboard_context(config: Settings = settings) -> DashboardContext:
    """Create the store and session from injected configuration"""

    provider = None
    if config.chain.rpc_url:
        provider = Web3WalletProvider(
            config.chain.rpc_url,
            request_timeout=config.chain.request_timeout,
        )

    return DashboardContext(
        store=DashboardStore(notification_limit=config.notification_limit),
        session=WalletSession(provider, Web3FlightContractFactory(config.chain)),
    )


_context: Optional[DashboardContext] = None


def get_dashboard_context() -> DashboardContext:
    """Dependency returning the shared dashboard context"""

    global _context
    if _context is None:
        _context = build_dashboard_context()
    return _context


DashboardDep = Annotated[DashboardContext, Depends(get_dashboard_context)]


__all__ = [
    "DashboardContext",
    "DashboardDep",
    "build_dashboard_context",
    "get_dashboard_context",
]
