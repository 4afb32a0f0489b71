import logging
from typing import Any, List, Optional

from flightdesk.application.session import WalletSession
from flightdesk.application.state import (
    DashboardStore,
    NotificationPushed,
    ProviderDetected,
    SessionConnected,
)
from flightdesk.application.use_cases.sync_use_cases import FullSyncUseCase
from flightdesk.domain.errors import (
    AuthorizationDeniedError,
    DashboardError,
    ProviderUnavailableError,
)
from flightdesk.domain.models import DashboardState, NotificationLevel

logger = logging.getLogger(__name__)


def first_account(accounts: Optional[List[Any]]) -> Optional[str]:
    """Only the first account a provider returns is ever used"""
    if not accounts:
        return None
    return str(accounts[0])


class DetectProviderUseCase:
    """Use case for probing the wallet provider at startup"""

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    async def execute(self) -> DashboardState:
        provider = self.session.provider
        if provider is None or not await provider.is_available():
            logger.warning("No wallet provider available")
            return await self.store.dispatch(ProviderDetected(available=False))

        state = await self.store.dispatch(ProviderDetected(available=True))
        try:
            accounts = await provider.request("eth_accounts")
        except DashboardError as exc:
            logger.warning("Could not list authorized accounts: %s", exc)
            return state

        account = first_account(accounts)
        if account is None:
            logger.info("Wallet provider found, no account authorized yet")
            return state

        logger.info("Restoring wallet session for %s", account)
        self.session.bind(account)
        await self.store.dispatch(SessionConnected(account))
        return await FullSyncUseCase(self.store, self.session).execute()


class ConnectWalletUseCase:
    """Use case for an explicit wallet connection request"""

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    async def execute(self) -> DashboardState:
        provider = self.session.provider
        if provider is None or not await provider.is_available():
            await self.store.dispatch(ProviderDetected(available=False))
            raise ProviderUnavailableError()

        try:
            accounts = await provider.request("eth_requestAccounts")
        except DashboardError as exc:
            await self._notify_failure(exc)
            raise

        account = first_account(accounts)
        if account is None:
            denied = AuthorizationDeniedError("No account was authorized")
            await self._notify_failure(denied)
            raise denied

        self.session.bind(account)
        await self.store.dispatch(SessionConnected(account))
        logger.info("Wallet connected: %s", account)
        return await FullSyncUseCase(self.store, self.session).execute()

    async def _notify_failure(self, exc: DashboardError) -> None:
        logger.warning("Wallet connection failed: %s", exc)
        await self.store.dispatch(
            NotificationPushed(NotificationLevel.ERROR, exc.message, exc.kind)
        )
