import logging
from decimal import Decimal
from typing import Awaitable, Callable, Optional

from flightdesk.application.interfaces import FlightContractInterface
from flightdesk.application.session import WalletSession
from flightdesk.application.state import (
    ActionTransitioned,
    DashboardStore,
    NotificationPushed,
)
from flightdesk.application.use_cases.sync_use_cases import FullSyncUseCase
from flightdesk.domain.errors import DashboardError
from flightdesk.domain.models import ActionKind, ActionOutcome, ActionPhase, NotificationLevel
from flightdesk.domain.services import AmountInput, CurrencyDomainService, FlightDomainService
from flightdesk.telemetry import record_action

logger = logging.getLogger(__name__)

Submit = Callable[[FlightContractInterface], Awaitable[str]]


class ContractActionUseCase:
    """Shared lifecycle of a single state-changing contract call.

    idle -> submitted -> confirmed -> refreshing -> idle on success,
    idle -> submitted -> failed -> idle on error. A failed call leaves the
    snapshot untouched.
    """

    action: ActionKind

    def __init__(self, store: DashboardStore, session: WalletSession):
        self.store = store
        self.session = session

    def _skipped(self) -> ActionOutcome:
        logger.info("%s ignored: no wallet session", self.action.value)
        record_action(self.action.value, "skipped")
        return ActionOutcome(
            action=self.action,
            executed=False,
            phase=ActionPhase.IDLE,
            message="No wallet connected; action ignored",
        )

    async def _transition(self, phase: ActionPhase) -> None:
        await self.store.dispatch(ActionTransitioned(self.action, phase))

    async def _fail(self, outcome: str, notification: NotificationPushed) -> None:
        record_action(self.action.value, outcome)
        await self._transition(ActionPhase.FAILED)
        await self.store.dispatch(notification)
        await self._transition(ActionPhase.IDLE)

    async def _run(self, contract: FlightContractInterface, submit: Submit, success_message: str) -> ActionOutcome:
        await self._transition(ActionPhase.SUBMITTED)
        tx_hash: Optional[str] = None
        try:
            tx_hash = await submit(contract)
            await contract.wait_for_confirmation(tx_hash)
        except DashboardError as exc:
            logger.error("%s failed (tx %s): %s", self.action.value, tx_hash, exc)
            await self._fail(
                exc.kind.value,
                NotificationPushed(NotificationLevel.ERROR, exc.message, exc.kind),
            )
            raise
        except Exception:
            logger.exception("%s failed unexpectedly (tx %s)", self.action.value, tx_hash)
            await self._fail(
                "error",
                NotificationPushed(
                    NotificationLevel.ERROR, f"Unexpected error while running {self.action.value}"
                ),
            )
            raise

        record_action(self.action.value, "confirmed")
        await self._transition(ActionPhase.CONFIRMED)
        await self.store.dispatch(NotificationPushed(NotificationLevel.INFO, success_message))
        logger.info("%s confirmed in %s", self.action.value, tx_hash)

        await self._transition(ActionPhase.REFRESHING)
        try:
            await FullSyncUseCase(self.store, self.session).execute()
        finally:
            await self._transition(ActionPhase.IDLE)

        return ActionOutcome(
            action=self.action,
            executed=True,
            phase=ActionPhase.CONFIRMED,
            tx_hash=tx_hash,
            message=success_message,
        )


class BookSeatsUseCase(ContractActionUseCase):
    """Use case for booking seats on a flight"""

    action = ActionKind.BOOK

    async def execute(self, flight_id: int, seats: int) -> ActionOutcome:
        contract = self.session.contract
        if contract is None:
            return self._skipped()
        flight_id = FlightDomainService.validate_flight_id(flight_id)
        seats = FlightDomainService.validate_seat_count(seats)
        return await self._run(
            contract,
            lambda c: c.book_seat(flight_id, seats),
            f"Successfully booked {seats} seat(s) for flight ID {flight_id}",
        )


class CancelBookingUseCase(ContractActionUseCase):
    """Use case for cancelling booked seats"""

    action = ActionKind.CANCEL

    async def execute(self, flight_id: int, seats: int) -> ActionOutcome:
        contract = self.session.contract
        if contract is None:
            return self._skipped()
        flight_id = FlightDomainService.validate_flight_id(flight_id)
        seats = FlightDomainService.validate_seat_count(seats)
        return await self._run(
            contract,
            lambda c: c.cancel_booking(flight_id, seats),
            f"Successfully cancelled {seats} seat(s) for flight ID {flight_id}",
        )


class DepositFundsUseCase(ContractActionUseCase):
    """Use case for depositing ether into the contract balance"""

    action = ActionKind.DEPOSIT

    async def execute(self, amount: AmountInput) -> ActionOutcome:
        contract = self.session.contract
        if contract is None:
            return self._skipped()
        amount_wei = FlightDomainService.validate_deposit(amount)
        display = CurrencyDomainService.to_display_units(amount_wei)
        return await self._run(
            contract,
            lambda c: c.deposit_funds(amount_wei),
            f"Successfully deposited {_format_ether(display)} ETH",
        )


class CreateFlightUseCase(ContractActionUseCase):
    """Use case for appending a new flight to the contract"""

    action = ActionKind.CREATE_FLIGHT

    async def execute(self, name: str, seats: int, price: AmountInput) -> ActionOutcome:
        contract = self.session.contract
        if contract is None:
            return self._skipped()
        name = FlightDomainService.validate_flight_name(name)
        seats = FlightDomainService.validate_seat_count(seats, field="seats available")
        price_wei = CurrencyDomainService.to_contract_units(price, field="price per seat")
        return await self._run(
            contract,
            lambda c: c.add_flight(name, seats, price_wei),
            f'Flight "{name}" created successfully!',
        )


def _format_ether(value: Decimal) -> str:
    return format(value.normalize(), "f")
