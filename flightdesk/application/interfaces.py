from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional


class WalletProviderInterface(ABC):
    """Access to the accounts a wallet provider is willing to expose"""

    @abstractmethod
    async def is_available(self) -> bool:
        ...

    @abstractmethod
    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        ...


class FlightContractInterface(ABC):
    """Signing-capable handle on the deployed FlightManagement contract"""

    @property
    @abstractmethod
    def account(self) -> str:
        ...

    @abstractmethod
    async def flight_counter(self) -> int:
        ...

    @abstractmethod
    async def flight_name(self, flight_id: int) -> str:
        ...

    @abstractmethod
    async def seats_available(self, flight_id: int) -> int:
        ...

    @abstractmethod
    async def price_per_seat(self, flight_id: int) -> int:
        ...

    @abstractmethod
    async def is_active(self, flight_id: int) -> bool:
        ...

    @abstractmethod
    async def balance_of(self, address: str) -> int:
        ...

    @abstractmethod
    async def book_seat(self, flight_id: int, seats: int) -> str:
        ...

    @abstractmethod
    async def cancel_booking(self, flight_id: int, seats: int) -> str:
        ...

    @abstractmethod
    async def deposit_funds(self, amount_wei: int) -> str:
        ...

    @abstractmethod
    async def add_flight(self, name: str, seats: int, price_wei: int) -> str:
        ...

    @abstractmethod
    async def wait_for_confirmation(self, tx_hash: str) -> None:
        """Block until the transaction is mined; raise if it reverted"""
        ...


ContractFactory = Callable[[WalletProviderInterface, str], FlightContractInterface]
