"""web3.py adapters for the wallet provider and the FlightManagement contract."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import (
    ContractLogicError,
    ProviderConnectionError,
    TimeExhausted,
    Web3Exception,
    Web3RPCError,
)

from flightdesk.application.interfaces import FlightContractInterface, WalletProviderInterface
from flightdesk.config.settings import ChainConfig
from flightdesk.domain.errors import (
    AuthorizationDeniedError,
    CallRevertedError,
    DashboardError,
    NetworkFailureError,
)
from flightdesk.telemetry import observe_contract_call

from .abi import load_contract_abi

logger = logging.getLogger(__name__)

USER_REJECTED_CODE = 4001
UNSUPPORTED_METHOD_CODES = (-32601, -32004)
_REVERT_PREFIX = "execution reverted"

TRANSPORT_ERRORS = (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError)


def _rpc_error(exc: Exception) -> dict[str, Any]:
    response = getattr(exc, "rpc_response", None) or {}
    error = response.get("error") if isinstance(response, dict) else None
    return error if isinstance(error, dict) else {}


def _revert_reason(message: str) -> Optional[str]:
    text = (message or "").strip()
    if text.lower().startswith(_REVERT_PREFIX):
        text = text[len(_REVERT_PREFIX):].lstrip(": ").strip()
    return text or None


def classify_web3_error(exc: BaseException) -> DashboardError:
    """Map a web3/transport failure onto the dashboard error taxonomy."""

    if isinstance(exc, DashboardError):
        return exc

    if isinstance(exc, ContractLogicError):
        return CallRevertedError(reason=_revert_reason(getattr(exc, "message", None) or str(exc)))

    if isinstance(exc, TimeExhausted):
        return NetworkFailureError(f"Timed out waiting for confirmation: {exc}")

    if isinstance(exc, Web3RPCError):
        error = _rpc_error(exc)
        message = str(error.get("message") or exc)
        if error.get("code") == USER_REJECTED_CODE:
            return AuthorizationDeniedError(message)
        if _REVERT_PREFIX in message.lower():
            return CallRevertedError(reason=_revert_reason(message))
        return NetworkFailureError(message)

    if isinstance(exc, (ProviderConnectionError, aiohttp.ClientError, asyncio.TimeoutError, OSError)):
        return NetworkFailureError(f"Blockchain node is unreachable: {exc}")

    return NetworkFailureError(str(exc) or exc.__class__.__name__)


class UnsupportedMethodError(NetworkFailureError):
    """The node does not implement the requested JSON-RPC method."""


class Web3WalletProvider(WalletProviderInterface):
    """Wallet provider backed by a JSON-RPC node holding unlocked accounts"""

    def __init__(self, rpc_url: str, *, request_timeout: float = 10.0) -> None:
        self.rpc_url = rpc_url
        self.web3 = AsyncWeb3(
            AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=request_timeout)},
            )
        )

    async def is_available(self) -> bool:
        available = await self.web3.is_connected()
        if not available:
            logger.warning("Wallet provider at %s is not reachable", self.rpc_url)
        return available

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send a raw JSON-RPC request and return its result"""

        if method == "eth_requestAccounts":
            try:
                return await self._request(method, params)
            except UnsupportedMethodError:
                # Plain nodes expose their unlocked accounts without a prompt.
                logger.debug("eth_requestAccounts unsupported, using eth_accounts")
                return await self._request("eth_accounts", params)
        return await self._request(method, params)

    async def _request(self, method: str, params: Optional[List[Any]]) -> Any:
        try:
            response = await self.web3.provider.make_request(method, params or [])
        except TRANSPORT_ERRORS as exc:
            raise classify_web3_error(exc) from exc

        error = response.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else str(error)
            if code == USER_REJECTED_CODE:
                raise AuthorizationDeniedError(message)
            if code in UNSUPPORTED_METHOD_CODES:
                raise UnsupportedMethodError(message)
            raise NetworkFailureError(message)
        return response.get("result")


class Web3FlightContract(FlightContractInterface):
    """FlightManagement contract handle sending transactions from one account"""

    def __init__(
        self,
        web3: AsyncWeb3,
        address: str,
        abi: List[dict[str, Any]],
        account: str,
        *,
        receipt_timeout: float = 120.0,
        receipt_poll_interval: float = 0.5,
    ) -> None:
        self._web3 = web3
        self._account = Web3.to_checksum_address(account)
        self._contract = web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        self._receipt_timeout = receipt_timeout
        self._receipt_poll_interval = receipt_poll_interval

    @property
    def account(self) -> str:
        return self._account

    async def _call(self, function_name: str, *args: Any) -> Any:
        try:
            result = await getattr(self._contract.functions, function_name)(*args).call()
        except TRANSPORT_ERRORS as exc:
            observe_contract_call(function_name, "error")
            logger.warning("%s%s failed: %s", function_name, args, exc)
            raise classify_web3_error(exc) from exc
        observe_contract_call(function_name, "ok")
        logger.debug("%s%s -> %r", function_name, args, result)
        return result

    async def _transact(self, function_name: str, *args: Any, value: int = 0) -> str:
        transaction: dict[str, Any] = {"from": self._account}
        if value:
            transaction["value"] = value
        try:
            tx_hash = await getattr(self._contract.functions, function_name)(*args).transact(
                transaction
            )
        except TRANSPORT_ERRORS as exc:
            observe_contract_call(function_name, "error")
            logger.warning("%s%s rejected: %s", function_name, args, exc)
            raise classify_web3_error(exc) from exc
        observe_contract_call(function_name, "submitted")
        tx_hex = Web3.to_hex(tx_hash)
        logger.info("%s%s submitted as %s", function_name, args, tx_hex)
        return tx_hex

    async def flight_counter(self) -> int:
        return int(await self._call("flightCounter"))

    async def flight_name(self, flight_id: int) -> str:
        return str(await self._call("flightNames", flight_id))

    async def seats_available(self, flight_id: int) -> int:
        return int(await self._call("seatsAvailable", flight_id))

    async def price_per_seat(self, flight_id: int) -> int:
        return int(await self._call("pricePerSeat", flight_id))

    async def is_active(self, flight_id: int) -> bool:
        return bool(await self._call("isActive", flight_id))

    async def balance_of(self, address: str) -> int:
        return int(await self._call("balances", Web3.to_checksum_address(address)))

    async def book_seat(self, flight_id: int, seats: int) -> str:
        return await self._transact("bookSeat", flight_id, seats)

    async def cancel_booking(self, flight_id: int, seats: int) -> str:
        return await self._transact("cancelBooking", flight_id, seats)

    async def deposit_funds(self, amount_wei: int) -> str:
        return await self._transact("depositFunds", value=amount_wei)

    async def add_flight(self, name: str, seats: int, price_wei: int) -> str:
        return await self._transact("addFlight", name, seats, price_wei)

    async def wait_for_confirmation(self, tx_hash: str) -> None:
        try:
            receipt = await self._web3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self._receipt_timeout,
                poll_latency=self._receipt_poll_interval,
            )
        except TRANSPORT_ERRORS as exc:
            raise classify_web3_error(exc) from exc

        if receipt["status"] == 0:
            observe_contract_call("receipt", "reverted")
            raise CallRevertedError(f"Transaction {tx_hash} reverted")
        observe_contract_call("receipt", "confirmed")
        logger.info("%s mined in block %s", tx_hash, receipt["blockNumber"])


class Web3FlightContractFactory:
    """Builds contract handles for accounts exposed by a Web3WalletProvider"""

    def __init__(self, chain: ChainConfig) -> None:
        self._chain = chain
        self._abi = load_contract_abi(chain.abi_path)

    def __call__(self, provider: WalletProviderInterface, account: str) -> Web3FlightContract:
        if not isinstance(provider, Web3WalletProvider):
            raise TypeError("Web3FlightContractFactory requires a Web3WalletProvider")
        return Web3FlightContract(
            provider.web3,
            self._chain.contract_address,
            self._abi,
            account,
            receipt_timeout=self._chain.receipt_timeout,
            receipt_poll_interval=self._chain.receipt_poll_interval,
        )


__all__ = [
    "Web3FlightContract",
    "Web3FlightContractFactory",
    "Web3WalletProvider",
    "classify_web3_error",
]
