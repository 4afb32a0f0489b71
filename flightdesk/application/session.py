"""Holder for the wallet provider and the contract handle bound to its account."""

from __future__ import annotations

from typing import Optional

from .interfaces import ContractFactory, FlightContractInterface, WalletProviderInterface


class WalletSession:
    """The one wallet connection the dashboard works against.

    ``provider`` is ``None`` when no wallet provider is configured. ``contract``
    stays ``None`` until an account has been authorized; every operation that
    needs it is a no-op until then.
    """

    def __init__(
        self,
        provider: Optional[WalletProviderInterface],
        contract_factory: ContractFactory,
    ) -> None:
        self.provider = provider
        self._contract_factory = contract_factory
        self.contract: Optional[FlightContractInterface] = None

    @property
    def account(self) -> Optional[str]:
        return self.contract.account if self.contract else None

    @property
    def is_connected(self) -> bool:
        return self.contract is not None

    def bind(self, account: str) -> FlightContractInterface:
        """Create the signing contract handle for ``account``."""

        if self.provider is None:
            raise RuntimeError("Cannot bind a contract without a wallet provider")
        self.contract = self._contract_factory(self.provider, account)
        return self.contract


__all__ = ["WalletSession"]
