"""ABI of the FlightManagement contract and loading of compiled artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def _view(name: str, inputs: List[tuple[str, str]], output: str) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": output}],
    }


def _write(name: str, inputs: List[tuple[str, str]], *, payable: bool = False) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "payable" if payable else "nonpayable",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [],
    }


FLIGHT_MANAGEMENT_ABI: List[dict[str, Any]] = [
    _view("flightCounter", [], "uint256"),
    _view("flightNames", [("", "uint256")], "string"),
    _view("seatsAvailable", [("", "uint256")], "uint256"),
    _view("pricePerSeat", [("", "uint256")], "uint256"),
    _view("isActive", [("", "uint256")], "bool"),
    _view("balances", [("", "address")], "uint256"),
    _write("bookSeat", [("flightId", "uint256"), ("seats", "uint256")]),
    _write("cancelBooking", [("flightId", "uint256"), ("seats", "uint256")]),
    _write("depositFunds", [], payable=True),
    _write("addFlight", [("name", "string"), ("seats", "uint256"), ("price", "uint256")]),
]


class AbiLoadError(RuntimeError):
    """Raised when a configured ABI file cannot be used."""


def load_contract_abi(path: Optional[str] = None) -> List[dict[str, Any]]:
    """Return the ABI from a Hardhat artifact or raw ABI file, or the bundled one."""

    if not path:
        return FLIGHT_MANAGEMENT_ABI

    abi_path = Path(path)
    try:
        with abi_path.open("r", encoding="utf-8") as abi_file:
            data = json.load(abi_file)
    except (OSError, json.JSONDecodeError) as exc:
        raise AbiLoadError(f"Could not read ABI from {abi_path}: {exc}") from exc

    # Hardhat/Truffle artifacts wrap the ABI next to bytecode and metadata.
    if isinstance(data, dict):
        data = data.get("abi")

    if not isinstance(data, list):
        raise AbiLoadError(f"{abi_path} does not contain an ABI list")

    logger.info("Loaded contract ABI from %s (%d entries)", abi_path, len(data))
    return data


__all__ = ["AbiLoadError", "FLIGHT_MANAGEMENT_ABI", "load_contract_abi"]
