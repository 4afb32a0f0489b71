from decimal import Decimal, InvalidOperation, localcontext
from typing import Iterable, Union

from web3 import Web3

from .errors import InvalidInputError
from .models import Flight

UINT256_MAX = 2**256 - 1
ETHER_DECIMALS = 18
# Enough digits to hold any uint256 amount exactly
WEI_PRECISION = 80

AmountInput = Union[str, int, Decimal]


class CurrencyDomainService:
    """Conversion between contract units (wei) and display units (ether)"""

    @staticmethod
    def to_display_units(amount_wei: int) -> Decimal:
        """Convert a wei amount to ether"""
        if amount_wei < 0:
            raise InvalidInputError("Contract amounts cannot be negative")
        return Decimal(Web3.from_wei(amount_wei, "ether"))

    @staticmethod
    def parse_amount(raw: AmountInput, *, field: str = "amount") -> Decimal:
        """Parse a user-entered ether amount"""
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise InvalidInputError(f"{field} is required")
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            raise InvalidInputError(f"{field} must be a decimal number") from None
        if not value.is_finite():
            raise InvalidInputError(f"{field} must be a finite number")
        if value < 0:
            raise InvalidInputError(f"{field} cannot be negative")
        with localcontext() as ctx:
            ctx.prec = max(WEI_PRECISION, len(value.as_tuple().digits))
            scaled = value.scaleb(ETHER_DECIMALS)
        if scaled != scaled.to_integral_value():
            raise InvalidInputError(
                f"{field} supports at most {ETHER_DECIMALS} decimal places"
            )
        return value

    @classmethod
    def to_contract_units(cls, raw: AmountInput, *, field: str = "amount") -> int:
        """Convert a user-entered ether amount to wei"""
        value = cls.parse_amount(raw, field=field)
        with localcontext() as ctx:
            ctx.prec = WEI_PRECISION
            if value.scaleb(ETHER_DECIMALS) > UINT256_MAX:
                raise InvalidInputError(f"{field} is too large")
        return int(Web3.to_wei(value, "ether"))


class FlightDomainService:
    """Client-side bounds checks applied before any contract write"""

    @staticmethod
    def validate_flight_id(flight_id: int) -> int:
        if flight_id is None:
            raise InvalidInputError("flight id is required")
        if flight_id < 1:
            raise InvalidInputError("flight id must be 1 or greater")
        if flight_id > UINT256_MAX:
            raise InvalidInputError("flight id is too large")
        return flight_id

    @staticmethod
    def validate_seat_count(seats: int, *, field: str = "seats") -> int:
        if seats is None:
            raise InvalidInputError(f"{field} is required")
        if seats < 1:
            raise InvalidInputError(f"{field} must be at least 1")
        if seats > UINT256_MAX:
            raise InvalidInputError(f"{field} is too large")
        return seats

    @staticmethod
    def validate_flight_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidInputError("flight name is required")
        return cleaned

    @staticmethod
    def validate_deposit(raw: AmountInput) -> int:
        amount_wei = CurrencyDomainService.to_contract_units(raw, field="deposit amount")
        if amount_wei == 0:
            raise InvalidInputError("deposit amount must be greater than zero")
        return amount_wei


def build_flight(
    flight_id: int,
    name: str,
    seats_available: int,
    price_wei: int,
    is_active: bool,
) -> Flight:
    """Assemble the display-ready flight from the four raw contract fields"""
    return Flight(
        id=flight_id,
        name=name,
        seats_available=seats_available,
        price_per_seat=CurrencyDomainService.to_display_units(price_wei),
        price_per_seat_wei=price_wei,
        is_active=bool(is_active),
    )


def index_flights(flights: Iterable[Flight]) -> dict[int, Flight]:
    """Key flights by id, rejecting gaps or duplicates in the 1..N range"""
    ordered = list(flights)
    mapping = {flight.id: flight for flight in ordered}
    if len(mapping) != len(ordered) or set(mapping) != set(range(1, len(ordered) + 1)):
        raise ValueError("Flight ids must be contiguous starting at 1")
    return mapping
