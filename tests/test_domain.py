"""Currency conversion and client-side bounds checks."""

from __future__ import annotations

from decimal import Decimal

import pytest

from flightdesk.domain.errors import InvalidInputError
from flightdesk.domain.services import (
    UINT256_MAX,
    CurrencyDomainService,
    FlightDomainService,
    build_flight,
    index_flights,
)


def test_wei_converts_to_ether_for_display():
    assert CurrencyDomainService.to_display_units(1_500_000_000_000_000_000) == Decimal("1.5")
    assert CurrencyDomainService.to_display_units(0) == 0
    assert CurrencyDomainService.to_display_units(1) == Decimal("0.000000000000000001")


@pytest.mark.parametrize("entered", ["0.1", "1.5", "0.000000000000000001", "12345.678"])
def test_user_price_survives_display_round_trip(entered):
    wei = CurrencyDomainService.to_contract_units(entered)
    shown = CurrencyDomainService.to_display_units(wei)

    assert shown == Decimal(entered)
    assert CurrencyDomainService.to_contract_units(str(shown)) == wei


def test_integer_amounts_are_whole_ether():
    assert CurrencyDomainService.to_contract_units(2) == 2 * 10**18


@pytest.mark.parametrize("raw", ["1e80", "1e60", str(UINT256_MAX)])
def test_amounts_beyond_uint256_are_invalid_input(raw):
    with pytest.raises(InvalidInputError, match="too large"):
        CurrencyDomainService.to_contract_units(raw)


def test_largest_uint256_amount_is_accepted():
    largest = CurrencyDomainService.to_display_units(UINT256_MAX)

    assert CurrencyDomainService.to_contract_units(largest) == UINT256_MAX


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "abc", "-1", "NaN", "Infinity", "0.0000000000000000001"],
)
def test_bad_amounts_are_rejected(raw):
    with pytest.raises(InvalidInputError):
        CurrencyDomainService.to_contract_units(raw)


def test_deposit_must_be_positive():
    with pytest.raises(InvalidInputError, match="greater than zero"):
        FlightDomainService.validate_deposit("0")
    assert FlightDomainService.validate_deposit("0.5") == 5 * 10**17


def test_seat_and_id_bounds():
    with pytest.raises(InvalidInputError):
        FlightDomainService.validate_seat_count(0)
    with pytest.raises(InvalidInputError):
        FlightDomainService.validate_seat_count(-3)
    with pytest.raises(InvalidInputError):
        FlightDomainService.validate_seat_count(UINT256_MAX + 1)
    with pytest.raises(InvalidInputError):
        FlightDomainService.validate_flight_id(0)
    assert FlightDomainService.validate_flight_id(7) == 7


def test_flight_name_is_trimmed_and_required():
    assert FlightDomainService.validate_flight_name("  SkyJet 101 ") == "SkyJet 101"
    with pytest.raises(InvalidInputError):
        FlightDomainService.validate_flight_name("   ")


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        FlightDomainService.validate_seat_count(0)


def test_build_flight_converts_price():
    flight = build_flight(3, "Red-eye", 40, 250_000_000_000_000_000, 1)

    assert flight.id == 3
    assert flight.seats_available == 40
    assert flight.price_per_seat == Decimal("0.25")
    assert flight.price_per_seat_wei == 250_000_000_000_000_000
    assert flight.is_active is True


def test_index_flights_requires_contiguous_ids():
    flights = [build_flight(i, f"F{i}", 1, 0, True) for i in (1, 2, 3)]
    assert list(index_flights(flights)) == [1, 2, 3]

    with pytest.raises(ValueError):
        index_flights([flights[0], flights[2]])
    with pytest.raises(ValueError):
        index_flights([flights[0], flights[0]])
