from typing import List

from fastapi import APIRouter, HTTPException

from flightdesk.application.use_cases.action_use_cases import (
    BookSeatsUseCase,
    CancelBookingUseCase,
    CreateFlightUseCase,
)
from flightdesk.config.dependencies import DashboardDep
from flightdesk.presentation.dtos import (
    ActionResponse,
    BookingRequest,
    ErrorResponse,
    FlightCreateRequest,
    FlightResponse,
)

router = APIRouter(prefix="/flights", tags=["flights"])

_ACTION_ERRORS = {
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.get("/", response_model=List[FlightResponse])
async def list_flights(context: DashboardDep):
    """List flights from the current snapshot"""
    flights = context.store.state.snapshot.flights
    return [FlightResponse.from_domain(flights[flight_id]) for flight_id in sorted(flights)]


@router.get("/{flight_id}", response_model=FlightResponse)
async def get_flight(flight_id: int, context: DashboardDep):
    """Get a flight from the current snapshot"""
    flight = context.store.state.snapshot.flights.get(flight_id)
    if not flight:
        raise HTTPException(status_code=404, detail="Flight not found")
    return FlightResponse.from_domain(flight)


@router.post("/", response_model=ActionResponse, responses=_ACTION_ERRORS)
async def create_flight(flight_data: FlightCreateRequest, context: DashboardDep):
    """Append a new flight to the contract"""
    use_case = CreateFlightUseCase(context.store, context.session)
    outcome = await use_case.execute(
        name=flight_data.name,
        seats=flight_data.seats,
        price=flight_data.price,
    )
    return ActionResponse.from_outcome(outcome, context.store.state)


@router.post("/{flight_id}/bookings", response_model=ActionResponse, responses=_ACTION_ERRORS)
async def book_seats(flight_id: int, booking: BookingRequest, context: DashboardDep):
    """Book seats on a flight"""
    use_case = BookSeatsUseCase(context.store, context.session)
    outcome = await use_case.execute(flight_id, booking.seats)
    return ActionResponse.from_outcome(outcome, context.store.state)


@router.post(
    "/{flight_id}/cancellations", response_model=ActionResponse, responses=_ACTION_ERRORS
)
async def cancel_booking(flight_id: int, booking: BookingRequest, context: DashboardDep):
    """Cancel previously booked seats"""
    use_case = CancelBookingUseCase(context.store, context.session)
    outcome = await use_case.execute(flight_id, booking.seats)
    return ActionResponse.from_outcome(outcome, context.store.state)
