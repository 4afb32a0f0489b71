from fastapi import APIRouter

from flightdesk.application.use_cases.session_use_cases import ConnectWalletUseCase
from flightdesk.config.dependencies import DashboardDep
from flightdesk.presentation.dtos import DashboardResponse, ErrorResponse, SessionResponse

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/", response_model=SessionResponse)
async def get_session(context: DashboardDep):
    """Wallet provider status and connected account"""
    return SessionResponse.from_state(context.store.state)


@router.post(
    "/connect",
    response_model=DashboardResponse,
    responses={403: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def connect_wallet(context: DashboardDep):
    """Request account authorization and run the initial sync"""
    use_case = ConnectWalletUseCase(context.store, context.session)
    state = await use_case.execute()
    return DashboardResponse.from_state(state)
