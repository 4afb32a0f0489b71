from fastapi import APIRouter

from flightdesk.application.use_cases.action_use_cases import DepositFundsUseCase
from flightdesk.application.use_cases.sync_use_cases import RefreshBalanceUseCase
from flightdesk.config.dependencies import DashboardDep
from flightdesk.presentation.dtos import (
    ActionResponse,
    BalanceResponse,
    DepositRequest,
    ErrorResponse,
)

router = APIRouter(prefix="/funds", tags=["funds"])


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(context: DashboardDep, refresh: bool = False):
    """Deposited balance of the connected account"""
    state = context.store.state
    if refresh:
        state = await RefreshBalanceUseCase(context.store, context.session).execute()
    return BalanceResponse.from_state(state)


@router.post(
    "/deposits",
    response_model=ActionResponse,
    responses={
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def deposit_funds(deposit: DepositRequest, context: DashboardDep):
    """Deposit ether into the contract"""
    use_case = DepositFundsUseCase(context.store, context.session)
    outcome = await use_case.execute(deposit.amount)
    return ActionResponse.from_outcome(outcome, context.store.state)
