from typing import List, Optional

from fastapi import APIRouter, Query

from flightdesk.application.state import NotificationsDismissed
from flightdesk.application.use_cases.sync_use_cases import FullSyncUseCase
from flightdesk.config.dependencies import DashboardDep
from flightdesk.presentation.dtos import DashboardResponse, NotificationResponse

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(context: DashboardDep):
    """Current snapshot as last synced; does not touch the contract"""
    return DashboardResponse.from_state(context.store.state)


@router.post("/dashboard/refresh", response_model=DashboardResponse)
async def refresh_dashboard(context: DashboardDep):
    """Re-fetch every flight and the balance"""
    use_case = FullSyncUseCase(context.store, context.session)
    state = await use_case.execute()
    return DashboardResponse.from_state(state)


@router.get("/notifications", response_model=List[NotificationResponse])
async def list_notifications(context: DashboardDep):
    return [
        NotificationResponse.from_domain(n) for n in context.store.state.notifications
    ]


@router.delete("/notifications", response_model=List[NotificationResponse])
async def dismiss_notifications(
    context: DashboardDep,
    up_to: Optional[int] = Query(default=None, ge=1),
):
    """Dismiss all notifications, or those with an id up to ``up_to``"""
    state = await context.store.dispatch(NotificationsDismissed(up_to))
    return [NotificationResponse.from_domain(n) for n in state.notifications]
