# sge/modules/dashboard/routers.py
from fastapi import APIRouter, Depends

from sge.core.security import CurrentUser
from .models import DashboardAPI
from .services import DashboardService, get_dashboard_service

dashboard_router = APIRouter()


@dashboard_router.get("", response_model=DashboardAPI, summary="Company health dashboard", tags=["Dashboard"])
async def get_dashboard(
    current_user: CurrentUser,
    dashboard_service: DashboardService = Depends(get_dashboard_service),
):
    return await dashboard_service.get_dashboard(current_user.company_id)
