# sge/modules/kpis/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import KpiAPI, KpiCreateAPI, KpiUpdateAPI
from .services import KpiService, get_kpi_service

kpis_router = APIRouter()


@kpis_router.get("", response_model=List[KpiAPI], summary="List KPIs", tags=["KPIs"])
async def list_kpis(
    current_user: CurrentUser,
    category: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    kpi_service: KpiService = Depends(get_kpi_service),
):
    kpis = await kpi_service.list_kpis(current_user.company_id, category, status_filter)
    return [KpiAPI.model_validate(k) for k in kpis]


@kpis_router.post("", response_model=KpiAPI, status_code=status.HTTP_201_CREATED, summary="Create a KPI", tags=["KPIs"])
async def create_kpi(
    payload: KpiCreateAPI,
    current_user: CurrentUser,
    kpi_service: KpiService = Depends(get_kpi_service),
):
    return KpiAPI.model_validate(await kpi_service.create_kpi(current_user, payload))


@kpis_router.put("/{kpi_id}", response_model=KpiAPI, summary="Update a KPI", tags=["KPIs"])
async def update_kpi(
    payload: KpiUpdateAPI,
    current_user: CurrentUser,
    kpi_id: str = Path(..., description="ID do KPI"),
    kpi_service: KpiService = Depends(get_kpi_service),
):
    return KpiAPI.model_validate(await kpi_service.update_kpi(current_user, kpi_id, payload))


@kpis_router.delete("/{kpi_id}", response_model=MessageResponse, summary="Delete a KPI", tags=["KPIs"])
async def delete_kpi(
    current_user: CurrentUser,
    kpi_id: str = Path(..., description="ID do KPI"),
    kpi_service: KpiService = Depends(get_kpi_service),
):
    await kpi_service.delete_kpi(current_user, kpi_id)
    return MessageResponse(message="KPI removido")
