# sge/modules/operations/routers.py
from fastapi import APIRouter, Depends

from sge.core.security import CurrentUser
from .models import OperationsMetricsAPI
from .services import OperationsService, get_operations_service

operations_router = APIRouter()


@operations_router.get("/metrics", response_model=OperationsMetricsAPI, summary="Flow throughput, SLA and bottlenecks", tags=["Operations"])
async def operations_metrics(
    current_user: CurrentUser,
    operations_service: OperationsService = Depends(get_operations_service),
):
    return await operations_service.get_metrics(current_user.company_id)
