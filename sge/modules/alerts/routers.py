# sge/modules/alerts/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import AlertAPI, AlertCreateAPI
from .services import AlertService, get_alert_service

alerts_router = APIRouter()


@alerts_router.get("", response_model=List[AlertAPI], summary="List alerts", tags=["Alerts"])
async def list_alerts(
    current_user: CurrentUser,
    status_filter: Optional[str] = Query(None, alias="status", description="active (padrão), history, all ou um status"),
    type_filter: Optional[str] = Query(None, alias="type"),
    alert_service: AlertService = Depends(get_alert_service),
):
    alerts = await alert_service.list_alerts(current_user.company_id, status_filter, type_filter)
    return [AlertAPI.model_validate(a) for a in alerts]


@alerts_router.post("", response_model=AlertAPI, status_code=status.HTTP_201_CREATED, summary="Create a manual alert", tags=["Alerts"])
async def create_alert(
    payload: AlertCreateAPI,
    current_user: CurrentUser,
    alert_service: AlertService = Depends(get_alert_service),
):
    return AlertAPI.model_validate(await alert_service.create_alert(current_user, payload))


@alerts_router.patch("/{alert_id}/resolve", response_model=AlertAPI, summary="Resolve an alert", tags=["Alerts"])
async def resolve_alert(
    current_user: CurrentUser,
    alert_id: str = Path(..., description="ID do alerta"),
    alert_service: AlertService = Depends(get_alert_service),
):
    return AlertAPI.model_validate(await alert_service.resolve_alert(current_user, alert_id))


@alerts_router.patch("/{alert_id}/dismiss", response_model=AlertAPI, summary="Dismiss an alert", tags=["Alerts"])
async def dismiss_alert(
    current_user: CurrentUser,
    alert_id: str = Path(..., description="ID do alerta"),
    alert_service: AlertService = Depends(get_alert_service),
):
    return AlertAPI.model_validate(await alert_service.dismiss_alert(current_user, alert_id))


@alerts_router.delete("/{alert_id}", response_model=MessageResponse, summary="Delete an alert", tags=["Alerts"])
async def delete_alert(
    current_user: CurrentUser,
    alert_id: str = Path(..., description="ID do alerta"),
    alert_service: AlertService = Depends(get_alert_service),
):
    await alert_service.delete_alert(current_user, alert_id)
    return MessageResponse(message="Alerta removido")
