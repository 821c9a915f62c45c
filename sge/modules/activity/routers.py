# sge/modules/activity/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from sge.core.security import CurrentUser
from .models import ActivityLogAPI
from .services import ActivityService, get_activity_service

logs_router = APIRouter()


@logs_router.get(
    "",
    response_model=List[ActivityLogAPI],
    summary="List activity logs of the company",
    tags=["Logs"],
)
async def list_logs(
    current_user: CurrentUser,
    module: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    activity_service: ActivityService = Depends(get_activity_service),
):
    """Histórico de ações (mais recentes primeiro) com o usuário responsável."""
    logger.bind(user_id=str(current_user.id)).debug("Endpoint: Listando logs de atividade...")
    return await activity_service.list_logs(current_user.company_id, module=module, action=action, limit=limit)
