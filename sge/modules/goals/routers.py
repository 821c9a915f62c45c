# sge/modules/goals/routers.py
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import (
    GoalAPI,
    GoalCreateAPI,
    GoalSyncRequest,
    GoalSyncResultAPI,
    GoalUpdateAPI,
    IndicatorAPI,
    KeyResultAPI,
    KeyResultCreateAPI,
    KeyResultUpdateAPI,
)
from .services import INDICATORS, GoalsService, get_goals_service

goals_router = APIRouter()


@goals_router.get("", response_model=List[GoalAPI], summary="List goals with key results", tags=["Goals"])
async def list_goals(
    current_user: CurrentUser,
    period: Optional[str] = Query(None),
    goal_type: Optional[str] = Query(None, alias="type"),
    goals_service: GoalsService = Depends(get_goals_service),
):
    return await goals_service.list_goals(current_user.company_id, period, goal_type)


@goals_router.get("/indicators", response_model=List[IndicatorAPI], summary="Indicators available for key results", tags=["Goals"])
async def list_indicators(current_user: CurrentUser):
    return INDICATORS


@goals_router.post("/sync", response_model=GoalSyncResultAPI, summary="Recompute linked key results", tags=["Goals"])
async def sync_goals(
    current_user: CurrentUser,
    payload: Optional[GoalSyncRequest] = Body(None),
    goals_service: GoalsService = Depends(get_goals_service),
):
    """Recalcula todos os KRs vinculados a indicadores (ou só os informados em `indicators`)."""
    indicators = payload.indicators if payload else None
    return await goals_service.sync_metrics(current_user.company_id, indicators)


@goals_router.post("", response_model=GoalAPI, status_code=status.HTTP_201_CREATED, summary="Create a goal", tags=["Goals"])
async def create_goal(
    payload: GoalCreateAPI,
    current_user: CurrentUser,
    goals_service: GoalsService = Depends(get_goals_service),
):
    return await goals_service.create_goal(current_user, payload)


@goals_router.put("/key-results/{kr_id}", response_model=KeyResultAPI, summary="Update key result progress", tags=["Goals"])
async def update_key_result(
    payload: KeyResultUpdateAPI,
    current_user: CurrentUser,
    kr_id: str = Path(..., description="ID do resultado-chave"),
    goals_service: GoalsService = Depends(get_goals_service),
):
    return await goals_service.update_key_result(current_user, kr_id, payload.current_value)


@goals_router.put("/{goal_id}", response_model=GoalAPI, summary="Update a goal", tags=["Goals"])
async def update_goal(
    payload: GoalUpdateAPI,
    current_user: CurrentUser,
    goal_id: str = Path(..., description="ID da meta"),
    goals_service: GoalsService = Depends(get_goals_service),
):
    return await goals_service.update_goal(current_user, goal_id, payload)


@goals_router.delete("/{goal_id}", response_model=MessageResponse, summary="Delete a goal", tags=["Goals"])
async def delete_goal(
    current_user: CurrentUser,
    goal_id: str = Path(..., description="ID da meta"),
    goals_service: GoalsService = Depends(get_goals_service),
):
    await goals_service.delete_goal(current_user, goal_id)
    return MessageResponse(message="Meta removida com sucesso")


@goals_router.post("/{goal_id}/key-results", response_model=KeyResultAPI, status_code=status.HTTP_201_CREATED, summary="Add a key result", tags=["Goals"])
async def add_key_result(
    payload: KeyResultCreateAPI,
    current_user: CurrentUser,
    goal_id: str = Path(..., description="ID da meta"),
    goals_service: GoalsService = Depends(get_goals_service),
):
    return await goals_service.add_key_result(current_user, goal_id, payload)
