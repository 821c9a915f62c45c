# sge/modules/flows/routers.py
from typing import List

from fastapi import APIRouter, Depends, Path, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import FlowAPI, FlowCreateAPI, FlowDetailAPI, FlowUpdateAPI, StageAPI, StageCreateAPI
from .services import FlowService, get_flow_service

flows_router = APIRouter()


@flows_router.get("", response_model=List[FlowAPI], summary="List operating flows", tags=["Flows"])
async def list_flows(
    current_user: CurrentUser,
    flow_service: FlowService = Depends(get_flow_service),
):
    return await flow_service.list_flows(current_user.company_id)


@flows_router.get("/{flow_id}", response_model=FlowDetailAPI, summary="Get a flow with stages and items", tags=["Flows"])
async def get_flow(
    current_user: CurrentUser,
    flow_id: str = Path(..., description="ID do fluxo"),
    flow_service: FlowService = Depends(get_flow_service),
):
    return await flow_service.get_flow(current_user.company_id, flow_id)


@flows_router.post("", response_model=FlowAPI, status_code=status.HTTP_201_CREATED, summary="Create a flow", tags=["Flows"])
async def create_flow(
    payload: FlowCreateAPI,
    current_user: CurrentUser,
    flow_service: FlowService = Depends(get_flow_service),
):
    return await flow_service.create_flow(current_user, payload)


@flows_router.put("/{flow_id}", response_model=FlowAPI, summary="Rename or retype a flow", tags=["Flows"])
async def update_flow(
    payload: FlowUpdateAPI,
    current_user: CurrentUser,
    flow_id: str = Path(..., description="ID do fluxo"),
    flow_service: FlowService = Depends(get_flow_service),
):
    return await flow_service.update_flow(current_user, flow_id, payload)


@flows_router.delete("/{flow_id}", response_model=MessageResponse, summary="Delete a flow and its items", tags=["Flows"])
async def delete_flow(
    current_user: CurrentUser,
    flow_id: str = Path(..., description="ID do fluxo"),
    flow_service: FlowService = Depends(get_flow_service),
):
    await flow_service.delete_flow(current_user, flow_id)
    return MessageResponse(message="Fluxo removido")


@flows_router.post("/{flow_id}/stages", response_model=StageAPI, status_code=status.HTTP_201_CREATED, summary="Append a stage", tags=["Flows"])
async def add_stage(
    payload: StageCreateAPI,
    current_user: CurrentUser,
    flow_id: str = Path(..., description="ID do fluxo"),
    flow_service: FlowService = Depends(get_flow_service),
):
    return await flow_service.add_stage(current_user, flow_id, payload)
