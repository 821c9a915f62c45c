# sge/modules/processes/routers.py
from typing import List

from fastapi import APIRouter, Depends, Path, status

from sge.core.security import CurrentUser
from .models import (
    ActionSuggestionAPI,
    DiagnosisAPI,
    ProcessBlockAPI,
    ProcessBlockCreateAPI,
    ProcessItemAPI,
    ProcessItemUpdateAPI,
)
from .services import ProcessService, get_process_service

processes_router = APIRouter()


@processes_router.get("", response_model=List[ProcessBlockAPI], summary="List process blocks", tags=["Processes"])
async def list_blocks(
    current_user: CurrentUser,
    process_service: ProcessService = Depends(get_process_service),
):
    return await process_service.list_blocks(current_user.company_id)


@processes_router.post("", response_model=ProcessBlockAPI, status_code=status.HTTP_201_CREATED, summary="Create a process block", tags=["Processes"])
async def create_block(
    payload: ProcessBlockCreateAPI,
    current_user: CurrentUser,
    process_service: ProcessService = Depends(get_process_service),
):
    return await process_service.create_block(current_user, payload)


@processes_router.get("/diagnosis", response_model=DiagnosisAPI, summary="Process maturity diagnosis", tags=["Processes"])
async def diagnosis(
    current_user: CurrentUser,
    process_service: ProcessService = Depends(get_process_service),
):
    return await process_service.get_diagnosis(current_user.company_id)


@processes_router.get("/actions", response_model=List[ActionSuggestionAPI], summary="Suggested action plan", tags=["Processes"])
async def action_plan(
    current_user: CurrentUser,
    process_service: ProcessService = Depends(get_process_service),
):
    return await process_service.get_action_plan(current_user.company_id)


@processes_router.put("/items/{item_id}", response_model=ProcessItemAPI, summary="Update a process item", tags=["Processes"])
async def update_item(
    payload: ProcessItemUpdateAPI,
    current_user: CurrentUser,
    item_id: str = Path(..., description="ID do processo"),
    process_service: ProcessService = Depends(get_process_service),
):
    return ProcessItemAPI.model_validate(await process_service.update_item(current_user, item_id, payload))
