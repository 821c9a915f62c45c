# sge/modules/financial/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import (
    FinancialEntryAPI,
    FinancialEntryCreateAPI,
    FinancialEntryUpdateAPI,
    FinancialSummaryAPI,
)
from .services import FinancialService, get_financial_service

financial_router = APIRouter()


@financial_router.get("", response_model=List[FinancialEntryAPI], summary="List ledger entries", tags=["Financial"])
async def list_entries(
    current_user: CurrentUser,
    entry_type: Optional[str] = Query(None, alias="type"),
    period: Optional[str] = Query(None, description="month, quarter ou year"),
    financial_service: FinancialService = Depends(get_financial_service),
):
    entries = await financial_service.list_entries(current_user.company_id, entry_type, period)
    return [FinancialEntryAPI.model_validate(e) for e in entries]


@financial_router.get("/summary", response_model=FinancialSummaryAPI, summary="Monthly financial summary", tags=["Financial"])
async def financial_summary(
    current_user: CurrentUser,
    financial_service: FinancialService = Depends(get_financial_service),
):
    return await financial_service.get_summary(current_user.company_id)


@financial_router.post("", response_model=FinancialEntryAPI, status_code=status.HTTP_201_CREATED, summary="Create a ledger entry", tags=["Financial"])
async def create_entry(
    payload: FinancialEntryCreateAPI,
    current_user: CurrentUser,
    financial_service: FinancialService = Depends(get_financial_service),
):
    return FinancialEntryAPI.model_validate(await financial_service.create_entry(current_user, payload))


@financial_router.put("/{entry_id}", response_model=FinancialEntryAPI, summary="Update a ledger entry", tags=["Financial"])
async def update_entry(
    payload: FinancialEntryUpdateAPI,
    current_user: CurrentUser,
    entry_id: str = Path(..., description="ID do lançamento"),
    financial_service: FinancialService = Depends(get_financial_service),
):
    return FinancialEntryAPI.model_validate(await financial_service.update_entry(current_user, entry_id, payload))


@financial_router.delete("/{entry_id}", response_model=MessageResponse, summary="Delete a ledger entry", tags=["Financial"])
async def delete_entry(
    current_user: CurrentUser,
    entry_id: str = Path(..., description="ID do lançamento"),
    financial_service: FinancialService = Depends(get_financial_service),
):
    await financial_service.delete_entry(current_user, entry_id)
    return MessageResponse(message="Lançamento removido")
