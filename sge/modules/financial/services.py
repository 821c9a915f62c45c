# sge/modules/financial/services.py
import math
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import format_number, month_window, quarter_start, round_half_up, to_naive_utc, utcnow
from sge.modules.activity.services import ActivityService
from sge.modules.goals.services import FINANCIAL_INDICATORS, GoalsService
from sge.modules.rules.services import RulesService
from .models import (
    FinancialEntryCreateAPI,
    FinancialEntryInDB,
    FinancialEntryUpdateAPI,
    FinancialSummaryAPI,
)
from .repository import FinancialEntryRepository, sum_values

NOT_FOUND = "Lançamento não encontrado"


def _trend(current: float, previous: float) -> int:
    return round_half_up((current - previous) / previous * 100) if previous > 0 else 0


def build_financial_summary(
    month_entries: List[FinancialEntryInDB],
    previous_entries: List[FinancialEntryInDB],
    all_entries: List[FinancialEntryInDB],
) -> FinancialSummaryAPI:
    """Resumo do mês corrente contra o mês anterior, com caixa acumulado."""
    revenue = sum_values(month_entries, ("revenue",))
    costs = sum_values(month_entries, ("cost",))
    investments = sum_values(month_entries, ("investment",))
    margin = round_half_up((revenue - costs) / revenue * 100) if revenue > 0 else 0

    prev_revenue = sum_values(previous_entries, ("revenue",))
    prev_costs = sum_values(previous_entries, ("cost",))

    cash_available = sum_values(all_entries, ("revenue",)) - sum_values(all_entries, ("cost",))
    operating_months = math.floor(cash_available / costs) if cash_available > 0 and costs > 0 else 0

    return FinancialSummaryAPI(
        revenue=revenue,
        costs=costs,
        investments=investments,
        margin=margin,
        cash_available=cash_available,
        revenue_trend=_trend(revenue, prev_revenue),
        cost_trend=_trend(costs, prev_costs),
        operating_months=operating_months,
    )


class FinancialService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.entry_repo = FinancialEntryRepository(db)
        self.rules = RulesService(db)
        self.goals = GoalsService(db)
        self.activity = ActivityService(db)

    async def _get_entry(self, company_id: ObjectId, entry_id: str) -> FinancialEntryInDB:
        entry = await self.entry_repo.get_for_company(entry_id, company_id)
        if not entry:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        return entry

    async def list_entries(
        self,
        company_id: ObjectId,
        entry_type: Optional[str] = None,
        period: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[FinancialEntryInDB]:
        now = now or utcnow()
        query = {}
        if entry_type and entry_type != "all":
            query["type"] = entry_type

        start = end = None
        if period == "month":
            start, end = month_window(now)
        elif period == "quarter":
            start, end = quarter_start(now), now
        elif period == "year":
            start, end = datetime(now.year, 1, 1), now
        return await self.entry_repo.list_in_window(company_id, start, end, query)

    async def get_summary(self, company_id: ObjectId, now: Optional[datetime] = None) -> FinancialSummaryAPI:
        now = now or utcnow()
        month_start, month_end = month_window(now)
        prev_start, prev_end = month_window(now, -1)
        return build_financial_summary(
            await self.entry_repo.list_in_window(company_id, month_start, month_end),
            await self.entry_repo.list_in_window(company_id, prev_start, prev_end),
            await self.entry_repo.list_in_window(company_id),
        )

    async def _after_write(self, entry: FinancialEntryInDB) -> None:
        await self.rules.evaluate(entry.company_id, "financial", entry.model_dump())
        await self.goals.sync_metrics_safely(entry.company_id, FINANCIAL_INDICATORS)

    async def create_entry(self, current_user: TokenUser, payload: FinancialEntryCreateAPI) -> FinancialEntryInDB:
        if not payload.type or not payload.category or not payload.description or payload.value is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Todos os campos são obrigatórios")

        entry = await self.entry_repo.create({
            "type": payload.type,
            "category": payload.category,
            "description": payload.description,
            "value": payload.value,
            "date": to_naive_utc(payload.date) or utcnow(),
            "recurring": payload.recurring,
            "company_id": current_user.company_id,
        })
        logger.bind(service="FinancialService", company_id=str(current_user.company_id)).info(
            f"Lançamento criado: {entry.type} {entry.value}"
        )
        await self._after_write(entry)
        await self.activity.log_activity(
            "created", "financial", entry.id, f"{entry.description} - R$ {format_number(entry.value)}",
            current_user.company_id, current_user.id,
            details={"type": entry.type, "category": entry.category, "value": entry.value},
        )
        return entry

    async def update_entry(self, current_user: TokenUser, entry_id: str, payload: FinancialEntryUpdateAPI) -> FinancialEntryInDB:
        before = await self._get_entry(current_user.company_id, entry_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "date" in changes:
            changes["date"] = to_naive_utc(changes["date"])

        updated = await self.entry_repo.update_for_company(before.id, current_user.company_id, changes)
        await self._after_write(updated)
        await self.activity.log_activity(
            "updated", "financial", updated.id, before.description, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True, mode="json")},
        )
        return updated

    async def delete_entry(self, current_user: TokenUser, entry_id: str) -> None:
        entry = await self.entry_repo.get_for_company(entry_id, current_user.company_id)
        if not entry:
            return
        await self.entry_repo.delete_for_company(entry.id, current_user.company_id)
        await self.goals.sync_metrics_safely(current_user.company_id, FINANCIAL_INDICATORS)
        await self.activity.log_activity("deleted", "financial", entry.id, entry.description, current_user.company_id, current_user.id)


async def get_financial_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> FinancialService:
    return FinancialService(db)
