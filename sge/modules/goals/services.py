# sge/modules/goals/services.py
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import month_window, round_half_up, utcnow
from sge.modules.activity.services import ActivityService
from sge.modules.clients.repository import ClientRepository
from sge.modules.financial.repository import FinancialEntryRepository, sum_values
from sge.modules.flows.repository import FlowStageRepository
from sge.modules.items.repository import ItemRepository
from sge.modules.users.models import UserSummaryAPI
from sge.modules.users.repository import UserRepository
from .models import (
    GoalAPI,
    GoalCreateAPI,
    GoalInDB,
    GoalSyncResultAPI,
    GoalUpdateAPI,
    IndicatorAPI,
    KeyResultAPI,
    KeyResultCreateAPI,
    KeyResultInDB,
)
from .repository import GoalRepository, KeyResultRepository


class METRIC_TYPES:
    FINANCIAL_REVENUE_MONTH = "financial_revenue_month"
    FINANCIAL_PROFIT_MONTH = "financial_profit_month"
    SALES_WON_COUNT_MONTH = "sales_won_count_month"
    SALES_WON_VALUE_MONTH = "sales_won_value_month"
    ACTIVE_CLIENTS_COUNT = "active_clients_count"


INDICATORS: List[IndicatorAPI] = [
    IndicatorAPI(id=METRIC_TYPES.FINANCIAL_REVENUE_MONTH, label="Faturamento do mês", unit="R$"),
    IndicatorAPI(id=METRIC_TYPES.FINANCIAL_PROFIT_MONTH, label="Lucro do mês", unit="R$"),
    IndicatorAPI(id=METRIC_TYPES.SALES_WON_COUNT_MONTH, label="Vendas ganhas no mês", unit="un"),
    IndicatorAPI(id=METRIC_TYPES.SALES_WON_VALUE_MONTH, label="Valor vendido no mês", unit="R$"),
    IndicatorAPI(id=METRIC_TYPES.ACTIVE_CLIENTS_COUNT, label="Clientes ativos", unit="un"),
]

FINANCIAL_INDICATORS = [METRIC_TYPES.FINANCIAL_REVENUE_MONTH, METRIC_TYPES.FINANCIAL_PROFIT_MONTH]
SALES_INDICATORS = [METRIC_TYPES.SALES_WON_COUNT_MONTH, METRIC_TYPES.SALES_WON_VALUE_MONTH]
CLIENT_INDICATORS = [METRIC_TYPES.ACTIVE_CLIENTS_COUNT]

SYNC_TOLERANCE = 0.01


def compute_goal_progress(key_results: Iterable[KeyResultInDB]) -> int:
    """
    Média do progresso dos KRs (cada um limitado a 0..100).
    KRs com meta zero entram na média com 0; sem KRs o progresso é 0.
    """
    key_results = list(key_results)
    if not key_results:
        return 0
    total = 0.0
    for kr in key_results:
        if not kr.target_value:
            continue
        total += min(100.0, max(0.0, kr.current_value / kr.target_value * 100))
    return round_half_up(total / len(key_results))


class GoalsService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.goal_repo = GoalRepository(db)
        self.kr_repo = KeyResultRepository(db)
        self.user_repo = UserRepository(db)
        self.financial_repo = FinancialEntryRepository(db)
        self.item_repo = ItemRepository(db)
        self.stage_repo = FlowStageRepository(db)
        self.client_repo = ClientRepository(db)
        self.activity = ActivityService(db)

    # --- Indicadores vivos ---

    async def compute_indicator(self, company_id: ObjectId, indicator: str, now: Optional[datetime] = None) -> float:
        start, end = month_window(now or utcnow())

        if indicator in FINANCIAL_INDICATORS:
            entries = await self.financial_repo.list_in_window(company_id, start, end)
            revenue = sum_values(entries, ("revenue",))
            if indicator == METRIC_TYPES.FINANCIAL_REVENUE_MONTH:
                return revenue
            return revenue - sum_values(entries, ("cost",))

        if indicator in SALES_INDICATORS:
            won_stage_ids = await self.stage_repo.ids_of_type(company_id, "end_success")
            if not won_stage_ids:
                return 0
            won = await self.item_repo.list_won_in_window(company_id, won_stage_ids, start, end)
            if indicator == METRIC_TYPES.SALES_WON_COUNT_MONTH:
                return len(won)
            return sum(i.value or 0 for i in won)

        if indicator == METRIC_TYPES.ACTIVE_CLIENTS_COUNT:
            return await self.client_repo.count_for_company(company_id, {"status": "active"})

        logger.bind(service="GoalsService").warning(f"Indicador desconhecido: {indicator}")
        return 0

    async def recalculate_goal_progress(self, goal_id: ObjectId) -> int:
        key_results = await self.kr_repo.list_for_goal(goal_id)
        progress = compute_goal_progress(key_results)
        await self.goal_repo.update(goal_id, {"progress": progress})
        return progress

    async def sync_metrics(
        self,
        company_id: ObjectId,
        indicator_types: Optional[List[str]] = None,
        now: Optional[datetime] = None,
    ) -> GoalSyncResultAPI:
        """Recalcula os KRs vinculados a indicadores a partir dos dados atuais e o progresso das metas afetadas."""
        log = logger.bind(service="GoalsService", company_id=str(company_id))
        key_results = await self.kr_repo.list_linked(company_id, indicator_types)
        if not key_results:
            return GoalSyncResultAPI(updated_key_results=0, goals_recalculated=0)

        metrics: Dict[str, float] = {}
        updated = 0
        for kr in key_results:
            if kr.linked_indicator not in metrics:
                metrics[kr.linked_indicator] = await self.compute_indicator(company_id, kr.linked_indicator, now)
            new_value = metrics[kr.linked_indicator]
            if abs(kr.current_value - new_value) > SYNC_TOLERANCE:
                await self.kr_repo.update(kr.id, {"current_value": float(new_value)})
                updated += 1

        goal_ids = {kr.goal_id for kr in key_results}
        for goal_id in goal_ids:
            await self.recalculate_goal_progress(goal_id)

        log.info(f"Sync de indicadores: {updated} KR(s) atualizados, {len(goal_ids)} meta(s) recalculadas.")
        return GoalSyncResultAPI(updated_key_results=updated, goals_recalculated=len(goal_ids))

    async def sync_metrics_safely(self, company_id: ObjectId, indicator_types: Optional[List[str]] = None) -> None:
        """Versão usada após gravações: nunca propaga erro para a requisição."""
        try:
            await self.sync_metrics(company_id, indicator_types)
        except Exception as e:
            logger.bind(service="GoalsService", company_id=str(company_id)).error(f"Falha ao sincronizar metas: {e}")

    # --- CRUD ---

    async def _get_goal(self, company_id: ObjectId, goal_id: str) -> GoalInDB:
        goal = await self.goal_repo.get_for_company(goal_id, company_id)
        if not goal:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meta não encontrada")
        return goal

    async def _to_api(self, goals: List[GoalInDB]) -> List[GoalAPI]:
        key_results = await self.kr_repo.list_for_goals(g.id for g in goals)
        owners = await self.user_repo.map_by_ids(g.owner_id for g in goals)
        by_goal: Dict[ObjectId, List[KeyResultInDB]] = {}
        for kr in key_results:
            by_goal.setdefault(kr.goal_id, []).append(kr)

        result = []
        for goal in goals:
            krs = by_goal.get(goal.id, [])
            api = GoalAPI.model_validate(goal)
            api.key_results = [KeyResultAPI.model_validate(kr) for kr in krs]
            if krs:
                api.progress = compute_goal_progress(krs)
            owner = owners.get(goal.owner_id)
            if owner:
                api.owner = UserSummaryAPI.model_validate(owner)
            result.append(api)
        return result

    async def list_goals(self, company_id: ObjectId, period: Optional[str] = None, goal_type: Optional[str] = None) -> List[GoalAPI]:
        query = {}
        if period and period != "all":
            query["period"] = period
        if goal_type and goal_type != "all":
            query["type"] = goal_type
        goals = await self.goal_repo.list_for_company(company_id, query, sort=[("created_at", DESCENDING)])
        return await self._to_api(goals)

    async def get_goal(self, company_id: ObjectId, goal_id: str) -> GoalAPI:
        goal = await self._get_goal(company_id, goal_id)
        return (await self._to_api([goal]))[0]

    def _key_result_data(self, goal: GoalInDB, kr: KeyResultCreateAPI) -> Dict:
        current = kr.current_value if kr.current_value is not None else (kr.initial_value or 0)
        return {
            "goal_id": goal.id,
            "company_id": goal.company_id,
            "title": kr.title,
            "target_value": kr.target_value,
            "initial_value": kr.initial_value or 0,
            "current_value": current,
            "unit": kr.unit,
            "linked_indicator": kr.linked_indicator,
        }

    async def create_goal(self, current_user: TokenUser, payload: GoalCreateAPI) -> GoalAPI:
        if not payload.title or not payload.type or not payload.period:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Título, tipo e período são obrigatórios")

        goal = await self.goal_repo.create({
            "title": payload.title,
            "description": payload.description,
            "type": payload.type,
            "period": payload.period,
            "status": payload.status,
            "owner_id": ObjectId(payload.owner_id) if payload.owner_id and ObjectId.is_valid(payload.owner_id) else None,
            "progress": 0,
            "company_id": current_user.company_id,
        })
        for kr in payload.key_results:
            await self.kr_repo.create(self._key_result_data(goal, kr))

        linked = sorted({kr.linked_indicator for kr in payload.key_results if kr.linked_indicator})
        if linked:
            await self.sync_metrics_safely(current_user.company_id, linked)
        await self.recalculate_goal_progress(goal.id)

        await self.activity.log_activity(
            "created", "goals", goal.id, goal.title, current_user.company_id, current_user.id,
            details={"type": goal.type, "period": goal.period, "krs": len(payload.key_results)},
        )
        return await self.get_goal(current_user.company_id, goal.id)

    async def update_goal(self, current_user: TokenUser, goal_id: str, payload: GoalUpdateAPI) -> GoalAPI:
        goal = await self._get_goal(current_user.company_id, goal_id)
        # ownerId null remove o responsável; demais nulls são ignorados
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "owner_id"}
        if "owner_id" in changes:
            owner_id = changes["owner_id"]
            changes["owner_id"] = ObjectId(owner_id) if owner_id and ObjectId.is_valid(owner_id) else None
        await self.goal_repo.update_for_company(goal.id, current_user.company_id, changes)
        await self.activity.log_activity(
            "updated", "goals", goal.id, payload.title or goal.title, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        return await self.get_goal(current_user.company_id, goal.id)

    async def delete_goal(self, current_user: TokenUser, goal_id: str) -> None:
        goal = await self._get_goal(current_user.company_id, goal_id)
        await self.kr_repo.delete_many({"goal_id": goal.id})
        await self.goal_repo.delete_for_company(goal.id, current_user.company_id)
        await self.activity.log_activity("deleted", "goals", goal.id, goal.title, current_user.company_id, current_user.id)

    async def add_key_result(self, current_user: TokenUser, goal_id: str, payload: KeyResultCreateAPI) -> KeyResultAPI:
        goal = await self._get_goal(current_user.company_id, goal_id)
        kr = await self.kr_repo.create(self._key_result_data(goal, payload))
        if kr.linked_indicator:
            await self.sync_metrics_safely(current_user.company_id, [kr.linked_indicator])
            kr = await self.kr_repo.get_by_id(kr.id)
        await self.recalculate_goal_progress(goal.id)
        return KeyResultAPI.model_validate(kr)

    async def update_key_result(self, current_user: TokenUser, kr_id: str, current_value: float) -> KeyResultAPI:
        kr = await self.kr_repo.update_for_company(kr_id, current_user.company_id, {"current_value": current_value})
        if not kr:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resultado-chave não encontrado")
        await self.recalculate_goal_progress(kr.goal_id)
        return KeyResultAPI.model_validate(kr)


async def get_goals_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> GoalsService:
    return GoalsService(db)
