# sge/modules/dashboard/services.py
import math
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import get_database
from sge.core.utils import month_window, round_half_up, utcnow
from sge.modules.alerts.models import AlertAPI, AlertInDB
from sge.modules.alerts.repository import AlertRepository
from sge.modules.financial.models import COST_TYPES, REVENUE_TYPES, FinancialEntryInDB
from sge.modules.financial.repository import FinancialEntryRepository, sum_values
from sge.modules.flows.repository import FlowRepository
from sge.modules.items.repository import ItemRepository
from sge.modules.kpis.models import KpiInDB
from sge.modules.kpis.repository import KpiRepository
from sge.modules.people.repository import PersonRepository
from sge.modules.processes.repository import ProcessBlockRepository, ProcessItemRepository
from sge.modules.processes.services import build_diagnosis
from .models import (
    DashboardAPI,
    DashboardFinancialAPI,
    DashboardFlowAPI,
    DashboardPeopleAPI,
    DashboardPipelineAPI,
    MonthFinancialsAPI,
    PriorityActionAPI,
    ProcessMaturityAPI,
)

MONTH_LABELS = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")
HISTORY_MONTHS = 6
HIGH_VALUE_THRESHOLD = 50000
MAX_ACTIONS = 5
DEFAULT_CLIMATE = 4.0


def operating_months(entries: List[FinancialEntryInDB]) -> int:
    """Runway: caixa acumulado / custo médio dos meses (ano, mês) que tiveram custo."""
    cash = sum_values(entries, REVENUE_TYPES) - sum_values(entries, COST_TYPES)
    total_cost = sum_values(entries, COST_TYPES)
    cost_months = {(e.date.year, e.date.month) for e in entries if e.type in COST_TYPES}
    average_cost = total_cost / max(1, len(cost_months))
    return math.floor(cash / average_cost) if average_cost > 0 else 0


def _first_kpi(kpis: List[KpiInDB], *keywords: str, category: Optional[str] = None) -> Optional[KpiInDB]:
    for keyword in keywords:
        for kpi in kpis:
            if keyword in kpi.name.lower() and (category is None or kpi.category == category):
                return kpi
    return None


def turnover_from_kpis(kpis: List[KpiInDB]) -> float:
    kpi = _first_kpi(kpis, "turnover") or _first_kpi(kpis, "rotatividade", category="Pessoas")
    return kpi.value if kpi else 0


def climate_from_kpis(kpis: List[KpiInDB]) -> float:
    """Clima em escala 0-5; percentuais (ou valores > 10) são convertidos."""
    kpi = _first_kpi(kpis, "clima", "satisfação", "enps")
    if kpi is None:
        return DEFAULT_CLIMATE
    if kpi.unit == "percentage" or kpi.value > 10:
        score = kpi.value / 100 * 5
    else:
        score = kpi.value
    return round_half_up(score, 1)


def sge_score(margin: float, revenue: float, climate: float, process_score: int, active_items: int) -> int:
    financial_score = max(0, min(100, margin * 2 + (30 if revenue > 0 else 0)))
    people_score = climate / 5 * 100
    pipeline_score = 80 if active_items > 0 else 0
    return round_half_up(financial_score * 0.35 + people_score * 0.25 + process_score * 0.25 + pipeline_score * 0.15)


def sge_status(score: int) -> str:
    if score < 50:
        return "Empresa em Risco"
    if score < 75:
        return "Empresa em Transição"
    return "Empresa Saudável"


def maturity_status(score: int) -> str:
    if score >= 70:
        return "Saudável"
    if score >= 40:
        return "Transição"
    return "Risco"


def build_priority_actions(
    runway: int,
    margin: float,
    high_value_items: int,
    turnover: float,
    process_score: int,
    alerts: List[AlertInDB],
) -> List[PriorityActionAPI]:
    actions = []
    if runway < 3:
        actions.append(PriorityActionAPI(
            type="financial", priority="critical", text="Baixo Caixa (Runway < 3 meses)",
            meta="Financeiro • Urgente", link="/financeiro",
        ))
    if margin < 10:
        actions.append(PriorityActionAPI(
            type="financial", priority="high", text="Margem Operacional Crítica (<10%)",
            meta="Financeiro • Revisar Custos", link="/financeiro",
        ))
    if high_value_items > 0:
        actions.append(PriorityActionAPI(
            type="operational", priority="medium", text=f"{high_value_items} oportunidades de alto valor",
            meta="Fluxos • Acompanhar", link="/fluxos",
        ))
    if turnover > 5:
        actions.append(PriorityActionAPI(
            type="people", priority="high", text="Turnover acima do ideal (>5%)",
            meta="Pessoas • Retenção", link="/pessoas",
        ))
    if process_score < 50:
        actions.append(PriorityActionAPI(
            type="process", priority="medium", text="Baixa Maturidade de Processos",
            meta="Processos • Padronizar", link="/processos",
        ))
    for alert in alerts:
        actions.append(PriorityActionAPI(
            type="alert", priority="critical" if alert.priority == "critical" else "high",
            text=alert.title, meta="Alerta • Manual", link="/alertas",
        ))
    return actions[:MAX_ACTIONS]


def build_financial_history(entries: List[FinancialEntryInDB], now: datetime) -> List[MonthFinancialsAPI]:
    history = []
    for offset in range(-(HISTORY_MONTHS - 1), 1):
        start, end = month_window(now, offset)
        month_entries = [e for e in entries if start <= e.date < end]
        revenue = sum_values(month_entries, REVENUE_TYPES)
        costs = sum_values(month_entries, COST_TYPES)
        history.append(MonthFinancialsAPI(
            month=MONTH_LABELS[start.month - 1],
            revenue=revenue,
            costs=costs,
            profit=revenue - costs,
        ))
    return history


class DashboardService:
    """Consolida financeiro, pessoas, pipeline, processos e alertas em uma única resposta."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.entry_repo = FinancialEntryRepository(db)
        self.person_repo = PersonRepository(db)
        self.kpi_repo = KpiRepository(db)
        self.item_repo = ItemRepository(db)
        self.flow_repo = FlowRepository(db)
        self.block_repo = ProcessBlockRepository(db)
        self.process_item_repo = ProcessItemRepository(db)
        self.alert_repo = AlertRepository(db)

    async def get_dashboard(self, company_id: ObjectId, now: Optional[datetime] = None) -> DashboardAPI:
        now = now or utcnow()
        log = logger.bind(service="DashboardService", company_id=str(company_id))

        # Financeiro
        all_entries = await self.entry_repo.list_in_window(company_id)
        month_start, month_end = month_window(now)
        month_entries = [e for e in all_entries if month_start <= e.date < month_end]
        revenue = sum_values(month_entries, REVENUE_TYPES)
        costs = sum_values(month_entries, COST_TYPES)
        margin = (revenue - costs) / revenue * 100 if revenue > 0 else 0
        cash_available = sum_values(all_entries, REVENUE_TYPES) - sum_values(all_entries, COST_TYPES)
        runway = operating_months(all_entries)

        # Pessoas
        headcount = await self.person_repo.count_for_company(company_id, {"status": "active"})
        kpis = await self.kpi_repo.list_for_company(company_id)
        turnover = turnover_from_kpis(kpis)
        climate = climate_from_kpis(kpis)

        # Pipeline
        active_items = await self.item_repo.list_for_company(company_id, {"status": "active"})
        pipeline_value = sum(i.value or 0 for i in active_items)
        high_value = sum(1 for i in active_items if (i.value or 0) > HIGH_VALUE_THRESHOLD)

        # Processos
        blocks = await self.block_repo.list_ordered(company_id)
        items_by_block = await self.process_item_repo.group_by_block(b.id for b in blocks)
        process_score = build_diagnosis(blocks, items_by_block).overall_score

        score = sge_score(margin, revenue, climate, process_score, len(active_items))
        alerts = await self.alert_repo.top_active(company_id, limit=3)

        flows = []
        for flow in await self.flow_repo.list_company_flows(company_id):
            flow_items = [i for i in active_items if i.flow_id == flow.id]
            flows.append(DashboardFlowAPI(
                id=flow.id,
                name=flow.name,
                active_items=len(flow_items),
                total_value=sum(i.value or 0 for i in flow_items),
            ))

        log.debug(f"Dashboard calculado: score={score} runway={runway} itens ativos={len(active_items)}")
        return DashboardAPI(
            sge_score=score,
            sge_status=sge_status(score),
            financial=DashboardFinancialAPI(
                revenue=revenue,
                costs=costs,
                margin=round_half_up(margin),
                cash_available=cash_available,
                operating_months=runway,
                history=build_financial_history(all_entries, now),
            ),
            people=DashboardPeopleAPI(headcount=headcount, turnover=turnover, climate_score=climate),
            pipeline=DashboardPipelineAPI(value=pipeline_value, active_items=len(active_items)),
            process_maturity=ProcessMaturityAPI(score=process_score, status=maturity_status(process_score)),
            actions=build_priority_actions(runway, margin, high_value, turnover, process_score, alerts),
            alerts=[AlertAPI.model_validate(a) for a in alerts],
            flows=flows,
        )


async def get_dashboard_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> DashboardService:
    return DashboardService(db)
