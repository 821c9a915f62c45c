# tests/modules/dashboard/test_dashboard.py
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

from sge.modules.alerts.models import AlertInDB
from sge.modules.dashboard.services import (
    build_financial_history,
    build_priority_actions,
    climate_from_kpis,
    maturity_status,
    operating_months,
    sge_score,
    sge_status,
    turnover_from_kpis,
)
from sge.modules.financial.models import FinancialEntryInDB
from sge.modules.kpis.models import KpiInDB

COMPANY = ObjectId()


def _entry(type_: str, value: float, date: datetime) -> FinancialEntryInDB:
    return FinancialEntryInDB(type=type_, category="c", description="d", value=value, date=date, company_id=COMPANY)


def _kpi(name: str, value: float, unit: str = "%", category: str = "Geral") -> KpiInDB:
    return KpiInDB(name=name, category=category, value=value, unit=unit, company_id=COMPANY)


def test_operating_months_uses_distinct_year_month():
    entries = [
        _entry("revenue", 10000, datetime(2026, 1, 5)),
        _entry("cost", 1000, datetime(2026, 1, 10)),
        _entry("EXPENSE", 1000, datetime(2026, 1, 20)),
        # mesmo mês de outro ano conta separado
        _entry("cost", 2000, datetime(2025, 1, 10)),
    ]
    # caixa 6000 / (4000 / 2 meses)
    assert operating_months(entries) == 3


def test_operating_months_without_costs_is_zero():
    assert operating_months([_entry("revenue", 500, datetime(2026, 3, 1))]) == 0


def test_people_kpis():
    kpis = [_kpi("Rotatividade anual", 7, category="Pessoas"), _kpi("Pesquisa de Clima", 80)]
    assert turnover_from_kpis(kpis) == 7
    assert climate_from_kpis(kpis) == 4.0
    assert climate_from_kpis([_kpi("eNPS", 4.6, unit="score")]) == 4.6
    assert climate_from_kpis([]) == 4.0
    assert turnover_from_kpis([_kpi("Rotatividade", 7, category="Operações")]) == 0


def test_sge_score_and_statuses():
    # financeiro 70, pessoas 80, processos 50, pipeline 80
    assert sge_score(margin=20, revenue=1000, climate=4.0, process_score=50, active_items=2) == 69
    assert sge_status(69) == "Empresa em Transição"
    assert sge_status(75) == "Empresa Saudável"
    assert sge_status(49) == "Empresa em Risco"
    assert maturity_status(70) == "Saudável"
    assert maturity_status(40) == "Transição"
    assert maturity_status(39) == "Risco"


def test_priority_actions_are_capped_at_five():
    alerts = [
        AlertInDB(title="Estoque crítico", description="x", priority="critical", company_id=COMPANY),
        AlertInDB(title="Atraso", description="x", priority="low", company_id=COMPANY),
    ]
    actions = build_priority_actions(runway=1, margin=5, high_value_items=2, turnover=6, process_score=30, alerts=alerts)
    assert len(actions) == 5
    assert actions[0].text == "Baixo Caixa (Runway < 3 meses)"
    assert actions[2].text == "2 oportunidades de alto valor"
    assert [a.type for a in actions] == ["financial", "financial", "operational", "people", "process"]

    only_alerts = build_priority_actions(runway=12, margin=30, high_value_items=0, turnover=0, process_score=80, alerts=alerts)
    assert [(a.priority, a.meta, a.link) for a in only_alerts] == [
        ("critical", "Alerta • Manual", "/alertas"),
        ("high", "Alerta • Manual", "/alertas"),
    ]


def test_financial_history_has_six_labelled_months():
    now = datetime(2026, 2, 15)
    entries = [
        _entry("revenue", 1000, datetime(2026, 2, 1)),
        _entry("cost", 400, datetime(2026, 2, 3)),
        _entry("INCOME", 300, datetime(2025, 9, 30)),
        _entry("revenue", 999, datetime(2025, 8, 31)),
    ]
    history = build_financial_history(entries, now)
    assert [h.month for h in history] == ["Set", "Out", "Nov", "Dez", "Jan", "Fev"]
    assert history[0].revenue == 300
    assert history[-1].profit == 600


@pytest.mark.asyncio
async def test_dashboard_endpoint(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/financial", json={"type": "revenue", "category": "Vendas", "description": "Balcão", "value": 10000})
    await authenticated_client.post("/api/financial", json={"type": "cost", "category": "Aluguel", "description": "Loja", "value": 2000})
    await authenticated_client.post("/api/alerts", json={"title": "Conferir estoque", "description": "Inventário", "priority": "critical"})

    response = await authenticated_client.get("/api/dashboard")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["financial"]["revenue"] == 10000
    assert data["financial"]["margin"] == 80
    assert data["financial"]["cashAvailable"] == 8000
    assert data["financial"]["operatingMonths"] == 4
    assert len(data["financial"]["history"]) == 6
    assert data["people"] == {"headcount": 0, "turnover": 0, "climateScore": 4.0}
    assert data["processMaturity"] == {"score": 0, "status": "Risco"}
    assert [a["title"] for a in data["alerts"]] == ["Conferir estoque"]
    # financeiro 100*0.35 + pessoas 80*0.25 + processos 0 + pipeline 0
    assert data["sgeScore"] == 55
    assert data["sgeStatus"] == "Empresa em Transição"
