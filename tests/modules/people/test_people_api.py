# tests/modules/people/test_people_api.py
from datetime import datetime, timedelta

import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

from sge.modules.kpis.models import KpiInDB
from sge.modules.people.models import PersonInDB
from sge.modules.people.services import build_people_summary, climate_from_kpi

NOW = datetime(2026, 10, 1)
COMPANY = ObjectId()


def _person(name: str, department: str, status_: str = "active", hired_days_ago: int = 400, updated_days_ago: int = 1) -> PersonInDB:
    return PersonInDB(
        name=name, role="Analista", department=department, status=status_, company_id=COMPANY,
        hire_date=NOW - timedelta(days=hired_days_ago), updated_at=NOW - timedelta(days=updated_days_ago),
    )


def test_summary_turnover_hires_and_teams():
    people = [
        _person("Ana", "Vendas"),
        _person("Bia", "Vendas", hired_days_ago=10),
        _person("Caio", "Vendas"),
        _person("Davi", "Vendas"),
        _person("Eva", "Financeiro"),
        _person("Fábio", "Vendas", status_="inactive", updated_days_ago=20),
        _person("Gil", "Vendas", status_="inactive", updated_days_ago=200),
    ]
    summary = build_people_summary(people, None, NOW)

    assert summary.headcount == 5
    assert summary.turnover == 20.0
    assert summary.recent_hires == 1
    assert summary.climate_score == 4.2
    teams = {t.name: t for t in summary.teams}
    assert teams["Vendas"].size == 4
    assert teams["Vendas"].lead == "Ana"
    assert teams["Vendas"].status == "healthy"
    assert teams["Financeiro"].status == "attention"


def test_climate_from_kpi():
    assert climate_from_kpi(KpiInDB(name="Clima", category="Pessoas", value=90, unit="score", company_id=COMPANY)) == 4.5
    assert climate_from_kpi(KpiInDB(name="eNPS", category="Pessoas", value=3.8, unit="nota", company_id=COMPANY)) == 3.8
    assert climate_from_kpi(KpiInDB(name="Clima", category="Pessoas", value=0, company_id=COMPANY)) == 4.2


@pytest.mark.asyncio
async def test_people_crud(authenticated_client: AsyncClient):
    invalid = await authenticated_client.post("/api/people", json={"name": "Sem cargo"})
    assert invalid.status_code == status.HTTP_400_BAD_REQUEST
    assert invalid.json()["error"] == "Nome, cargo e departamento são obrigatórios"

    for name in ("Zeca", "Ana"):
        response = await authenticated_client.post("/api/people", json={"name": name, "role": "Vendedor", "department": "Vendas", "salary": 3000})
        assert response.status_code == status.HTTP_201_CREATED

    people = (await authenticated_client.get("/api/people", params={"department": "Vendas"})).json()
    assert [p["name"] for p in people] == ["Ana", "Zeca"]

    person_id = people[0]["id"]
    updated = await authenticated_client.put(f"/api/people/{person_id}", json={"status": "inactive"})
    assert updated.json()["status"] == "inactive"

    summary = (await authenticated_client.get("/api/people/summary")).json()
    assert summary["headcount"] == 1
    assert summary["turnover"] == 100.0
    assert summary["recentHires"] == 1

    removed = await authenticated_client.delete(f"/api/people/{person_id}")
    assert removed.json() == {"message": "Colaborador removido"}
    missing = await authenticated_client.put(f"/api/people/{person_id}", json={"status": "active"})
    assert missing.json()["error"] == "Colaborador não encontrado"


@pytest.mark.asyncio
async def test_people_rule_on_status(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/rules", json={
        "name": "Desligamento", "entity": "people", "metric": "status", "operator": "==", "value": "inactive", "priority": "critical",
    })
    created = await authenticated_client.post("/api/people", json={"name": "Rui", "role": "Caixa", "department": "Loja"})
    assert (await authenticated_client.get("/api/alerts")).json() == []

    await authenticated_client.put(f"/api/people/{created.json()['id']}", json={"status": "inactive"})
    alerts = (await authenticated_client.get("/api/alerts")).json()
    assert alerts[0]["description"] == 'A regra "Desligamento" foi ativada. Valor atual: inactive (Critério: == inactive)'
    assert alerts[0]["priority"] == "critical"
