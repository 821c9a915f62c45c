# tests/modules/kpis/test_kpis_api.py
import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_kpi_crud(authenticated_client: AsyncClient):
    invalid = await authenticated_client.post("/api/kpis", json={"value": 10})
    assert invalid.status_code == status.HTTP_400_BAD_REQUEST
    assert invalid.json()["error"] == "Nome e categoria são obrigatórios"

    await authenticated_client.post("/api/kpis", json={"name": "Ticket médio", "category": "Vendas", "value": 42, "target": 50, "unit": "R$", "status": "warning"})
    created = await authenticated_client.post("/api/kpis", json={"name": "Clima", "category": "Pessoas", "value": 80, "unit": "score"})
    assert created.status_code == status.HTTP_201_CREATED
    kpi = created.json()
    assert (kpi["trend"], kpi["status"]) == ("stable", "success")

    kpis = (await authenticated_client.get("/api/kpis")).json()
    assert [k["category"] for k in kpis] == ["Pessoas", "Vendas"]
    warnings = (await authenticated_client.get("/api/kpis", params={"status": "warning"})).json()
    assert [k["name"] for k in warnings] == ["Ticket médio"]

    updated = await authenticated_client.put(f"/api/kpis/{kpi['id']}", json={"value": 90, "trend": "up"})
    assert (updated.json()["value"], updated.json()["trend"]) == (90, "up")

    removed = await authenticated_client.delete(f"/api/kpis/{kpi['id']}")
    assert removed.json() == {"message": "KPI removido"}
    missing = await authenticated_client.put(f"/api/kpis/{kpi['id']}", json={"value": 1})
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["error"] == "KPI não encontrado"


async def test_kpi_invalid_trend_is_rejected(authenticated_client: AsyncClient):
    response = await authenticated_client.post("/api/kpis", json={"name": "NPS", "category": "Clientes", "trend": "sideways"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["error"] == "Dados inválidos"


async def test_climate_kpi_feeds_people_summary(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/kpis", json={"name": "Pesquisa de Clima", "category": "Pessoas", "value": 70, "unit": "score"})
    summary = (await authenticated_client.get("/api/people/summary")).json()
    assert summary["climateScore"] == 3.5


async def test_update_unknown_kpi(authenticated_client: AsyncClient):
    response = await authenticated_client.put(f"/api/kpis/{ObjectId()}", json={"value": 1})
    assert response.status_code == status.HTTP_404_NOT_FOUND
