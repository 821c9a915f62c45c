# tests/modules/financial/test_financial_api.py
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

from sge.modules.financial.models import FinancialEntryInDB
from sge.modules.financial.services import build_financial_summary

COMPANY = ObjectId()


def _entry(type_: str, value: float) -> FinancialEntryInDB:
    return FinancialEntryInDB(type=type_, category="c", description="d", value=value, date=datetime(2026, 5, 1), company_id=COMPANY)


def test_summary_trends_and_runway():
    month = [_entry("revenue", 12000), _entry("cost", 3000), _entry("investment", 500)]
    previous = [_entry("revenue", 10000), _entry("cost", 4000)]
    summary = build_financial_summary(month, previous, month + previous)

    assert summary.margin == 75
    assert summary.revenue_trend == 20
    assert summary.cost_trend == -25
    assert summary.cash_available == 15000
    assert summary.operating_months == 5
    assert summary.investments == 500


def test_summary_without_history():
    summary = build_financial_summary([], [], [])
    assert (summary.margin, summary.revenue_trend, summary.cost_trend, summary.operating_months) == (0, 0, 0, 0)


@pytest.mark.asyncio
async def test_entry_crud_and_filters(authenticated_client: AsyncClient):
    missing = await authenticated_client.post("/api/financial", json={"type": "revenue", "value": 10})
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json()["error"] == "Todos os campos são obrigatórios"

    revenue = await authenticated_client.post("/api/financial", json={
        "type": "revenue", "category": "Vendas", "description": "Balcão", "value": 1500,
    })
    assert revenue.status_code == status.HTTP_201_CREATED
    await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Aluguel", "description": "Loja", "value": 800, "date": "2020-01-10T00:00:00Z",
    })

    this_month = (await authenticated_client.get("/api/financial", params={"period": "month"})).json()
    assert [e["description"] for e in this_month] == ["Balcão"]
    costs = (await authenticated_client.get("/api/financial", params={"type": "cost"})).json()
    assert [e["value"] for e in costs] == [800]

    entry_id = revenue.json()["id"]
    updated = await authenticated_client.put(f"/api/financial/{entry_id}", json={"value": 1700})
    assert updated.json()["value"] == 1700

    removed = await authenticated_client.delete(f"/api/financial/{entry_id}")
    assert removed.json() == {"message": "Lançamento removido"}
    not_found = await authenticated_client.put(f"/api/financial/{entry_id}", json={"value": 1})
    assert not_found.status_code == status.HTTP_404_NOT_FOUND
    assert not_found.json()["error"] == "Lançamento não encontrado"


@pytest.mark.asyncio
async def test_summary_endpoint(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/financial", json={"type": "revenue", "category": "Vendas", "description": "A", "value": 4000})
    await authenticated_client.post("/api/financial", json={"type": "cost", "category": "Insumos", "description": "B", "value": 1000})

    summary = (await authenticated_client.get("/api/financial/summary")).json()
    assert summary["revenue"] == 4000
    assert summary["costs"] == 1000
    assert summary["margin"] == 75
    assert summary["cashAvailable"] == 3000
    assert summary["operatingMonths"] == 3
    assert summary["revenueTrend"] == 0

    logs = (await authenticated_client.get("/api/logs", params={"module": "financial"})).json()
    assert sorted(log["entityName"] for log in logs) == ["A - R$ 4000", "B - R$ 1000"]
