# tests/modules/rules/test_rules_api.py
import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

HIGH_COST_RULE = {
    "name": "Custo alto",
    "entity": "financial",
    "metric": "value",
    "operator": ">",
    "value": "5000",
    "priority": "high",
}


async def test_create_rule_requires_fields(authenticated_client: AsyncClient):
    response = await authenticated_client.post("/api/rules", json={"name": "Incompleta", "entity": "financial"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Campos obrigatórios faltando"


async def test_financial_entry_triggers_alert(authenticated_client: AsyncClient):
    rule = await authenticated_client.post("/api/rules", json=HIGH_COST_RULE)
    assert rule.status_code == status.HTTP_201_CREATED
    assert rule.json()["value"] == 5000

    entry = await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Fornecedores", "description": "Farinha", "value": 7500,
    })
    assert entry.status_code == status.HTTP_201_CREATED

    alerts = (await authenticated_client.get("/api/alerts")).json()
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert["title"] == "Alerta: Custo alto"
    assert alert["description"] == 'A regra "Custo alto" foi ativada. Valor atual: 7500 (Critério: > 5000)'
    assert alert["type"] == "financial"
    assert alert["priority"] == "high"
    assert alert["ruleId"] == rule.json()["id"]


async def test_inactive_rule_does_not_fire(authenticated_client: AsyncClient):
    rule = await authenticated_client.post("/api/rules", json=HIGH_COST_RULE)
    toggled = await authenticated_client.patch(f"/api/rules/{rule.json()['id']}", json={"isActive": False})
    assert toggled.json()["isActive"] is False

    await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Fornecedores", "description": "Forno", "value": 9000,
    })
    assert (await authenticated_client.get("/api/alerts")).json() == []


async def test_rule_below_threshold_does_not_fire(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/rules", json=HIGH_COST_RULE)
    await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Fornecedores", "description": "Açúcar", "value": 300,
    })
    assert (await authenticated_client.get("/api/alerts")).json() == []


async def test_delete_rule(authenticated_client: AsyncClient):
    rule = await authenticated_client.post("/api/rules", json=HIGH_COST_RULE)
    response = await authenticated_client.delete(f"/api/rules/{rule.json()['id']}")
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert (await authenticated_client.get("/api/rules")).json() == []
