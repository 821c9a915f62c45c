# tests/modules/rules/test_rules_side_effects.py
import pytest
from fastapi import status
from httpx import AsyncClient

from sge.modules.alerts.repository import AlertRepository
from sge.modules.rules.repository import BusinessRuleRepository

pytestmark = pytest.mark.asyncio


async def _rule(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Valor alto", "entity": "operations", "metric": "value", "operator": ">", "value": 1000, **overrides}
    response = await client.post("/api/rules", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def _sales_flow(client: AsyncClient) -> dict:
    response = await client.post("/api/flows", json={
        "name": "Vendas", "type": "sales",
        "stages": [{"name": "Lead", "type": "start"}, {"name": "Ganho", "type": "end_success"}],
    })
    return response.json()


async def test_failing_alert_insert_does_not_break_writes(authenticated_client: AsyncClient, monkeypatch):
    await _rule(authenticated_client, entity="financial")
    await _rule(authenticated_client, name="Desligamento", entity="people", metric="status", operator="==", value="inactive")

    async def broken_create(self, data_in):
        raise RuntimeError("Database error during create: conexão perdida")

    monkeypatch.setattr(AlertRepository, "create", broken_create)

    entry = await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Fornecedores", "description": "Equipamento", "value": 9000,
    })
    assert entry.status_code == status.HTTP_201_CREATED
    person = await authenticated_client.post("/api/people", json={
        "name": "Rui", "role": "Caixa", "department": "Loja", "status": "inactive",
    })
    assert person.status_code == status.HTTP_201_CREATED

    monkeypatch.undo()
    assert (await authenticated_client.get("/api/alerts")).json() == []
    assert len((await authenticated_client.get("/api/financial")).json()) == 1


async def test_failing_rule_lookup_does_not_break_item_writes(authenticated_client: AsyncClient, monkeypatch):
    flow = await _sales_flow(authenticated_client)

    async def broken_list_active(self, company_id, entity):
        raise RuntimeError("Database error during list_by")

    monkeypatch.setattr(BusinessRuleRepository, "list_active", broken_list_active)

    created = await authenticated_client.post("/api/items", json={
        "title": "Pedido grande", "flowId": flow["id"], "stageId": flow["stages"][0]["id"], "value": 5000,
    })
    assert created.status_code == status.HTTP_201_CREATED
    moved = await authenticated_client.patch(f"/api/items/{created.json()['id']}/move", json={"stageId": flow["stages"][1]["id"]})
    assert moved.status_code == status.HTTP_200_OK
    assert moved.json()["status"] == "completed"


async def test_unknown_action_type_is_ignored(authenticated_client: AsyncClient):
    await _rule(authenticated_client, entity="financial", actionType="email")
    entry = await authenticated_client.post("/api/financial", json={
        "type": "cost", "category": "Fornecedores", "description": "Forno", "value": 9000,
    })
    assert entry.status_code == status.HTTP_201_CREATED
    assert (await authenticated_client.get("/api/alerts", params={"status": "all"})).json() == []


async def test_operations_rules_fire_on_item_create_update_and_move(authenticated_client: AsyncClient):
    rule = await _rule(authenticated_client, priority="high")
    flow = await _sales_flow(authenticated_client)

    small = await authenticated_client.post("/api/items", json={
        "title": "Pedido pequeno", "flowId": flow["id"], "stageId": flow["stages"][0]["id"], "value": 200,
    })
    assert (await authenticated_client.get("/api/alerts")).json() == []

    await authenticated_client.put(f"/api/items/{small.json()['id']}", json={"value": 1500})
    alerts = (await authenticated_client.get("/api/alerts")).json()
    assert len(alerts) == 1
    assert alerts[0]["description"] == 'A regra "Valor alto" foi ativada. Valor atual: 1500 (Critério: > 1000)'
    assert alerts[0]["type"] == "operations"
    assert alerts[0]["ruleId"] == rule["id"]

    big = await authenticated_client.post("/api/items", json={
        "title": "Pedido grande", "flowId": flow["id"], "stageId": flow["stages"][0]["id"], "value": 5000,
    })
    assert len((await authenticated_client.get("/api/alerts")).json()) == 2

    await authenticated_client.patch(f"/api/items/{big.json()['id']}/move", json={"stageId": flow["stages"][1]["id"]})
    alerts = (await authenticated_client.get("/api/alerts")).json()
    assert len(alerts) == 3
    assert {a["priority"] for a in alerts} == {"high"}


async def test_status_rule_skips_records_without_status(authenticated_client: AsyncClient):
    await _rule(authenticated_client, name="Status diferente", entity="financial", metric="status", operator="!=", value="paid")
    await authenticated_client.post("/api/financial", json={
        "type": "revenue", "category": "Vendas", "description": "Balcão", "value": 300,
    })
    assert (await authenticated_client.get("/api/alerts", params={"status": "all"})).json() == []
