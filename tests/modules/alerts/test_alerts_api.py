# tests/modules/alerts/test_alerts_api.py
import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create(client: AsyncClient, title: str, **extra) -> dict:
    response = await client.post("/api/alerts", json={"title": title, "description": f"{title} detectado", **extra})
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


async def test_alert_lifecycle(authenticated_client: AsyncClient):
    first = await _create(authenticated_client, "Estoque baixo", priority="high")
    second = await _create(authenticated_client, "Atraso de fornecedor", type="supplier")
    third = await _create(authenticated_client, "Caixa negativo", priority="critical")
    assert first["status"] == "active"
    assert first["type"] == "operational"

    resolved = await authenticated_client.patch(f"/api/alerts/{first['id']}/resolve")
    assert resolved.json()["status"] == "resolved"
    assert resolved.json()["resolvedAt"] is not None
    dismissed = await authenticated_client.patch(f"/api/alerts/{second['id']}/dismiss")
    assert dismissed.json()["status"] == "dismissed"

    active = (await authenticated_client.get("/api/alerts")).json()
    assert [a["id"] for a in active] == [third["id"]]
    history = (await authenticated_client.get("/api/alerts", params={"status": "history"})).json()
    assert {a["id"] for a in history} == {first["id"], second["id"]}
    everything = (await authenticated_client.get("/api/alerts", params={"status": "all"})).json()
    assert len(everything) == 3
    by_type = (await authenticated_client.get("/api/alerts", params={"status": "all", "type": "supplier"})).json()
    assert [a["id"] for a in by_type] == [second["id"]]

    removed = await authenticated_client.delete(f"/api/alerts/{third['id']}")
    assert removed.json() == {"message": "Alerta removido"}
    again = await authenticated_client.delete(f"/api/alerts/{third['id']}")
    assert again.status_code == status.HTTP_404_NOT_FOUND
    assert again.json()["error"] == "Alerta não encontrado"


async def test_resolve_unknown_alert(authenticated_client: AsyncClient):
    for alert_id in (str(ObjectId()), "nao-e-um-id"):
        response = await authenticated_client.patch(f"/api/alerts/{alert_id}/resolve")
        assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_alerts_are_tenant_scoped(authenticated_client: AsyncClient, register, make_headers):
    alert = await _create(authenticated_client, "Só da padaria")
    other = await register(authenticated_client, email="rui@outra.com.br", company_name="Outra Ltda")
    headers = make_headers(other["token"])

    assert (await authenticated_client.get("/api/alerts", headers=headers)).json() == []
    response = await authenticated_client.patch(f"/api/alerts/{alert['id']}/dismiss", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_manual_alert_requires_title_and_description(authenticated_client: AsyncClient):
    for payload in ({"description": "Sem título"}, {"title": "Sem descrição"}, {"title": "", "description": "x"}):
        response = await authenticated_client.post("/api/alerts", json=payload)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Título e descrição são obrigatórios"
    assert (await authenticated_client.get("/api/alerts", params={"status": "all"})).json() == []
