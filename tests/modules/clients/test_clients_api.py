# tests/modules/clients/test_clients_api.py
import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_client_crud(authenticated_client: AsyncClient):
    created = await authenticated_client.post("/api/clients", json={"name": "Mercado Bom Preço", "email": "contato@bompreco.com.br", "status": "active"})
    assert created.status_code == status.HTTP_201_CREATED
    client_id = created.json()["id"]
    assert created.json()["itemsCount"] == 0

    listed = await authenticated_client.get("/api/clients", params={"search": "bom"})
    assert [c["id"] for c in listed.json()] == [client_id]

    updated = await authenticated_client.put(f"/api/clients/{client_id}", json={"phone": "11 99999-0000"})
    assert updated.json()["phone"] == "11 99999-0000"

    removed = await authenticated_client.delete(f"/api/clients/{client_id}")
    assert removed.json() == {"message": "Cliente removido"}
    missing = await authenticated_client.get(f"/api/clients/{client_id}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_client_requires_name(authenticated_client: AsyncClient):
    response = await authenticated_client.post("/api/clients", json={"email": "x@empresa.com.br"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Nome é obrigatório"


async def test_invalid_id_is_not_found(authenticated_client: AsyncClient):
    response = await authenticated_client.get("/api/clients/nao-e-objectid")
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_tenants_are_isolated(test_client: AsyncClient, register, make_headers):
    first = await register(test_client, email="a@empresa.com.br", company_name="Empresa A")
    second = await register(test_client, email="b@empresa.com.br", company_name="Empresa B")

    created = await test_client.post("/api/clients", json={"name": "Cliente da A"}, headers=make_headers(first["token"]))
    client_id = created.json()["id"]

    other = await test_client.get("/api/clients", headers=make_headers(second["token"]))
    assert other.json() == []
    peek = await test_client.get(f"/api/clients/{client_id}", headers=make_headers(second["token"]))
    assert peek.status_code == status.HTTP_404_NOT_FOUND


async def test_viewer_cannot_invite_or_edit_company(authenticated_client: AsyncClient, make_headers):
    invited = await authenticated_client.post("/api/company/users", json={
        "name": "Bruno",
        "email": "bruno@empresa.com.br",
        "password": "segredo123",
        "role": "viewer",
    })
    assert invited.status_code == status.HTTP_201_CREATED

    login = await authenticated_client.post("/api/auth/login", json={"email": "bruno@empresa.com.br", "password": "segredo123"})
    viewer_headers = make_headers(login.json()["token"])

    forbidden = await authenticated_client.put("/api/company", json={"name": "Novo Nome"}, headers=viewer_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert forbidden.json()["error"].startswith("Acesso negado")

    rule = await authenticated_client.post("/api/rules", json={
        "name": "x", "entity": "financial", "metric": "value", "operator": ">", "value": 1,
    }, headers=viewer_headers)
    assert rule.status_code == status.HTTP_403_FORBIDDEN


async def test_null_name_keeps_client_and_company_intact(authenticated_client: AsyncClient):
    created = (await authenticated_client.post("/api/clients", json={"name": "Café Aroma", "email": "oi@aroma.com.br"})).json()

    response = await authenticated_client.put(f"/api/clients/{created['id']}", json={"name": None, "status": None})
    assert response.status_code == status.HTTP_200_OK
    assert (response.json()["name"], response.json()["status"]) == ("Café Aroma", "prospect")
    listed = await authenticated_client.get("/api/clients")
    assert listed.status_code == status.HTTP_200_OK
    assert [c["name"] for c in listed.json()] == ["Café Aroma"]

    company = await authenticated_client.put("/api/company", json={"name": None, "cnpj": "12.345.678/0001-90"})
    assert company.status_code == status.HTTP_200_OK
    assert company.json()["name"] == "Padaria Central"
    assert company.json()["cnpj"] == "12.345.678/0001-90"
