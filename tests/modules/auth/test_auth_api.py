# tests/modules/auth/test_auth_api.py
import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_register_creates_company_and_admin(test_client: AsyncClient, register):
    data = await register(test_client, industry="Tecnologia")
    assert data["token"]
    assert data["user"]["role"] == "admin"
    assert data["user"]["company"]["name"] == "Padaria Central"
    assert data["user"]["company"]["segment"] == "Tecnologia"


async def test_register_duplicate_email_conflicts(test_client: AsyncClient, register):
    await register(test_client)
    response = await test_client.post("/api/auth/register", json={
        "email": "ANA@empresa.com.br",
        "password": "outrasenha",
        "name": "Outra",
        "companyName": "Outra Empresa",
    })
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"error": "Email já cadastrado"}


async def test_login_and_me(test_client: AsyncClient, register, make_headers):
    await register(test_client)
    response = await test_client.post("/api/auth/login", json={"email": "ana@empresa.com.br", "password": "segredo123"})
    assert response.status_code == status.HTTP_200_OK
    token = response.json()["token"]

    me = await test_client.get("/api/auth/me", headers=make_headers(token))
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["email"] == "ana@empresa.com.br"


async def test_login_errors(test_client: AsyncClient, register):
    await register(test_client)
    missing = await test_client.post("/api/auth/login", json={"email": "ana@empresa.com.br"})
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json()["error"] == "Email e senha são obrigatórios"

    wrong = await test_client.post("/api/auth/login", json={"email": "ana@empresa.com.br", "password": "errada"})
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong.json()["error"] == "Credenciais inválidas"


async def test_protected_routes_require_token(test_client: AsyncClient):
    response = await test_client.get("/api/clients")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Token não fornecido"

    malformed = await test_client.get("/api/clients", headers={"Authorization": "Basic abc"})
    assert malformed.json()["error"] == "Token mal formatado"

    invalid = await test_client.get("/api/clients", headers={"Authorization": "Bearer nao-e-um-jwt"})
    assert invalid.json()["error"] == "Token inválido ou expirado"


async def test_health_is_public(test_client: AsyncClient):
    response = await test_client.get("/api/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
