# tests/conftest.py
import os
from typing import AsyncGenerator, Callable, Dict

# Precisa valer antes de qualquer import de `sge` (settings e limiter são criados no import)
os.environ.update({
    "ENVIRONMENT": "test",
    "LOG_LEVEL": "WARNING",
    "SECRET_KEY": "test-secret-key",
    "RATE_LIMIT_ENABLED": "false",
    "MONGODB_URI": "mongodb://localhost:27017/sge_test",
})

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

API = "/api"


@pytest.fixture(scope="function")
def db_client():
    client = AsyncMongoMockClient()
    return client[f"sge_test_{os.urandom(4).hex()}"]


@pytest_asyncio.fixture(scope="function")
async def test_client(db_client) -> AsyncGenerator[AsyncClient, None]:
    from sge.core.database import get_database
    from sge.main import app

    async def _override_db():
        return db_client

    app.dependency_overrides[get_database] = _override_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


async def register_company(client: AsyncClient, email: str = "ana@empresa.com.br", company_name: str = "Padaria Central", industry: str = "Varejo") -> Dict:
    response = await client.post(f"{API}/auth/register", json={
        "email": email,
        "password": "segredo123",
        "name": "Ana Souza",
        "companyName": company_name,
        "industry": industry,
    })
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def authenticated_client(test_client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """Cliente autenticado como admin de uma empresa recém-registrada."""
    data = await register_company(test_client)
    test_client.headers.update(auth_headers(data["token"]))
    yield test_client


@pytest.fixture
def make_headers() -> Callable[[str], Dict[str, str]]:
    return auth_headers


@pytest.fixture
def register():
    return register_company
