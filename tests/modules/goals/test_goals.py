# tests/modules/goals/test_goals.py
import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

from sge.modules.goals.models import KeyResultInDB
from sge.modules.goals.services import compute_goal_progress


def _kr(current: float, target: float) -> KeyResultInDB:
    return KeyResultInDB(goal_id=ObjectId(), company_id=ObjectId(), title="kr", current_value=current, target_value=target)


def test_goal_progress_is_clamped_mean():
    assert compute_goal_progress([]) == 0
    assert compute_goal_progress([_kr(50, 100), _kr(300, 100)]) == 75
    assert compute_goal_progress([_kr(-10, 100)]) == 0


def test_zero_target_counts_as_zero():
    assert compute_goal_progress([_kr(80, 100), _kr(5, 0)]) == 40


@pytest.mark.asyncio
async def test_goal_requires_title_type_period(authenticated_client: AsyncClient):
    response = await authenticated_client.post("/api/goals", json={"title": "Crescer"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Título, tipo e período são obrigatórios"


@pytest.mark.asyncio
async def test_linked_key_result_follows_revenue(authenticated_client: AsyncClient):
    goal = await authenticated_client.post("/api/goals", json={
        "title": "Faturar 10 mil",
        "type": "company",
        "period": "2026-Q4",
        "keyResults": [
            {"title": "Receita do mês", "targetValue": 10000, "linkedIndicator": "financial_revenue_month"},
            {"title": "Manual", "targetValue": 10, "currentValue": 5},
        ],
    })
    assert goal.status_code == status.HTTP_201_CREATED
    assert goal.json()["progress"] == 25

    await authenticated_client.post("/api/financial", json={
        "type": "revenue", "category": "Vendas", "description": "Balcão", "value": 2500,
    })

    goals = (await authenticated_client.get("/api/goals")).json()
    linked = next(kr for kr in goals[0]["keyResults"] if kr["linkedIndicator"])
    assert linked["currentValue"] == 2500
    assert goals[0]["progress"] == 38


@pytest.mark.asyncio
async def test_manual_key_result_update_recomputes_progress(authenticated_client: AsyncClient):
    goal = await authenticated_client.post("/api/goals", json={
        "title": "Treinar equipe",
        "type": "department",
        "period": "2026",
        "keyResults": [{"title": "Treinamentos", "targetValue": 4}],
    })
    kr_id = goal.json()["keyResults"][0]["id"]

    response = await authenticated_client.put(f"/api/goals/key-results/{kr_id}", json={"currentValue": 2})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["currentValue"] == 2

    goals = (await authenticated_client.get("/api/goals")).json()
    assert goals[0]["progress"] == 50


@pytest.mark.asyncio
async def test_sync_endpoint_and_indicators(authenticated_client: AsyncClient):
    indicators = (await authenticated_client.get("/api/goals/indicators")).json()
    assert "active_clients_count" in [i["id"] for i in indicators]

    response = await authenticated_client.post("/api/goals/sync")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"updatedKeyResults": 0, "goalsRecalculated": 0}


@pytest.mark.asyncio
async def test_goal_update_ignores_nulls_but_clears_owner(authenticated_client: AsyncClient):
    me = (await authenticated_client.get("/api/auth/me")).json()
    goal = (await authenticated_client.post("/api/goals", json={
        "title": "Abrir filial", "type": "company", "period": "2026", "ownerId": me["id"],
    })).json()
    assert goal["ownerId"] == me["id"]

    response = await authenticated_client.put(f"/api/goals/{goal['id']}", json={"title": None, "status": None})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Abrir filial"
    assert response.json()["status"] == goal["status"]

    cleared = await authenticated_client.put(f"/api/goals/{goal['id']}", json={"ownerId": None})
    assert cleared.json()["ownerId"] is None
    assert cleared.json()["owner"] is None
    assert (await authenticated_client.get("/api/goals")).status_code == status.HTTP_200_OK
