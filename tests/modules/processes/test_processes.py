# tests/modules/processes/test_processes.py
import pytest
from bson import ObjectId
from fastapi import status
from httpx import AsyncClient

from sge.modules.processes.models import ProcessBlockInDB, ProcessItemInDB
from sge.modules.processes.services import block_score, build_diagnosis, process_item_points, process_item_score

COMPANY = ObjectId()


def _process(code: str, status_: str = "none", responsible: bool = False, frequency: str = "never", block_id=None) -> ProcessItemInDB:
    return ProcessItemInDB(
        block_id=block_id or ObjectId(), company_id=COMPANY, code=code, name=f"Processo {code}",
        status=status_, responsible=responsible, frequency=frequency,
    )


def _block(name: str, order: int = 0) -> ProcessBlockInDB:
    return ProcessBlockInDB(name=name, type=name.lower(), order=order, company_id=COMPANY)


def test_points_per_process():
    assert process_item_points(_process("A", "formal", True, "periodic")) == 5
    assert process_item_points(_process("A", "informal", False, "eventual")) == 1.5
    assert process_item_points(_process("A")) == 0
    assert process_item_score(_process("A", "informal", True, "eventual")) == 50


def test_block_score():
    assert block_score([]) == 0
    items = [_process("A", "formal", True, "periodic"), _process("B", "informal")]
    assert block_score(items) == 60


def test_diagnosis_statuses_and_critical_risks():
    strong, weak = _block("Financeiro", 0), _block("Pessoas", 1)
    items = {
        strong.id: [_process("F01", "formal", True, "periodic", strong.id), _process("F05", "informal", block_id=strong.id)],
        weak.id: [_process("P04", "none", block_id=weak.id)],
    }
    diagnosis = build_diagnosis([strong, weak], items)

    assert [b.score for b in diagnosis.block_scores] == [60, 0]
    assert diagnosis.overall_score == 30
    assert diagnosis.overall_status == "Empresa em Transição"
    assert diagnosis.status_class == "warning"
    assert diagnosis.weaknesses == ["Pessoas"]
    assert diagnosis.strengths == []
    assert sorted(r.code for r in diagnosis.critical_risks) == ["F05", "P04"]


def test_more_than_two_weak_blocks_is_risk():
    blocks = [_block(f"B{i}", i) for i in range(3)]
    diagnosis = build_diagnosis(blocks, {})
    assert diagnosis.overall_status == "Empresa em Risco"
    assert diagnosis.status_class == "danger"


def test_no_blocks_is_healthy_with_zero_score():
    diagnosis = build_diagnosis([], {})
    assert diagnosis.overall_score == 0
    assert diagnosis.overall_status == "Empresa Saudável"


@pytest.mark.asyncio
async def test_process_blocks_api(authenticated_client: AsyncClient):
    created = await authenticated_client.post("/api/process-blocks", json={
        "name": "Financeiro",
        "type": "financial",
        "order": 1,
        "processes": [
            {"code": "F05", "name": "Inadimplência"},
            {"code": "F01", "name": "Fluxo de caixa", "status": "informal"},
        ],
    })
    assert created.status_code == status.HTTP_201_CREATED
    processes = created.json()["processes"]
    assert [p["code"] for p in processes] == ["F01", "F05"]

    actions = (await authenticated_client.get("/api/process-blocks/actions")).json()
    by_code = {a["code"]: a for a in actions}
    # a empresa do fixture é do varejo
    assert by_code["F01"]["actionTitle"] == "Frente de Caixa"
    assert by_code["F01"]["priority"] == "Medium"
    assert by_code["F05"]["priority"] == "High"

    f01 = processes[0]["id"]
    updated = await authenticated_client.put(f"/api/process-blocks/items/{f01}", json={
        "status": "formal", "responsible": True, "frequency": "periodic",
    })
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["status"] == "formal"

    diagnosis = (await authenticated_client.get("/api/process-blocks/diagnosis")).json()
    assert diagnosis["blockScores"][0]["score"] == 50
    assert diagnosis["blockScores"][0]["formal"] == 1
    assert [r["code"] for r in diagnosis["criticalRisks"]] == ["F05"]


@pytest.mark.asyncio
async def test_process_update_evaluates_rules(authenticated_client: AsyncClient):
    await authenticated_client.post("/api/rules", json={
        "name": "Processo imaturo", "entity": "process", "metric": "score", "operator": "<", "value": 40,
    })
    block = await authenticated_client.post("/api/process-blocks", json={
        "name": "Gestão", "type": "governance", "processes": [{"code": "G03", "name": "Acordo de sócios"}],
    })
    item_id = block.json()["processes"][0]["id"]

    await authenticated_client.put(f"/api/process-blocks/items/{item_id}", json={"status": "informal"})

    alerts = (await authenticated_client.get("/api/alerts")).json()
    assert [a["title"] for a in alerts] == ["Alerta: Processo imaturo"]


@pytest.mark.asyncio
async def test_unknown_process_item_is_not_found(authenticated_client: AsyncClient):
    response = await authenticated_client.put("/api/process-blocks/items/000000000000000000000000", json={"status": "formal"})
    assert response.status_code == status.HTTP_404_NOT_FOUND
