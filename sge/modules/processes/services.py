# sge/modules/processes/services.py
from typing import Dict, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import round_half_up
from sge.modules.activity.services import ActivityService
from sge.modules.company.repository import CompanyRepository
from sge.modules.rules.services import RulesService
from .action_plan import ActionPlanService
from .models import (
    ActionSuggestionAPI,
    BlockScoreAPI,
    DiagnosisAPI,
    ProcessBlockAPI,
    ProcessBlockCreateAPI,
    ProcessBlockInDB,
    ProcessItemAPI,
    ProcessItemInDB,
    ProcessItemUpdateAPI,
)
from .repository import ProcessBlockRepository, ProcessItemRepository

MAX_POINTS_PER_PROCESS = 5  # formal (3) + responsável (1) + periódico (1)
CRITICAL_CODES = ("D02", "F05", "P04", "G03", "O05")
IMMATURE_STATUSES = ("none", "informal")


def process_item_points(item: ProcessItemInDB) -> float:
    points = 0.0
    if item.status == "formal":
        points += 3
    elif item.status == "informal":
        points += 1
    if item.responsible:
        points += 1
    if item.frequency == "periodic":
        points += 1
    elif item.frequency == "eventual":
        points += 0.5
    return points


def process_item_score(item: ProcessItemInDB) -> int:
    return round_half_up(process_item_points(item) / MAX_POINTS_PER_PROCESS * 100)


def block_score(items: List[ProcessItemInDB]) -> int:
    if not items:
        return 0
    points = sum(process_item_points(i) for i in items)
    return round_half_up(points / (len(items) * MAX_POINTS_PER_PROCESS) * 100)


def build_diagnosis(blocks: List[ProcessBlockInDB], items_by_block: Dict[ObjectId, List[ProcessItemInDB]]) -> DiagnosisAPI:
    """Maturidade por bloco e diagnóstico geral da empresa."""
    block_scores = []
    for block in blocks:
        items = items_by_block.get(block.id, [])
        block_scores.append(BlockScoreAPI(
            id=block.id,
            name=block.name,
            type=block.type,
            score=block_score(items),
            total_processes=len(items),
            formal=sum(1 for i in items if i.status == "formal"),
            informal=sum(1 for i in items if i.status == "informal"),
            none=sum(1 for i in items if i.status == "none"),
        ))

    overall = round_half_up(sum(b.score for b in block_scores) / len(block_scores)) if block_scores else 0
    weaknesses = [b.name for b in block_scores if b.score < 50]

    if len(weaknesses) > 2:
        overall_status, status_class = "Empresa em Risco", "danger"
    elif weaknesses:
        overall_status, status_class = "Empresa em Transição", "warning"
    else:
        overall_status, status_class = "Empresa Saudável", "success"

    critical_risks = [
        ProcessItemAPI.model_validate(item)
        for block in blocks
        for item in items_by_block.get(block.id, [])
        if item.status in IMMATURE_STATUSES and item.code in CRITICAL_CODES
    ]

    return DiagnosisAPI(
        overall_score=overall,
        overall_status=overall_status,
        status_class=status_class,
        block_scores=block_scores,
        critical_risks=critical_risks,
        strengths=[b.name for b in block_scores if b.score >= 70],
        weaknesses=weaknesses,
    )


def build_action_plan(items: List[ProcessItemInDB], segment: Optional[str]) -> List[ActionSuggestionAPI]:
    suggestions = []
    for item in items:
        if item.status not in IMMATURE_STATUSES:
            continue
        template = ActionPlanService.get_template(item.code, segment)
        suggestions.append(ActionSuggestionAPI(
            process_id=item.id,
            process_name=item.name,
            code=item.code,
            status=item.status,
            action_title=template.title,
            action_step=template.step,
            suggested_tool=template.tool,
            priority="High" if item.status == "none" else "Medium",
        ))
    return suggestions


class ProcessService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.block_repo = ProcessBlockRepository(db)
        self.item_repo = ProcessItemRepository(db)
        self.company_repo = CompanyRepository(db)
        self.rules = RulesService(db)
        self.activity = ActivityService(db)

    async def _load(self, company_id: ObjectId):
        blocks = await self.block_repo.list_ordered(company_id)
        items_by_block = await self.item_repo.group_by_block(b.id for b in blocks)
        return blocks, items_by_block

    async def list_blocks(self, company_id: ObjectId) -> List[ProcessBlockAPI]:
        blocks, items_by_block = await self._load(company_id)
        result = []
        for block in blocks:
            api = ProcessBlockAPI.model_validate(block)
            api.processes = [ProcessItemAPI.model_validate(i) for i in items_by_block.get(block.id, [])]
            result.append(api)
        return result

    async def create_block(self, current_user: TokenUser, payload: ProcessBlockCreateAPI) -> ProcessBlockAPI:
        block = await self.block_repo.create({
            "name": payload.name,
            "type": payload.type,
            "order": payload.order,
            "company_id": current_user.company_id,
        })
        items = []
        for process in payload.processes:
            items.append(await self.item_repo.create({
                **process.model_dump(),
                "block_id": block.id,
                "company_id": current_user.company_id,
            }))
        logger.bind(service="ProcessService", company_id=str(current_user.company_id)).info(
            f"Bloco de processos criado: {block.name} ({len(items)} processos)"
        )
        await self.activity.log_activity(
            "created", "processes", block.id, block.name, current_user.company_id, current_user.id,
            details={"type": block.type, "processes": len(items)},
        )
        api = ProcessBlockAPI.model_validate(block)
        api.processes = [ProcessItemAPI.model_validate(i) for i in sorted(items, key=lambda i: i.code)]
        return api

    async def update_item(self, current_user: TokenUser, item_id: str, payload: ProcessItemUpdateAPI) -> ProcessItemInDB:
        # observation pode ser limpa com null; os demais campos não
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "observation"}

        item = await self.item_repo.update_for_company(item_id, current_user.company_id, changes)
        if not item:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Processo não encontrado")

        await self.rules.evaluate(current_user.company_id, "process", {**item.model_dump(), "score": process_item_score(item)})
        await self.activity.log_activity(
            "updated", "processes", item.id, f"{item.code} - {item.name}", current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        return item

    async def get_diagnosis(self, company_id: ObjectId) -> DiagnosisAPI:
        blocks, items_by_block = await self._load(company_id)
        return build_diagnosis(blocks, items_by_block)

    async def get_action_plan(self, company_id: ObjectId) -> List[ActionSuggestionAPI]:
        company = await self.company_repo.get_by_id(company_id)
        blocks, items_by_block = await self._load(company_id)
        items = [i for b in blocks for i in items_by_block.get(b.id, [])]
        return build_action_plan(items, company.segment if company else None)


async def get_process_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> ProcessService:
    return ProcessService(db)
