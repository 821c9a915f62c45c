# sge/modules/items/services.py
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import to_naive_utc
from sge.modules.activity.services import ActivityService
from sge.modules.clients.repository import ClientRepository
from sge.modules.flows.repository import FlowRepository, FlowStageRepository
from sge.modules.goals.services import SALES_INDICATORS, GoalsService
from sge.modules.rules.services import RulesService
from sge.modules.users.models import UserSummaryAPI
from sge.modules.users.repository import UserRepository
from .models import (
    ClientRefAPI,
    FlowRefAPI,
    ItemAPI,
    ItemCreateAPI,
    ItemHistoryEntry,
    ItemInDB,
    ItemMoveAPI,
    ItemUpdateAPI,
    StageRefAPI,
)
from .repository import ItemRepository

NOT_FOUND = "Item não encontrado"

# Tipo da etapa de destino -> status do item
STAGE_TYPE_STATUS = {"end_success": "completed", "end_fail": "lost"}

# Campos que aceitam null explícito para limpar o valor
CLEARABLE_FIELDS = ("client_id", "responsible_id", "sla_due_at")


def status_for_stage(stage_type: str) -> str:
    return STAGE_TYPE_STATUS.get(stage_type, "active")


class ItemService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.item_repo = ItemRepository(db)
        self.flow_repo = FlowRepository(db)
        self.stage_repo = FlowStageRepository(db)
        self.client_repo = ClientRepository(db)
        self.user_repo = UserRepository(db)
        self.rules = RulesService(db)
        self.goals = GoalsService(db)
        self.activity = ActivityService(db)

    async def enrich(self, items: List[ItemInDB], include_history: bool = False) -> List[ItemAPI]:
        """Converte para ItemAPI embutindo cliente, responsável, etapa e fluxo."""
        clients = await self.client_repo.map_by_ids(i.client_id for i in items)
        users = await self.user_repo.map_by_ids(i.responsible_id for i in items)
        stages = await self.stage_repo.map_by_ids(i.stage_id for i in items)
        flows = await self.flow_repo.map_by_ids(i.flow_id for i in items)

        result = []
        for item in items:
            api = ItemAPI.model_validate(item)
            if not include_history:
                api.history = []
            else:
                # histórico é gravado em ordem cronológica; a API devolve o mais recente primeiro
                api.history = list(reversed(api.history))
            if item.client_id in clients:
                api.client = ClientRefAPI.model_validate(clients[item.client_id])
            if item.responsible_id in users:
                api.responsible = UserSummaryAPI.model_validate(users[item.responsible_id])
            if item.stage_id in stages:
                api.stage = StageRefAPI.model_validate(stages[item.stage_id])
            if item.flow_id in flows:
                api.flow = FlowRefAPI.model_validate(flows[item.flow_id])
            result.append(api)
        return result

    async def _get_item(self, company_id: ObjectId, item_id: str) -> ItemInDB:
        item = await self.item_repo.get_for_company(item_id, company_id)
        if not item:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        return item

    async def _resolve_ref(self, company_id: ObjectId, value: Optional[str], kind: str) -> Optional[ObjectId]:
        """Valida clientId/responsibleId do payload dentro do tenant."""
        if not value:
            return None
        obj_id = self.item_repo._to_objectid(value)
        repo = self.client_repo if kind == "client" else self.user_repo
        if not obj_id or not await repo.get_for_company(obj_id, company_id):
            detail = "Cliente não encontrado" if kind == "client" else "Responsável não encontrado"
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        return obj_id

    async def _after_write(self, item: ItemInDB) -> None:
        await self.rules.evaluate(item.company_id, "operations", item.model_dump())
        await self.goals.sync_metrics_safely(item.company_id, SALES_INDICATORS)

    async def list_items(
        self,
        company_id: ObjectId,
        flow_id: Optional[str] = None,
        stage_id: Optional[str] = None,
        status_filter: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[ItemAPI]:
        query: Dict[str, Any] = {}
        if flow_id and flow_id != "all":
            query["flow_id"] = self.item_repo._to_objectid(flow_id)
        if stage_id and stage_id != "all":
            query["stage_id"] = self.item_repo._to_objectid(stage_id)
        if status_filter and status_filter != "all":
            query["status"] = status_filter
        if priority and priority != "all":
            query["priority"] = priority
        if search:
            query["title"] = {"$regex": re.escape(search), "$options": "i"}
        items = await self.item_repo.list_for_company(company_id, query, sort=[("updated_at", DESCENDING)])
        return await self.enrich(items)

    async def get_item(self, company_id: ObjectId, item_id: str) -> ItemAPI:
        item = await self._get_item(company_id, item_id)
        return (await self.enrich([item], include_history=True))[0]

    async def create_item(self, current_user: TokenUser, payload: ItemCreateAPI) -> ItemAPI:
        log = logger.bind(service="ItemService", company_id=str(current_user.company_id))
        if not payload.title or not payload.flow_id or not payload.stage_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Título, fluxo e etapa são obrigatórios")

        flow = await self.flow_repo.get_for_company(payload.flow_id, current_user.company_id)
        if not flow:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fluxo não encontrado")
        stage = await self.stage_repo.get_by_id(payload.stage_id)
        if not stage or stage.flow_id != flow.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Etapa não pertence ao fluxo")

        item = await self.item_repo.create({
            "title": payload.title,
            "type": payload.type or "task",
            "flow_id": flow.id,
            "stage_id": stage.id,
            "client_id": await self._resolve_ref(current_user.company_id, payload.client_id, "client"),
            "value": payload.value,
            "priority": payload.priority or "medium",
            "responsible_id": await self._resolve_ref(current_user.company_id, payload.responsible_id, "user"),
            "sla_due_at": to_naive_utc(payload.sla_due_at),
            "status": status_for_stage(stage.type),
            "company_id": current_user.company_id,
        })
        entry = ItemHistoryEntry(action="created", to_stage=stage.id, note=f"Item criado: {item.title}", user_id=current_user.id)
        await self.item_repo.push_history(item.id, entry)
        log.info(f"Item criado: '{item.title}' no fluxo '{flow.name}'")

        item = await self.item_repo.get_by_id(item.id)
        await self._after_write(item)
        await self.activity.log_activity(
            "created", "items", item.id, item.title, current_user.company_id, current_user.id,
            details={"flow": flow.name, "stage": stage.name},
        )
        return (await self.enrich([item], include_history=True))[0]

    async def update_item(self, current_user: TokenUser, item_id: str, payload: ItemUpdateAPI) -> ItemAPI:
        item = await self._get_item(current_user.company_id, item_id)
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k in CLEARABLE_FIELDS}
        if "client_id" in changes:
            changes["client_id"] = await self._resolve_ref(current_user.company_id, changes["client_id"], "client")
        if "responsible_id" in changes:
            changes["responsible_id"] = await self._resolve_ref(current_user.company_id, changes["responsible_id"], "user")
        if "sla_due_at" in changes:
            changes["sla_due_at"] = to_naive_utc(changes["sla_due_at"])

        updated = await self.item_repo.update_for_company(item.id, current_user.company_id, changes)
        await self._after_write(updated)
        await self.activity.log_activity(
            "updated", "items", updated.id, updated.title, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True, mode="json")},
        )
        return (await self.enrich([updated]))[0]

    async def move_item(self, current_user: TokenUser, item_id: str, payload: ItemMoveAPI) -> ItemAPI:
        if not payload.stage_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="stageId é obrigatório")
        item = await self._get_item(current_user.company_id, item_id)
        stage = await self.stage_repo.get_by_id(payload.stage_id)
        if not stage or stage.flow_id != item.flow_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Etapa não pertence ao fluxo do item")

        entry = ItemHistoryEntry(
            action="moved",
            from_stage=item.stage_id,
            to_stage=stage.id,
            note=payload.note or f"Item movido para {stage.name}",
            user_id=current_user.id,
        )
        await self.item_repo.push_history(item.id, entry, {"stage_id": stage.id, "status": status_for_stage(stage.type)})
        logger.bind(service="ItemService", item_id=str(item.id)).info(f"Item movido para '{stage.name}'")

        moved = await self.item_repo.get_by_id(item.id)
        await self._after_write(moved)
        await self.activity.log_activity(
            "moved", "items", moved.id, moved.title, current_user.company_id, current_user.id,
            details={"fromStage": str(item.stage_id), "toStage": str(stage.id), "stageName": stage.name},
        )
        return (await self.enrich([moved], include_history=True))[0]

    async def delete_item(self, current_user: TokenUser, item_id: str) -> None:
        item = await self._get_item(current_user.company_id, item_id)
        await self.item_repo.delete_for_company(item.id, current_user.company_id)
        await self.goals.sync_metrics_safely(current_user.company_id, SALES_INDICATORS)
        await self.activity.log_activity("deleted", "items", item.id, item.title, current_user.company_id, current_user.id)


async def get_item_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> ItemService:
    return ItemService(db)
