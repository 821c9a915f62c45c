# sge/modules/flows/services.py
from typing import List

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.modules.activity.services import ActivityService
from sge.modules.items.repository import ItemRepository
from sge.modules.items.services import ItemService
from .models import (
    DEFAULT_STAGE_SLA,
    FlowAPI,
    FlowCreateAPI,
    FlowDetailAPI,
    FlowInDB,
    FlowUpdateAPI,
    StageAPI,
    StageCreateAPI,
)
from .repository import FlowRepository, FlowStageRepository

NOT_FOUND = "Fluxo não encontrado"


class FlowService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.flow_repo = FlowRepository(db)
        self.stage_repo = FlowStageRepository(db)
        self.item_repo = ItemRepository(db)
        self.item_service = ItemService(db)
        self.activity = ActivityService(db)

    async def _get_flow(self, company_id: ObjectId, flow_id: str) -> FlowInDB:
        flow = await self.flow_repo.get_for_company(flow_id, company_id)
        if not flow:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        return flow

    async def _with_stages(self, flow: FlowInDB) -> FlowAPI:
        api = FlowAPI.model_validate(flow)
        api.stages = [StageAPI.model_validate(s) for s in await self.stage_repo.list_for_flow(flow.id)]
        return api

    async def list_flows(self, company_id: ObjectId) -> List[FlowAPI]:
        flows = await self.flow_repo.list_company_flows(company_id)
        stages = await self.stage_repo.list_for_flows(f.id for f in flows)
        counts = await self.item_repo.count_by(company_id, "flow_id")
        result = []
        for flow in flows:
            api = FlowAPI.model_validate(flow)
            api.stages = [StageAPI.model_validate(s) for s in stages.get(flow.id, [])]
            api.items_count = counts.get(flow.id, 0)
            result.append(api)
        return result

    async def get_flow(self, company_id: ObjectId, flow_id: str) -> FlowDetailAPI:
        flow = await self._get_flow(company_id, flow_id)
        base = await self._with_stages(flow)
        items = await self.item_repo.list_for_company(company_id, {"flow_id": flow.id}, sort=[("updated_at", DESCENDING)])
        detail = FlowDetailAPI(**base.model_dump())
        detail.items = await self.item_service.enrich(items)
        detail.items_count = len(items)
        return detail

    def _stage_data(self, flow: FlowInDB, stage: StageCreateAPI, order: int) -> dict:
        return {
            "flow_id": flow.id,
            "company_id": flow.company_id,
            "name": stage.name,
            "order": order,
            "sla": stage.sla or DEFAULT_STAGE_SLA,
            "type": stage.type or "process",
        }

    async def create_flow(self, current_user: TokenUser, payload: FlowCreateAPI) -> FlowAPI:
        if not payload.name or not payload.type:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nome e tipo são obrigatórios")

        flow = await self.flow_repo.create({"name": payload.name, "type": payload.type, "company_id": current_user.company_id})
        for position, stage in enumerate(payload.stages or []):
            await self.stage_repo.create(self._stage_data(flow, stage, position))

        logger.bind(service="FlowService", company_id=str(current_user.company_id)).info(
            f"Fluxo criado: '{flow.name}' com {len(payload.stages or [])} etapa(s)"
        )
        await self.activity.log_activity("created", "flows", flow.id, flow.name, current_user.company_id, current_user.id, details={"type": flow.type})
        return await self._with_stages(flow)

    async def update_flow(self, current_user: TokenUser, flow_id: str, payload: FlowUpdateAPI) -> FlowAPI:
        flow = await self._get_flow(current_user.company_id, flow_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        updated = await self.flow_repo.update_for_company(flow.id, current_user.company_id, changes)
        await self.activity.log_activity("updated", "flows", updated.id, updated.name, current_user.company_id, current_user.id)
        return await self._with_stages(updated)

    async def delete_flow(self, current_user: TokenUser, flow_id: str) -> None:
        flow = await self.flow_repo.get_for_company(flow_id, current_user.company_id)
        if not flow:
            return
        removed_items = await self.item_repo.delete_many({"company_id": current_user.company_id, "flow_id": flow.id})
        await self.stage_repo.delete_many({"flow_id": flow.id})
        await self.flow_repo.delete_for_company(flow.id, current_user.company_id)
        logger.bind(service="FlowService").info(f"Fluxo '{flow.name}' removido com {removed_items} item(ns).")
        await self.activity.log_activity("deleted", "flows", flow.id, flow.name, current_user.company_id, current_user.id)

    async def add_stage(self, current_user: TokenUser, flow_id: str, payload: StageCreateAPI) -> StageAPI:
        flow = await self._get_flow(current_user.company_id, flow_id)
        position = await self.stage_repo.count({"flow_id": flow.id})
        stage = await self.stage_repo.create(self._stage_data(flow, payload, position))
        return StageAPI.model_validate(stage)


async def get_flow_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> FlowService:
    return FlowService(db)
