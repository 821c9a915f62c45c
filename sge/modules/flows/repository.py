# sge/modules/flows/repository.py
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import FlowInDB, FlowStageInDB


class FlowRepository(BaseRepository[FlowInDB]):
    model = FlowInDB
    collection_name = "operating_flows"

    async def list_company_flows(self, company_id: ObjectId) -> List[FlowInDB]:
        return await self.list_for_company(company_id, sort=[("created_at", ASCENDING)])

    async def map_by_ids(self, ids: Iterable[Optional[ObjectId]]) -> Dict[ObjectId, FlowInDB]:
        unique_ids = list({i for i in ids if i})
        if not unique_ids:
            return {}
        return {f.id: f for f in await self.list_by({"_id": {"$in": unique_ids}})}


class FlowStageRepository(BaseRepository[FlowStageInDB]):
    model = FlowStageInDB
    collection_name = "flow_stages"

    async def create_indexes(self):
        try:
            await self.collection.create_index([("flow_id", ASCENDING), ("order", ASCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("type", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def list_for_flow(self, flow_id: ObjectId) -> List[FlowStageInDB]:
        return await self.list_by({"flow_id": flow_id}, sort=[("order", ASCENDING)])

    async def list_for_flows(self, flow_ids: Iterable[ObjectId]) -> Dict[ObjectId, List[FlowStageInDB]]:
        """Etapas agrupadas por fluxo, já ordenadas."""
        grouped: Dict[ObjectId, List[FlowStageInDB]] = {}
        stages = await self.list_by({"flow_id": {"$in": list(flow_ids)}}, sort=[("order", ASCENDING)])
        for stage in stages:
            grouped.setdefault(stage.flow_id, []).append(stage)
        return grouped

    async def map_by_ids(self, ids: Iterable[Optional[ObjectId]]) -> Dict[ObjectId, FlowStageInDB]:
        unique_ids = list({i for i in ids if i})
        if not unique_ids:
            return {}
        return {s.id: s for s in await self.list_by({"_id": {"$in": unique_ids}})}

    async def ids_of_type(self, company_id: ObjectId, stage_type: str) -> List[ObjectId]:
        stages = await self.list_for_company(company_id, {"type": stage_type})
        return [s.id for s in stages]
