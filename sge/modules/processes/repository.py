# sge/modules/processes/repository.py
from collections import defaultdict
from typing import Dict, Iterable, List

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import ProcessBlockInDB, ProcessItemInDB


class ProcessBlockRepository(BaseRepository[ProcessBlockInDB]):
    model = ProcessBlockInDB
    collection_name = "process_blocks"

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("order", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def list_ordered(self, company_id: ObjectId) -> List[ProcessBlockInDB]:
        return await self.list_for_company(company_id, sort=[("order", ASCENDING)])


class ProcessItemRepository(BaseRepository[ProcessItemInDB]):
    model = ProcessItemInDB
    collection_name = "process_items"

    async def create_indexes(self):
        try:
            await self.collection.create_index([("block_id", ASCENDING), ("code", ASCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("status", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def group_by_block(self, block_ids: Iterable[ObjectId]) -> Dict[ObjectId, List[ProcessItemInDB]]:
        """Processos agrupados por bloco, ordenados por código."""
        ids = list(block_ids)
        grouped: Dict[ObjectId, List[ProcessItemInDB]] = defaultdict(list)
        if not ids:
            return grouped
        for item in await self.list_by({"block_id": {"$in": ids}}, sort=[("code", ASCENDING)]):
            grouped[item.block_id].append(item)
        return grouped
