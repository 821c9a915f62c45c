# sge/modules/clients/repository.py
import re
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from .models import ClientInDB

COLLECTION_NAME = "clients"


class ClientRepository(BaseRepository[ClientInDB]):
    model = ClientInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("updated_at", DESCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("status", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def search(self, company_id: ObjectId, search: Optional[str] = None, status: Optional[str] = None) -> List[ClientInDB]:
        query: Dict = {}
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"name": pattern}, {"email": pattern}]
        if status and status != "all":
            query["status"] = status
        return await self.list_for_company(company_id, query, sort=[("updated_at", DESCENDING)])

    async def map_by_ids(self, ids: Iterable[Optional[ObjectId]]) -> Dict[ObjectId, ClientInDB]:
        unique_ids = list({i for i in ids if i})
        if not unique_ids:
            return {}
        return {c.id: c for c in await self.list_by({"_id": {"$in": unique_ids}})}
