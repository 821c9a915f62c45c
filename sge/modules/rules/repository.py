# sge/modules/rules/repository.py
from typing import List

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import BusinessRuleInDB

COLLECTION_NAME = "business_rules"


class BusinessRuleRepository(BaseRepository[BusinessRuleInDB]):
    model = BusinessRuleInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("entity", ASCENDING), ("is_active", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def list_active(self, company_id: ObjectId, entity: str) -> List[BusinessRuleInDB]:
        return await self.list_for_company(company_id, {"entity": entity, "is_active": True})
