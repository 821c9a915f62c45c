# sge/modules/alerts/repository.py
from typing import List

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from .models import PRIORITY_RANK, AlertInDB

COLLECTION_NAME = "alerts"


class AlertRepository(BaseRepository[AlertInDB]):
    model = AlertInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("status", ASCENDING), ("created_at", DESCENDING)])
            await self.collection.create_index("rule_id", sparse=True)
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def top_active(self, company_id: ObjectId, limit: int = 3) -> List[AlertInDB]:
        """Alertas ativos mais prioritários (critical > high > medium > low), depois os mais recentes."""
        alerts = await self.list_for_company(company_id, {"status": "active"}, sort=[("created_at", DESCENDING)])
        alerts.sort(key=lambda a: PRIORITY_RANK.get(a.priority, 0), reverse=True)
        return alerts[:limit]
