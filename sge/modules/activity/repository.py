# sge/modules/activity/repository.py
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from .models import ActivityLogInDB

COLLECTION_NAME = "activity_logs"


class ActivityLogRepository(BaseRepository[ActivityLogInDB]):
    model = ActivityLogInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("created_at", DESCENDING)])
            await self.collection.create_index("module")
            await self.collection.create_index("action")
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")
