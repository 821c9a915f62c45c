# sge/modules/goals/repository.py
from typing import Iterable, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from .models import GoalInDB, KeyResultInDB


class GoalRepository(BaseRepository[GoalInDB]):
    model = GoalInDB
    collection_name = "goals"

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("created_at", DESCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("period", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")


class KeyResultRepository(BaseRepository[KeyResultInDB]):
    model = KeyResultInDB
    collection_name = "key_results"

    async def create_indexes(self):
        try:
            await self.collection.create_index("goal_id")
            await self.collection.create_index([("company_id", ASCENDING), ("linked_indicator", ASCENDING)], sparse=True)
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def list_for_goal(self, goal_id: ObjectId) -> List[KeyResultInDB]:
        return await self.list_by({"goal_id": goal_id}, sort=[("created_at", ASCENDING)])

    async def list_for_goals(self, goal_ids: Iterable[ObjectId]) -> List[KeyResultInDB]:
        return await self.list_by({"goal_id": {"$in": list(goal_ids)}}, sort=[("created_at", ASCENDING)])

    async def list_linked(self, company_id: ObjectId, indicators: Optional[List[str]] = None) -> List[KeyResultInDB]:
        """KRs com indicador vinculado (opcionalmente só os indicadores informados)."""
        if indicators:
            linked_filter = {"$in": list(indicators)}
        else:
            linked_filter = {"$ne": None}
        return await self.list_for_company(company_id, {"linked_indicator": linked_filter})
