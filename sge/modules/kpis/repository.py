# sge/modules/kpis/repository.py
import re
from typing import Iterable, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import KpiInDB

COLLECTION_NAME = "kpis"


class KpiRepository(BaseRepository[KpiInDB]):
    model = KpiInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("category", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def find_by_name(self, company_id: ObjectId, keywords: Iterable[str], category: Optional[str] = None) -> Optional[KpiInDB]:
        """Primeiro KPI cujo nome contém alguma das palavras (sem diferenciar maiúsculas)."""
        pattern = "|".join(re.escape(k) for k in keywords)
        query = {"name": {"$regex": pattern, "$options": "i"}}
        if category:
            query["category"] = category
        return await self.get_by(self._company_query(company_id, query))
