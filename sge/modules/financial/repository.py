# sge/modules/financial/repository.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from .models import FinancialEntryInDB

COLLECTION_NAME = "financial_entries"


class FinancialEntryRepository(BaseRepository[FinancialEntryInDB]):
    model = FinancialEntryInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("date", DESCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("type", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def list_in_window(
        self,
        company_id: ObjectId,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> List[FinancialEntryInDB]:
        """Lançamentos com data em [start, end) (limites opcionais)."""
        scoped = dict(query or {})
        date_filter: Dict[str, datetime] = {}
        if start:
            date_filter["$gte"] = start
        if end:
            date_filter["$lt"] = end
        if date_filter:
            scoped["date"] = date_filter
        return await self.list_for_company(company_id, scoped, sort=[("date", DESCENDING)])


def sum_values(entries: List[FinancialEntryInDB], types) -> float:
    return sum(e.value or 0 for e in entries if e.type in types)
