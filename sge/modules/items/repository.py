# sge/modules/items/repository.py
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING, DESCENDING

from sge.core.repository import BaseRepository
from sge.core.utils import utcnow
from .models import ItemHistoryEntry, ItemInDB

COLLECTION_NAME = "operating_items"


class ItemRepository(BaseRepository[ItemInDB]):
    model = ItemInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("updated_at", DESCENDING)])
            await self.collection.create_index([("flow_id", ASCENDING), ("stage_id", ASCENDING)])
            await self.collection.create_index("client_id", sparse=True)
            await self.collection.create_index("status")
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def push_history(self, item_id: ObjectId, entry: ItemHistoryEntry, changes: Optional[Dict[str, Any]] = None) -> None:
        """Acrescenta uma entrada ao histórico (e aplica `changes` na mesma escrita)."""
        update: Dict[str, Any] = {
            "$push": {"history": entry.model_dump()},
            "$set": {**(changes or {}), "updated_at": utcnow()},
        }
        try:
            await self.collection.update_one({"_id": item_id}, update)
        except Exception as e:
            self._handle_db_exception(e, "push_history", doc_id=item_id)

    async def count_by(self, company_id: ObjectId, field: str, query: Optional[Dict[str, Any]] = None) -> Dict[ObjectId, int]:
        """Contagem de itens agrupada por `field` (ex: flow_id, client_id)."""
        items = await self.list_for_company(company_id, query)
        counts: Dict[ObjectId, int] = {}
        for item in items:
            key = getattr(item, field)
            if key is not None:
                counts[key] = counts.get(key, 0) + 1
        return counts

    async def list_won_in_window(self, company_id: ObjectId, stage_ids: Iterable[ObjectId], start: datetime, end: datetime) -> List[ItemInDB]:
        """Itens em etapas de sucesso cuja última alteração caiu na janela [start, end)."""
        return await self.list_for_company(company_id, {
            "stage_id": {"$in": list(stage_ids)},
            "updated_at": {"$gte": start, "$lt": end},
        })

    async def detach_client(self, company_id: ObjectId, client_id: ObjectId) -> None:
        try:
            await self.collection.update_many(
                {"company_id": company_id, "client_id": client_id},
                {"$set": {"client_id": None, "updated_at": utcnow()}},
            )
        except Exception as e:
            self._handle_db_exception(e, "detach_client", doc_id=client_id)
