# sge/modules/users/repository.py
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import UserInDB

COLLECTION_NAME = "users"


class UserRepository(BaseRepository[UserInDB]):
    model = UserInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index("email", unique=True)
            await self.collection.create_index([("company_id", ASCENDING), ("name", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        return await self.get_by({"email": email.lower()})

    async def list_company_users(self, company_id: ObjectId) -> List[UserInDB]:
        return await self.list_for_company(company_id, sort=[("name", ASCENDING)])

    async def map_by_ids(self, ids: Iterable[Optional[ObjectId]]) -> Dict[ObjectId, UserInDB]:
        """Busca vários usuários de uma vez (para embutir responsável/dono)."""
        unique_ids = list({i for i in ids if i})
        if not unique_ids:
            return {}
        users = await self.list_by({"_id": {"$in": unique_ids}})
        return {u.id: u for u in users}
