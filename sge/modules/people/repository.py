# sge/modules/people/repository.py
from loguru import logger
from pymongo import ASCENDING

from sge.core.repository import BaseRepository
from .models import PersonInDB

COLLECTION_NAME = "people"


class PersonRepository(BaseRepository[PersonInDB]):
    model = PersonInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        try:
            await self.collection.create_index([("company_id", ASCENDING), ("name", ASCENDING)])
            await self.collection.create_index([("company_id", ASCENDING), ("status", ASCENDING)])
            logger.info(f"Índices criados/verificados para a coleção: {self.collection_name}")
        except Exception as e:
            logger.exception(f"Erro ao criar índices para {self.collection_name}: {e}")
