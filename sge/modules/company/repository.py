# sge/modules/company/repository.py

from sge.core.repository import BaseRepository
from .models import CompanyInDB

COLLECTION_NAME = "companies"


class CompanyRepository(BaseRepository[CompanyInDB]):
    model = CompanyInDB
    collection_name = COLLECTION_NAME

    async def create_indexes(self):
        # Empresa é o próprio tenant; nenhum índice além do _id
        return None
