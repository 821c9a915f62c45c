# sge/modules/kpis/services.py
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.modules.activity.services import ActivityService
from .models import KpiCreateAPI, KpiInDB, KpiUpdateAPI
from .repository import KpiRepository

NOT_FOUND = "KPI não encontrado"


class KpiService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.kpi_repo = KpiRepository(db)
        self.activity = ActivityService(db)

    async def list_kpis(self, company_id: ObjectId, category: Optional[str] = None, status_filter: Optional[str] = None) -> List[KpiInDB]:
        query = {}
        if category and category != "all":
            query["category"] = category
        if status_filter and status_filter != "all":
            query["status"] = status_filter
        return await self.kpi_repo.list_for_company(company_id, query, sort=[("category", ASCENDING)])

    async def create_kpi(self, current_user: TokenUser, payload: KpiCreateAPI) -> KpiInDB:
        if not payload.name or not payload.category:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nome e categoria são obrigatórios")
        kpi = await self.kpi_repo.create({**payload.model_dump(), "company_id": current_user.company_id})
        logger.bind(service="KpiService", company_id=str(current_user.company_id)).info(f"KPI criado: {kpi.name}")
        await self.activity.log_activity(
            "created", "kpis", kpi.id, kpi.name, current_user.company_id, current_user.id,
            details={"category": kpi.category, "value": kpi.value, "target": kpi.target},
        )
        return kpi

    async def update_kpi(self, current_user: TokenUser, kpi_id: str, payload: KpiUpdateAPI) -> KpiInDB:
        kpi = await self.kpi_repo.update_for_company(kpi_id, current_user.company_id, payload.model_dump(exclude_unset=True, exclude_none=True))
        if not kpi:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        await self.activity.log_activity(
            "updated", "kpis", kpi.id, kpi.name, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        return kpi

    async def delete_kpi(self, current_user: TokenUser, kpi_id: str) -> None:
        kpi = await self.kpi_repo.get_for_company(kpi_id, current_user.company_id)
        if not kpi:
            return
        await self.kpi_repo.delete_for_company(kpi.id, current_user.company_id)
        await self.activity.log_activity("deleted", "kpis", kpi.id, kpi.name, current_user.company_id, current_user.id)


async def get_kpi_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> KpiService:
    return KpiService(db)
