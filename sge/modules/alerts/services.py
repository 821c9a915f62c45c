# sge/modules/alerts/services.py
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import utcnow
from sge.modules.activity.services import ActivityService
from .models import AlertCreateAPI, AlertInDB
from .repository import AlertRepository

NOT_FOUND = "Alerta não encontrado"


class AlertService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.alert_repo = AlertRepository(db)
        self.activity = ActivityService(db)

    async def list_alerts(self, company_id: ObjectId, status_filter: Optional[str] = None, type_filter: Optional[str] = None) -> List[AlertInDB]:
        query: Dict[str, Any] = {}
        if not status_filter:
            query["status"] = "active"
        elif status_filter == "history":
            query["status"] = {"$in": ["resolved", "dismissed"]}
        elif status_filter != "all":
            query["status"] = status_filter
        if type_filter and type_filter != "all":
            query["type"] = type_filter
        return await self.alert_repo.list_for_company(company_id, query, sort=[("created_at", DESCENDING)])

    async def create_alert(self, current_user: TokenUser, payload: AlertCreateAPI) -> AlertInDB:
        if not payload.title or not payload.description:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Título e descrição são obrigatórios")
        alert = await self.alert_repo.create({
            **payload.model_dump(),
            "status": "active",
            "company_id": current_user.company_id,
            "user_id": current_user.id,
        })
        logger.bind(service="AlertService", company_id=str(current_user.company_id)).info(f"Alerta manual criado: {alert.title}")
        await self.activity.log_activity(
            "created", "alerts", alert.id, alert.title, current_user.company_id, current_user.id,
            details={"priority": alert.priority, "type": alert.type},
        )
        return alert

    async def _set_status(self, current_user: TokenUser, alert_id: str, new_status: str) -> AlertInDB:
        changes: Dict[str, Any] = {"status": new_status}
        if new_status == "resolved":
            changes["resolved_at"] = utcnow()
        alert = await self.alert_repo.update_for_company(alert_id, current_user.company_id, changes)
        if not alert:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        await self.activity.log_activity(new_status, "alerts", alert.id, alert.title, current_user.company_id, current_user.id)
        return alert

    async def resolve_alert(self, current_user: TokenUser, alert_id: str) -> AlertInDB:
        return await self._set_status(current_user, alert_id, "resolved")

    async def dismiss_alert(self, current_user: TokenUser, alert_id: str) -> AlertInDB:
        return await self._set_status(current_user, alert_id, "dismissed")

    async def delete_alert(self, current_user: TokenUser, alert_id: str) -> None:
        alert = await self.alert_repo.get_for_company(alert_id, current_user.company_id)
        if not alert:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        await self.alert_repo.delete_for_company(alert.id, current_user.company_id)
        await self.activity.log_activity("deleted", "alerts", alert.id, alert.title, current_user.company_id, current_user.id)


async def get_alert_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> AlertService:
    return AlertService(db)
