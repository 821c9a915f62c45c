# sge/modules/activity/services.py
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Depends
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.modules.users.models import UserSummaryAPI
from sge.modules.users.repository import UserRepository
from .models import ActivityLogAPI
from .repository import ActivityLogRepository


class ActivityService:
    """Trilha de auditoria por empresa. Falhas de escrita nunca quebram a requisição."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.log_repo = ActivityLogRepository(db)
        self.user_repo = UserRepository(db)

    async def log_activity(
        self,
        action: str,
        module: str,
        entity_id: Any,
        entity_name: str,
        company_id: ObjectId,
        user_id: Optional[ObjectId] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        log = logger.bind(service="ActivityService", company_id=str(company_id), module=module)
        try:
            await self.log_repo.create({
                "action": action,
                "module": module,
                "entity_id": str(entity_id),
                "entity_name": entity_name,
                "details": details,
                "company_id": company_id,
                "user_id": user_id,
            })
            log.debug(f"Activity logged: {action} {entity_name}")
        except Exception as e:
            log.error(f"[ActivityLog] Failed to write log: {e}")

    async def list_logs(
        self,
        company_id: ObjectId,
        module: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 100,
    ) -> List[ActivityLogAPI]:
        query: Dict[str, Any] = {}
        if module and module != "all":
            query["module"] = module
        if action and action != "all":
            query["action"] = action

        logs = await self.log_repo.list_for_company(
            company_id, query, sort=[("created_at", DESCENDING)], limit=limit or 100
        )
        users = await self.user_repo.map_by_ids(entry.user_id for entry in logs)

        result = []
        for entry in logs:
            api = ActivityLogAPI.model_validate(entry)
            user = users.get(entry.user_id)
            if user:
                api.user = UserSummaryAPI.model_validate(user)
            result.append(api)
        return result


async def get_activity_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> ActivityService:
    return ActivityService(db)
