# sge/modules/clients/services.py
from typing import List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.modules.activity.services import ActivityService
from sge.modules.goals.services import CLIENT_INDICATORS, GoalsService
from sge.modules.items.repository import ItemRepository
from sge.modules.items.services import ItemService
from .models import ClientAPI, ClientCreateAPI, ClientDetailAPI, ClientInDB, ClientUpdateAPI
from .repository import ClientRepository

NOT_FOUND = "Cliente não encontrado"


class ClientService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.client_repo = ClientRepository(db)
        self.item_repo = ItemRepository(db)
        self.item_service = ItemService(db)
        self.goals = GoalsService(db)
        self.activity = ActivityService(db)

    async def _get_client(self, company_id: ObjectId, client_id: str) -> ClientInDB:
        client = await self.client_repo.get_for_company(client_id, company_id)
        if not client:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        return client

    async def list_clients(self, company_id: ObjectId, search: Optional[str] = None, status_filter: Optional[str] = None) -> List[ClientAPI]:
        clients = await self.client_repo.search(company_id, search, status_filter)
        counts = await self.item_repo.count_by(company_id, "client_id")
        result = []
        for client in clients:
            api = ClientAPI.model_validate(client)
            api.items_count = counts.get(client.id, 0)
            result.append(api)
        return result

    async def get_client(self, company_id: ObjectId, client_id: str) -> ClientDetailAPI:
        client = await self._get_client(company_id, client_id)
        items = await self.item_repo.list_for_company(company_id, {"client_id": client.id}, sort=[("updated_at", DESCENDING)])
        detail = ClientDetailAPI.model_validate(client)
        detail.items = await self.item_service.enrich(items)
        detail.items_count = len(items)
        return detail

    async def create_client(self, current_user: TokenUser, payload: ClientCreateAPI) -> ClientAPI:
        if not payload.name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nome é obrigatório")
        client = await self.client_repo.create({**payload.model_dump(), "company_id": current_user.company_id})
        logger.bind(service="ClientService", company_id=str(current_user.company_id)).info(f"Cliente criado: {client.name}")

        await self.goals.sync_metrics_safely(current_user.company_id, CLIENT_INDICATORS)
        await self.activity.log_activity(
            "created", "clients", client.id, client.name, current_user.company_id, current_user.id,
            details={"status": client.status},
        )
        return ClientAPI.model_validate(client)

    async def update_client(self, current_user: TokenUser, client_id: str, payload: ClientUpdateAPI) -> ClientAPI:
        client = await self._get_client(current_user.company_id, client_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        updated = await self.client_repo.update_for_company(client.id, current_user.company_id, changes)

        await self.goals.sync_metrics_safely(current_user.company_id, CLIENT_INDICATORS)
        await self.activity.log_activity(
            "updated", "clients", updated.id, client.name, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        api = ClientAPI.model_validate(updated)
        api.items_count = await self.item_repo.count_for_company(current_user.company_id, {"client_id": updated.id})
        return api

    async def delete_client(self, current_user: TokenUser, client_id: str) -> None:
        client = await self.client_repo.get_for_company(client_id, current_user.company_id)
        if not client:
            return
        await self.item_repo.detach_client(current_user.company_id, client.id)
        await self.client_repo.delete_for_company(client.id, current_user.company_id)

        await self.goals.sync_metrics_safely(current_user.company_id, CLIENT_INDICATORS)
        await self.activity.log_activity("deleted", "clients", client.id, client.name, current_user.company_id, current_user.id)


async def get_client_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> ClientService:
    return ClientService(db)
