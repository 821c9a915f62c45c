# sge/modules/company/services.py
from typing import List

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import get_database
from sge.core.security import TokenUser, get_password_hash
from sge.modules.activity.services import ActivityService
from sge.modules.users.models import UserAPI, UserInDB
from sge.modules.users.repository import UserRepository
from .models import CompanyInDB, CompanyUpdateAPI, UserInviteAPI
from .repository import CompanyRepository


class CompanyService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.company_repo = CompanyRepository(db)
        self.user_repo = UserRepository(db)
        self.activity = ActivityService(db)

    async def get_company(self, company_id: ObjectId) -> CompanyInDB:
        company = await self.company_repo.get_by_id(company_id)
        if not company:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa não encontrada")
        return company

    async def update_company(self, current_user: TokenUser, payload: CompanyUpdateAPI) -> CompanyInDB:
        log = logger.bind(service="CompanyService", company_id=str(current_user.company_id))
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        updated = await self.company_repo.update(current_user.company_id, changes)
        if not updated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Empresa não encontrada")
        log.info("Dados da empresa atualizados.")
        await self.activity.log_activity(
            "updated", "company", updated.id, updated.name, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        return updated

    async def list_users(self, company_id: ObjectId) -> List[UserInDB]:
        return await self.user_repo.list_company_users(company_id)

    async def invite_user(self, current_user: TokenUser, payload: UserInviteAPI) -> UserAPI:
        log = logger.bind(service="CompanyService", company_id=str(current_user.company_id))
        email = payload.email.lower()
        if await self.user_repo.get_by_email(email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

        try:
            user = await self.user_repo.create({
                "email": email,
                "hashed_password": get_password_hash(payload.password),
                "name": payload.name,
                "role": payload.role,
                "company_id": current_user.company_id,
            })
        except ValueError:
            # índice único de email (corrida entre convites)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

        log.info(f"Usuário convidado: {email} ({payload.role})")
        await self.activity.log_activity(
            "invited", "company", user.id, user.name, current_user.company_id, current_user.id,
            details={"email": email, "role": payload.role},
        )
        return UserAPI.model_validate(user)


async def get_company_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> CompanyService:
    return CompanyService(db)
