# sge/modules/users/services.py
from typing import Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, EmailStr, Field

from sge.core.database import get_database
from sge.core.security import create_access_token, get_password_hash, verify_password
from sge.models.api_common import APIModel, StrObjectId
from sge.modules.company.models import CompanyAPI
from sge.modules.company.repository import CompanyRepository
from .models import UserInDB
from .repository import UserRepository


# --- Auth payloads ---
class LoginRequest(APIModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    industry: Optional[str] = None
    revenue: Optional[float] = None
    headcount: Optional[int] = None


class AuthUserAPI(APIModel):
    id: StrObjectId
    name: str
    email: str
    role: str
    company: Optional[CompanyAPI] = None


class AuthResponse(BaseModel):
    token: str
    user: AuthUserAPI


class AuthService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.user_repo = UserRepository(db)
        self.company_repo = CompanyRepository(db)

    async def _auth_user(self, user: UserInDB) -> AuthUserAPI:
        company = await self.company_repo.get_by_id(user.company_id)
        return AuthUserAPI(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            company=CompanyAPI.model_validate(company) if company else None,
        )

    async def _auth_response(self, user: UserInDB) -> AuthResponse:
        token = create_access_token(user.id, user.company_id, user.role)
        return AuthResponse(token=token, user=await self._auth_user(user))

    async def login(self, payload: LoginRequest) -> AuthResponse:
        log = logger.bind(service="AuthService")
        if not payload.email or not payload.password:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email e senha são obrigatórios")

        user = await self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.hashed_password):
            log.warning(f"Login falhou para {payload.email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais inválidas")

        log.info(f"Login bem-sucedido: {user.email} (company={user.company_id})")
        return await self._auth_response(user)

    async def register(self, payload: RegisterRequest) -> AuthResponse:
        log = logger.bind(service="AuthService")
        email = payload.email.lower()
        if await self.user_repo.get_by_email(email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

        company = await self.company_repo.create({
            "name": payload.company_name,
            "segment": payload.industry,
            "revenue": payload.revenue,
            "headcount": payload.headcount,
        })
        try:
            user = await self.user_repo.create({
                "email": email,
                "hashed_password": get_password_hash(payload.password),
                "name": payload.name,
                "role": "admin",
                "company_id": company.id,
            })
        except ValueError:
            await self.company_repo.delete(company.id)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email já cadastrado")

        log.success(f"Nova empresa registrada: '{company.name}' por {email}")
        return await self._auth_response(user)

    async def me(self, user_id: ObjectId) -> AuthUserAPI:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
        return await self._auth_user(user)


async def get_auth_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> AuthService:
    return AuthService(db)
