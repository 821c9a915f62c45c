# sge/modules/company/routers.py
from typing import List

from fastapi import APIRouter, Depends, status

from sge.core.security import CurrentUser, TokenUser, require_role
from sge.modules.users.models import UserAPI
from .models import CompanyAPI, CompanyUpdateAPI, UserInviteAPI
from .services import CompanyService, get_company_service

company_router = APIRouter()


@company_router.get("", response_model=CompanyAPI, summary="Get the current company", tags=["Company"])
async def get_company(
    current_user: CurrentUser,
    company_service: CompanyService = Depends(get_company_service),
):
    company = await company_service.get_company(current_user.company_id)
    return CompanyAPI.model_validate(company)


@company_router.put("", response_model=CompanyAPI, summary="Update company profile", tags=["Company"])
async def update_company(
    payload: CompanyUpdateAPI,
    current_user: TokenUser = Depends(require_role(["admin", "manager"])),
    company_service: CompanyService = Depends(get_company_service),
):
    company = await company_service.update_company(current_user, payload)
    return CompanyAPI.model_validate(company)


@company_router.get("/users", response_model=List[UserAPI], summary="List company users", tags=["Company"])
async def list_company_users(
    current_user: CurrentUser,
    company_service: CompanyService = Depends(get_company_service),
):
    users = await company_service.list_users(current_user.company_id)
    return [UserAPI.model_validate(u) for u in users]


@company_router.post(
    "/users",
    response_model=UserAPI,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a user to the company",
    tags=["Company"],
)
async def invite_user(
    payload: UserInviteAPI,
    current_user: TokenUser = Depends(require_role(["admin"])),
    company_service: CompanyService = Depends(get_company_service),
):
    """(Admin) Cria um usuário no tenant com perfil e senha inicial."""
    return await company_service.invite_user(current_user, payload)
