# sge/api/endpoints/auth.py

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from sge.core.config import settings
from sge.core.logging_config import trace_id_var
from sge.core.rate_limit import limiter
from sge.core.security import CurrentUser
from sge.modules.users.services import (
    AuthResponse,
    AuthService,
    AuthUserAPI,
    LoginRequest,
    RegisterRequest,
    get_auth_service,
)

router = APIRouter()


@router.post("/login", response_model=AuthResponse, tags=["Authentication"])
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Autentica com email e senha e devolve o JWT junto com o usuário e a empresa."""
    log = logger.bind(trace_id=trace_id_var.get(), api_endpoint="/auth/login")
    log.info("Login attempt received.")
    return await auth_service.login(payload)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, tags=["Authentication"])
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Cria a empresa e o primeiro usuário (admin) e já devolve o token."""
    logger.bind(trace_id=trace_id_var.get(), api_endpoint="/auth/register").info("Registration received.")
    return await auth_service.register(payload)


@router.get("/me", response_model=AuthUserAPI, tags=["Authentication"])
async def read_me(
    current_user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.me(current_user.id)
