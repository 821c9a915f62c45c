# sge/core/security.py

from datetime import datetime, timedelta, timezone
from typing import Annotated, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict

from sge.core.config import settings

USER_ROLES = ("admin", "manager", "viewer")

# Contexto para Hashing de Senhas (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenUser(BaseModel):
    """Identidade extraída do JWT: usuário, tenant e perfil."""
    id: ObjectId
    company_id: ObjectId
    role: str = "viewer"

    model_config = ConfigDict(arbitrary_types_allowed=True)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# --- Funções de Utilidade de Senha ---

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verifica se a senha plana corresponde ao hash armazenado."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        # Hashes inválidos ou antigos
        logger.error(f"Error verifying password (hash might be invalid): {e}")
        return False


def get_password_hash(password: str) -> str:
    """Gera um hash seguro para a senha fornecida."""
    return pwd_context.hash(password)


# --- Funções de Utilidade JWT ---

def create_access_token(
    subject: str | ObjectId,
    company_id: str | ObjectId,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Cria um token JWT com `sub` (usuário), `company_id` e `role`."""
    if not subject:
        logger.critical("FATAL: Attempted to create JWT token without 'sub' (subject) claim.")
        raise ValueError("Missing 'sub' claim in token data for JWT creation")

    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(subject),
        "company_id": str(company_id),
        "role": role,
        "exp": expire,
        "iat": now,
    }
    try:
        encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    except Exception as e:
        logger.exception(f"Critical error encoding JWT token for subject '{subject}': {e}")
        raise RuntimeError(f"Could not create access token: {e}") from e
    logger.debug(f"Access token created for subject {subject}, expires at {expire.isoformat()}")
    return encoded_jwt


def decode_access_token(token: str) -> TokenUser:
    log = logger.bind(service="AuthTokenValidation")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        log.warning(f"Invalid JWT token: {e}")
        raise _unauthorized("Token inválido ou expirado") from e

    user_id = payload.get("sub")
    company_id = payload.get("company_id")
    if not user_id or not company_id or not ObjectId.is_valid(user_id) or not ObjectId.is_valid(company_id):
        log.warning("Token validation failed: 'sub' or 'company_id' claim missing/invalid.")
        raise _unauthorized("Token inválido ou expirado")

    return TokenUser(id=ObjectId(user_id), company_id=ObjectId(company_id), role=payload.get("role") or "viewer")


async def get_current_user(request: Request) -> TokenUser:
    """
    Dependência FastAPI: lê o header Authorization ("Bearer <token>"),
    valida o JWT e devolve o TokenUser. Levanta 401 com mensagem em português.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise _unauthorized("Token não fornecido")

    parts = auth_header.split(" ")
    if len(parts) != 2:
        raise _unauthorized("Token inválido")

    scheme, token = parts
    if scheme.lower() != "bearer":
        raise _unauthorized("Token mal formatado")

    return decode_access_token(token)


# Qualquer endpoint que use 'CurrentUser' recebe a identidade validada do token
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]


def require_role(allowed_roles: List[str]):
    """Dependência que restringe o endpoint aos perfis informados (403 caso contrário)."""

    async def role_checker(current_user: CurrentUser) -> TokenUser:
        if not current_user.role:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado: Perfil não identificado")
        if current_user.role not in allowed_roles:
            logger.bind(user_id=str(current_user.id)).warning(
                f"Role '{current_user.role}' not in {allowed_roles}"
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado: Sem permissão suficiente")
        return current_user

    return role_checker
