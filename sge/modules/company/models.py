# sge/modules/company/models.py
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import EmailStr, Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.users.models import USER_ROLES


# --- Internal/DB Models ---
class CompanyInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    cnpj: Optional[str] = None
    segment: Optional[str] = None
    size: Optional[str] = None
    revenue: Optional[float] = None
    headcount: Optional[int] = None
    financial_targets: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class CompanyAPI(APIModel):
    id: StrObjectId
    name: str
    cnpj: Optional[str] = None
    segment: Optional[str] = None
    size: Optional[str] = None
    revenue: Optional[float] = None
    headcount: Optional[int] = None
    financial_targets: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyUpdateAPI(APIModel):
    """Payload de PUT /company (campos ausentes permanecem inalterados)."""
    name: Optional[str] = Field(None, min_length=1)
    cnpj: Optional[str] = None
    segment: Optional[str] = None
    size: Optional[str] = None
    revenue: Optional[float] = None
    headcount: Optional[int] = None
    financial_targets: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None


class UserInviteAPI(APIModel):
    """Convite de um novo usuário para a empresa."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: USER_ROLES = "viewer"
