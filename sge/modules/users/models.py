# sge/modules/users/models.py
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import EmailStr, Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

# --- Constants ---
USER_ROLES = Literal["admin", "manager", "viewer"]


# --- Internal/DB Models ---
class UserInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    email: EmailStr
    hashed_password: str
    name: str
    role: USER_ROLES = "viewer"
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class UserAPI(APIModel):
    """Usuário como exposto ao dashboard (sem hash de senha)."""
    id: StrObjectId
    name: str
    email: EmailStr
    role: USER_ROLES
    created_at: Optional[datetime] = None


class UserSummaryAPI(APIModel):
    """Usuário embutido em outros recursos (responsável, dono, autor de log)."""
    id: StrObjectId
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
