# sge/modules/clients/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.items.models import ItemAPI

CLIENT_TYPES = Literal["PJ", "PF"]
CLIENT_STATUSES = Literal["prospect", "active", "inactive"]


# --- Internal/DB Models ---
class ClientInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    type: str = "PJ"
    email: Optional[str] = None
    phone: Optional[str] = None
    segment: Optional[str] = None
    status: str = "prospect"
    total_value: float = 0.0
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class ClientAPI(APIModel):
    id: StrObjectId
    name: str
    type: str
    email: Optional[str] = None
    phone: Optional[str] = None
    segment: Optional[str] = None
    status: str
    total_value: float = 0.0
    items_count: int = 0
    created_at: datetime
    updated_at: datetime


class ClientDetailAPI(ClientAPI):
    items: List[ItemAPI] = Field(default_factory=list)


class ClientCreateAPI(APIModel):
    name: Optional[str] = None
    type: CLIENT_TYPES = "PJ"
    email: Optional[str] = None
    phone: Optional[str] = None
    segment: Optional[str] = None
    status: CLIENT_STATUSES = "prospect"
    total_value: float = 0.0


class ClientUpdateAPI(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[CLIENT_TYPES] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    segment: Optional[str] = None
    status: Optional[CLIENT_STATUSES] = None
    total_value: Optional[float] = None
