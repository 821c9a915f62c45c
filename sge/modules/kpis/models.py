# sge/modules/kpis/models.py
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

KPI_TRENDS = Literal["up", "down", "stable"]
KPI_STATUSES = Literal["success", "warning", "danger"]


# --- Internal/DB Models ---
class KpiInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    category: str
    value: float = 0.0
    target: float = 0.0
    unit: str = "%"
    trend: str = "stable"
    status: str = "success"
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class KpiAPI(APIModel):
    id: StrObjectId
    name: str
    category: str
    value: float
    target: float
    unit: str
    trend: str
    status: str
    created_at: datetime
    updated_at: datetime


class KpiCreateAPI(APIModel):
    name: Optional[str] = None
    category: Optional[str] = None
    value: float = 0.0
    target: float = 0.0
    unit: str = "%"
    trend: KPI_TRENDS = "stable"
    status: KPI_STATUSES = "success"


class KpiUpdateAPI(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    value: Optional[float] = None
    target: Optional[float] = None
    unit: Optional[str] = None
    trend: Optional[KPI_TRENDS] = None
    status: Optional[KPI_STATUSES] = None
