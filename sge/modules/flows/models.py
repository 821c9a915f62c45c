# sge/modules/flows/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.items.models import ItemAPI

STAGE_TYPES = Literal["start", "process", "end_success", "end_fail"]
DEFAULT_STAGE_SLA = 24  # horas


# --- Internal/DB Models ---
class FlowInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    type: str
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class FlowStageInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    flow_id: PyObjectId
    company_id: PyObjectId
    name: str
    order: int = 0
    sla: int = DEFAULT_STAGE_SLA
    type: STAGE_TYPES = "process"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class StageAPI(APIModel):
    id: StrObjectId
    flow_id: StrObjectId
    name: str
    order: int
    sla: int
    type: str


class FlowAPI(APIModel):
    id: StrObjectId
    name: str
    type: str
    stages: List[StageAPI] = Field(default_factory=list)
    items_count: int = 0
    created_at: datetime
    updated_at: datetime


class FlowDetailAPI(FlowAPI):
    items: List[ItemAPI] = Field(default_factory=list)


class StageCreateAPI(APIModel):
    name: str = Field(..., min_length=1)
    sla: Optional[int] = None
    type: Optional[STAGE_TYPES] = None


class FlowCreateAPI(APIModel):
    name: Optional[str] = None
    type: Optional[str] = None
    stages: Optional[List[StageCreateAPI]] = None


class FlowUpdateAPI(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
