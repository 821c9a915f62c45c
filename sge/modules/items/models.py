# sge/modules/items/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.users.models import UserSummaryAPI

ITEM_STATUSES = Literal["active", "completed", "lost"]
ITEM_PRIORITIES = Literal["low", "medium", "high", "critical"]
HISTORY_ACTIONS = Literal["created", "moved", "updated"]


# --- Internal/DB Models ---
class ItemHistoryEntry(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId)
    action: HISTORY_ACTIONS
    from_stage: Optional[PyObjectId] = None
    to_stage: Optional[PyObjectId] = None
    note: Optional[str] = None
    user_id: Optional[PyObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)


class ItemInDB(MongoModel):
    """Card do Kanban: um item que percorre as etapas de um fluxo."""
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    title: str
    type: str = "task"
    flow_id: PyObjectId
    stage_id: PyObjectId
    client_id: Optional[PyObjectId] = None
    value: Optional[float] = None
    priority: str = "medium"
    responsible_id: Optional[PyObjectId] = None
    sla_due_at: Optional[datetime] = None
    status: ITEM_STATUSES = "active"
    history: List[ItemHistoryEntry] = Field(default_factory=list)
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class ClientRefAPI(APIModel):
    id: StrObjectId
    name: str
    status: Optional[str] = None


class StageRefAPI(APIModel):
    id: StrObjectId
    name: str
    type: str
    order: int = 0


class FlowRefAPI(APIModel):
    id: StrObjectId
    name: str
    type: str


class ItemHistoryAPI(APIModel):
    id: StrObjectId
    action: str
    from_stage: Optional[StrObjectId] = None
    to_stage: Optional[StrObjectId] = None
    note: Optional[str] = None
    user_id: Optional[StrObjectId] = None
    created_at: datetime


class ItemAPI(APIModel):
    id: StrObjectId
    title: str
    type: str
    flow_id: StrObjectId
    stage_id: StrObjectId
    client_id: Optional[StrObjectId] = None
    value: Optional[float] = None
    priority: str
    responsible_id: Optional[StrObjectId] = None
    sla_due_at: Optional[datetime] = None
    status: str
    history: List[ItemHistoryAPI] = Field(default_factory=list)
    client: Optional[ClientRefAPI] = None
    responsible: Optional[UserSummaryAPI] = None
    stage: Optional[StageRefAPI] = None
    flow: Optional[FlowRefAPI] = None
    created_at: datetime
    updated_at: datetime


class ItemCreateAPI(APIModel):
    """title, flowId e stageId são checados no service (400)."""
    title: Optional[str] = None
    type: str = "task"
    flow_id: Optional[str] = None
    stage_id: Optional[str] = None
    client_id: Optional[str] = None
    value: Optional[float] = None
    priority: ITEM_PRIORITIES = "medium"
    responsible_id: Optional[str] = None
    sla_due_at: Optional[datetime] = None


class ItemUpdateAPI(APIModel):
    title: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
    value: Optional[float] = None
    priority: Optional[ITEM_PRIORITIES] = None
    status: Optional[ITEM_STATUSES] = None
    client_id: Optional[str] = None
    responsible_id: Optional[str] = None
    sla_due_at: Optional[datetime] = None


class ItemMoveAPI(APIModel):
    stage_id: Optional[str] = None
    note: Optional[str] = None
