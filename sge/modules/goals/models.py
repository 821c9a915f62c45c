# sge/modules/goals/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.users.models import UserSummaryAPI

GOAL_TYPES = Literal["company", "department", "individual"]
GOAL_STATUSES = Literal["draft", "active", "archived"]


# --- Internal/DB Models ---
class GoalInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    title: str
    description: Optional[str] = None
    type: str
    period: str
    status: str = "active"
    owner_id: Optional[PyObjectId] = None
    progress: int = 0
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class KeyResultInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    goal_id: PyObjectId
    company_id: PyObjectId
    title: str
    target_value: float = 0.0
    initial_value: float = 0.0
    current_value: float = 0.0
    unit: Optional[str] = None
    linked_indicator: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class KeyResultAPI(APIModel):
    id: StrObjectId
    goal_id: StrObjectId
    title: str
    target_value: float
    initial_value: float
    current_value: float
    unit: Optional[str] = None
    linked_indicator: Optional[str] = None


class GoalAPI(APIModel):
    id: StrObjectId
    title: str
    description: Optional[str] = None
    type: str
    period: str
    status: str
    owner_id: Optional[StrObjectId] = None
    owner: Optional[UserSummaryAPI] = None
    progress: int
    key_results: List[KeyResultAPI] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class KeyResultCreateAPI(APIModel):
    title: str = Field(..., min_length=1)
    target_value: float
    initial_value: float = 0.0
    current_value: Optional[float] = None
    unit: Optional[str] = None
    linked_indicator: Optional[str] = None


class GoalCreateAPI(APIModel):
    """title, type e period são checados no service (400)."""
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[GOAL_TYPES] = None
    period: Optional[str] = None
    status: GOAL_STATUSES = "active"
    owner_id: Optional[str] = None
    key_results: List[KeyResultCreateAPI] = Field(default_factory=list)


class GoalUpdateAPI(APIModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[GOAL_STATUSES] = None
    owner_id: Optional[str] = None


class KeyResultUpdateAPI(APIModel):
    current_value: float


class GoalSyncRequest(APIModel):
    indicators: Optional[List[str]] = None


class GoalSyncResultAPI(APIModel):
    updated_key_results: int
    goals_recalculated: int


class IndicatorAPI(APIModel):
    id: str
    label: str
    unit: str
