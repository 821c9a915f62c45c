# sge/modules/activity/models.py
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId
from sge.modules.users.models import UserSummaryAPI

ACTIVITY_ACTIONS = Literal["created", "updated", "deleted", "resolved", "dismissed", "moved", "invited"]


class ActivityLogInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    action: ACTIVITY_ACTIONS
    module: str
    entity_id: str
    entity_name: str
    details: Optional[Dict[str, Any]] = None
    company_id: PyObjectId
    user_id: Optional[PyObjectId] = None
    created_at: datetime = Field(default_factory=utcnow)


class ActivityLogAPI(APIModel):
    id: StrObjectId
    action: str
    module: str
    entity_id: str
    entity_name: str
    details: Optional[Dict[str, Any]] = None
    user_id: Optional[StrObjectId] = None
    user: Optional[UserSummaryAPI] = None
    created_at: datetime
