# sge/modules/alerts/models.py
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

ALERT_STATUSES = Literal["active", "resolved", "dismissed"]
ALERT_PRIORITIES = Literal["low", "medium", "high", "critical"]

# Ordenação por prioridade (maior primeiro)
PRIORITY_RANK = {"critical": 4, "high": 3, "medium": 2, "low": 1}


class AlertInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    title: str
    description: str
    type: str = "operational"
    priority: str = "medium"
    status: ALERT_STATUSES = "active"
    company_id: PyObjectId
    user_id: Optional[PyObjectId] = None
    rule_id: Optional[PyObjectId] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AlertAPI(APIModel):
    id: StrObjectId
    title: str
    description: str
    type: str
    priority: str
    status: str
    user_id: Optional[StrObjectId] = None
    rule_id: Optional[StrObjectId] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AlertCreateAPI(APIModel):
    """title e description são checados no service (400)."""
    title: Optional[str] = None
    description: Optional[str] = None
    type: str = "operational"
    priority: ALERT_PRIORITIES = "medium"
