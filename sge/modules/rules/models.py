# sge/modules/rules/models.py
from datetime import datetime
from typing import Literal, Optional, Union

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

RULE_ENTITIES = Literal["financial", "process", "people", "operations"]
RULE_OPERATORS = Literal[">", "<", ">=", "<=", "==", "!="]

RuleValue = Union[float, str]


class BusinessRuleInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    entity: str
    metric: str
    operator: str
    value: RuleValue
    action_type: str = "alert"
    priority: str = "medium"
    is_active: bool = True
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BusinessRuleAPI(APIModel):
    id: StrObjectId
    name: str
    entity: str
    metric: str
    operator: str
    value: RuleValue
    action_type: str
    priority: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class BusinessRuleCreateAPI(APIModel):
    """Campos obrigatórios são checados no service (400 em vez de 422)."""
    name: Optional[str] = None
    entity: Optional[RULE_ENTITIES] = None
    metric: Optional[str] = None
    operator: Optional[RULE_OPERATORS] = None
    value: Optional[RuleValue] = None
    action_type: str = "alert"
    priority: str = "medium"
    is_active: bool = True


class BusinessRuleUpdateAPI(APIModel):
    name: Optional[str] = None
    entity: Optional[RULE_ENTITIES] = None
    metric: Optional[str] = None
    operator: Optional[RULE_OPERATORS] = None
    value: Optional[RuleValue] = None
    action_type: Optional[str] = None
    priority: Optional[str] = None
    is_active: Optional[bool] = None
