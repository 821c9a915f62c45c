# sge/modules/people/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

PERSON_STATUSES = Literal["active", "inactive"]


# --- Internal/DB Models ---
class PersonInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    role: str
    department: str
    hire_date: datetime = Field(default_factory=utcnow)
    salary: Optional[float] = None
    status: str = "active"
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class PersonAPI(APIModel):
    id: StrObjectId
    name: str
    role: str
    department: str
    hire_date: datetime
    salary: Optional[float] = None
    status: str
    created_at: datetime
    updated_at: datetime


class PersonCreateAPI(APIModel):
    name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[datetime] = None
    salary: Optional[float] = None
    status: PERSON_STATUSES = "active"


class PersonUpdateAPI(APIModel):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, min_length=1)
    department: Optional[str] = Field(None, min_length=1)
    hire_date: Optional[datetime] = None
    salary: Optional[float] = None
    status: Optional[PERSON_STATUSES] = None


class TeamAPI(APIModel):
    name: str
    size: int
    lead: str
    status: Literal["healthy", "attention"]


class PeopleSummaryAPI(APIModel):
    headcount: int
    turnover: float
    recent_hires: int
    climate_score: float
    teams: List[TeamAPI] = Field(default_factory=list)
