# sge/modules/processes/models.py
from datetime import datetime
from typing import List, Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

PROCESS_STATUSES = Literal["none", "informal", "formal"]
PROCESS_FREQUENCIES = Literal["never", "eventual", "periodic"]


# --- Internal/DB Models ---
class ProcessBlockInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    name: str
    type: str
    order: int = 0
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProcessItemInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    block_id: PyObjectId
    code: str
    name: str
    status: str = "none"
    responsible: bool = False
    frequency: str = "never"
    observation: Optional[str] = None
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class ProcessItemAPI(APIModel):
    id: StrObjectId
    block_id: StrObjectId
    code: str
    name: str
    status: str
    responsible: bool
    frequency: str
    observation: Optional[str] = None
    updated_at: datetime


class ProcessBlockAPI(APIModel):
    id: StrObjectId
    name: str
    type: str
    order: int
    processes: List[ProcessItemAPI] = Field(default_factory=list)
    created_at: datetime


class ProcessItemCreateAPI(APIModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    status: PROCESS_STATUSES = "none"
    responsible: bool = False
    frequency: PROCESS_FREQUENCIES = "never"
    observation: Optional[str] = None


class ProcessBlockCreateAPI(APIModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    order: int = 0
    processes: List[ProcessItemCreateAPI] = Field(default_factory=list)


class ProcessItemUpdateAPI(APIModel):
    status: Optional[PROCESS_STATUSES] = None
    responsible: Optional[bool] = None
    frequency: Optional[PROCESS_FREQUENCIES] = None
    observation: Optional[str] = None


class BlockScoreAPI(APIModel):
    id: StrObjectId
    name: str
    type: str
    score: int
    total_processes: int
    formal: int
    informal: int
    none: int


class DiagnosisAPI(APIModel):
    overall_score: int
    overall_status: str
    status_class: Literal["success", "warning", "danger"]
    block_scores: List[BlockScoreAPI] = Field(default_factory=list)
    critical_risks: List[ProcessItemAPI] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class ActionSuggestionAPI(APIModel):
    process_id: StrObjectId
    process_name: str
    code: str
    status: str
    action_title: str
    action_step: str
    suggested_tool: str
    priority: Literal["High", "Medium"]
