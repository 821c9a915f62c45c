# sge/modules/financial/models.py
from datetime import datetime
from typing import Literal, Optional

from bson import ObjectId
from pydantic import Field

from sge.core.utils import utcnow
from sge.models.api_common import APIModel, MongoModel, PyObjectId, StrObjectId

ENTRY_TYPES = Literal["revenue", "cost", "investment"]

# Tipos legados aceitos na agregação do dashboard
REVENUE_TYPES = ("revenue", "INCOME")
COST_TYPES = ("cost", "EXPENSE")


# --- Internal/DB Models ---
class FinancialEntryInDB(MongoModel):
    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    type: str
    category: str
    description: str
    value: float = 0.0
    date: datetime = Field(default_factory=utcnow)
    recurring: bool = False
    company_id: PyObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# --- API Models ---
class FinancialEntryAPI(APIModel):
    id: StrObjectId
    type: str
    category: str
    description: str
    value: float
    date: datetime
    recurring: bool
    created_at: datetime
    updated_at: datetime


class FinancialEntryCreateAPI(APIModel):
    """Todos os campos (exceto date/recurring) são obrigatórios; checados no service (400)."""
    type: Optional[ENTRY_TYPES] = None
    category: Optional[str] = None
    description: Optional[str] = None
    value: Optional[float] = None
    date: Optional[datetime] = None
    recurring: bool = False


class FinancialEntryUpdateAPI(APIModel):
    type: Optional[ENTRY_TYPES] = None
    category: Optional[str] = None
    description: Optional[str] = None
    value: Optional[float] = None
    date: Optional[datetime] = None
    recurring: Optional[bool] = None


class FinancialSummaryAPI(APIModel):
    revenue: float
    costs: float
    investments: float
    margin: int
    cash_available: float
    revenue_trend: int
    cost_trend: int
    operating_months: int
