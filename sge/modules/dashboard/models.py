# sge/modules/dashboard/models.py
from typing import List, Literal

from pydantic import Field

from sge.models.api_common import APIModel, StrObjectId
from sge.modules.alerts.models import AlertAPI


class MonthFinancialsAPI(APIModel):
    month: str
    revenue: float
    costs: float
    profit: float


class DashboardFinancialAPI(APIModel):
    revenue: float
    costs: float
    margin: int
    cash_available: float
    operating_months: int
    history: List[MonthFinancialsAPI] = Field(default_factory=list)


class DashboardPeopleAPI(APIModel):
    headcount: int
    turnover: float
    climate_score: float


class DashboardPipelineAPI(APIModel):
    value: float
    active_items: int


class ProcessMaturityAPI(APIModel):
    score: int
    status: Literal["Saudável", "Transição", "Risco"]


class PriorityActionAPI(APIModel):
    type: str
    priority: str
    text: str
    meta: str
    link: str


class DashboardFlowAPI(APIModel):
    id: StrObjectId
    name: str
    active_items: int
    total_value: float


class DashboardAPI(APIModel):
    sge_score: int
    sge_status: str
    financial: DashboardFinancialAPI
    people: DashboardPeopleAPI
    pipeline: DashboardPipelineAPI
    process_maturity: ProcessMaturityAPI
    actions: List[PriorityActionAPI] = Field(default_factory=list)
    alerts: List[AlertAPI] = Field(default_factory=list)
    flows: List[DashboardFlowAPI] = Field(default_factory=list)
