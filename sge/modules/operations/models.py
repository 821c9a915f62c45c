# sge/modules/operations/models.py
from typing import List, Literal

from pydantic import Field

from sge.models.api_common import APIModel, StrObjectId


class StageMetricsAPI(APIModel):
    id: StrObjectId
    name: str
    volume: int
    capacity: float
    sla: int
    avg_time: float
    value: float
    is_bottleneck: bool


class FlowMetricsAPI(APIModel):
    flow_id: StrObjectId
    flow_name: str
    flow_type: str
    total_active: int
    completed_period: int
    avg_cycle_time: float
    sla_compliance: int
    stages: List[StageMetricsAPI] = Field(default_factory=list)
    bottlenecks: List[StrObjectId] = Field(default_factory=list)
    delayed_items: int
    rework_rate: float = 0
    value_processing: float


class OperationsOverallAPI(APIModel):
    total_active: int
    avg_sla_compliance: int
    total_bottlenecks: int
    status: str
    status_class: Literal["success", "warning", "danger"]


class OperationsMetricsAPI(APIModel):
    flows: List[FlowMetricsAPI] = Field(default_factory=list)
    overall: OperationsOverallAPI
