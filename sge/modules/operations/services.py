# sge/modules/operations/services.py
import math
from datetime import datetime
from typing import Dict, List, Optional

from bson import ObjectId
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.core.database import get_database
from sge.core.utils import round_half_up, utcnow
from sge.modules.flows.models import FlowInDB, FlowStageInDB
from sge.modules.flows.repository import FlowRepository, FlowStageRepository
from sge.modules.items.models import ItemInDB
from sge.modules.items.repository import ItemRepository
from .models import FlowMetricsAPI, OperationsMetricsAPI, OperationsOverallAPI, StageMetricsAPI

SECONDS_PER_DAY = 60 * 60 * 24
MIN_STAGE_CAPACITY = 10
BOTTLENECK_RATIO = 0.8


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def stage_capacity(total_items: int, stage_count: int) -> float:
    return max(MIN_STAGE_CAPACITY, math.ceil(total_items / stage_count) * 1.5)


def build_flow_metrics(flow: FlowInDB, stages: List[FlowStageInDB], items: List[ItemInDB], now: datetime) -> FlowMetricsAPI:
    active = [i for i in items if i.status == "active"]
    completed = [i for i in items if i.status == "completed"]

    stage_metrics = []
    for stage in stages:
        stage_items = [i for i in active if i.stage_id == stage.id]
        capacity = stage_capacity(len(items), len(stages))
        volume = len(stage_items)
        avg_time = sum(_days_between(i.updated_at, now) for i in stage_items) / volume if volume else 0
        stage_metrics.append(StageMetricsAPI(
            id=stage.id,
            name=stage.name,
            volume=volume,
            capacity=capacity,
            sla=stage.sla,
            avg_time=round_half_up(avg_time, 1),
            value=sum(i.value or 0 for i in stage_items),
            is_bottleneck=volume > capacity * BOTTLENECK_RATIO,
        ))

    cycle_time = (
        sum(_days_between(i.created_at, i.updated_at) for i in completed) / len(completed) if completed else 0
    )

    with_sla = [i for i in active if i.sla_due_at]
    on_time = [i for i in with_sla if i.sla_due_at > now]
    sla_compliance = round_half_up(len(on_time) / len(with_sla) * 100) if with_sla else 100

    return FlowMetricsAPI(
        flow_id=flow.id,
        flow_name=flow.name,
        flow_type=flow.type,
        total_active=len(active),
        completed_period=len(completed),
        avg_cycle_time=round_half_up(cycle_time, 1),
        sla_compliance=sla_compliance,
        stages=stage_metrics,
        bottlenecks=[s.id for s in stage_metrics if s.is_bottleneck],
        delayed_items=sum(1 for i in with_sla if i.sla_due_at < now),
        rework_rate=0,
        value_processing=sum(i.value or 0 for i in active),
    )


def build_overall(flows: List[FlowMetricsAPI]) -> OperationsOverallAPI:
    total_active = sum(f.total_active for f in flows)
    avg_sla = round_half_up(sum(f.sla_compliance for f in flows) / len(flows)) if flows else 100
    total_bottlenecks = sum(len(f.bottlenecks) for f in flows)

    op_status, status_class = "Operação Equilibrada", "success"
    if avg_sla < 70 or total_bottlenecks > 1:
        op_status, status_class = "Operação sob Pressão", "warning"
    if avg_sla < 50 or total_bottlenecks > 2:
        op_status, status_class = "Operação em Risco", "danger"

    return OperationsOverallAPI(
        total_active=total_active,
        avg_sla_compliance=avg_sla,
        total_bottlenecks=total_bottlenecks,
        status=op_status,
        status_class=status_class,
    )


class OperationsService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.flow_repo = FlowRepository(db)
        self.stage_repo = FlowStageRepository(db)
        self.item_repo = ItemRepository(db)

    async def get_metrics(self, company_id: ObjectId, now: Optional[datetime] = None) -> OperationsMetricsAPI:
        now = now or utcnow()
        flows = await self.flow_repo.list_company_flows(company_id)
        stages_by_flow = await self.stage_repo.list_for_flows(f.id for f in flows)

        items_by_flow: Dict[ObjectId, List[ItemInDB]] = {}
        for item in await self.item_repo.list_for_company(company_id):
            items_by_flow.setdefault(item.flow_id, []).append(item)

        flow_metrics = [
            build_flow_metrics(flow, stages_by_flow.get(flow.id, []), items_by_flow.get(flow.id, []), now)
            for flow in flows
        ]
        return OperationsMetricsAPI(flows=flow_metrics, overall=build_overall(flow_metrics))


async def get_operations_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> OperationsService:
    return OperationsService(db)
