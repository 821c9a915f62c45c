# sge/modules/people/services.py
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import round_half_up, to_naive_utc, utcnow
from sge.modules.activity.services import ActivityService
from sge.modules.kpis.models import KpiInDB
from sge.modules.kpis.repository import KpiRepository
from sge.modules.rules.services import RulesService
from .models import PeopleSummaryAPI, PersonCreateAPI, PersonInDB, PersonUpdateAPI, TeamAPI
from .repository import PersonRepository

NOT_FOUND = "Colaborador não encontrado"
CLIMATE_KPI_KEYWORDS = ("Satisfação", "Clima", "eNPS")
DEFAULT_CLIMATE_SCORE = 4.2
TURNOVER_WINDOW = timedelta(days=90)
RECENT_HIRE_WINDOW = timedelta(days=30)


def climate_from_kpi(kpi: Optional[KpiInDB]) -> float:
    """KPIs em unidade `score` (0-100) viram escala 0-5; sem KPI ou zerado usa o padrão."""
    if kpi is None:
        return DEFAULT_CLIMATE_SCORE
    value = kpi.value / 20 if kpi.unit == "score" else kpi.value
    return value or DEFAULT_CLIMATE_SCORE


def build_people_summary(people: List[PersonInDB], climate_kpi: Optional[KpiInDB], now: datetime) -> PeopleSummaryAPI:
    active = [p for p in people if p.status == "active"]
    headcount = len(active)

    departments: Dict[str, List[PersonInDB]] = {}
    for person in active:
        departments.setdefault(person.department, []).append(person)
    teams = [
        TeamAPI(
            name=name,
            size=len(members),
            lead=members[0].name if members else "N/A",
            status="healthy" if len(members) > 3 else "attention",
        )
        for name, members in departments.items()
    ]

    recent_inactive = [p for p in people if p.status == "inactive" and p.updated_at >= now - TURNOVER_WINDOW]
    turnover = round_half_up(len(recent_inactive) / headcount * 100, 1) if headcount > 0 else 0
    recent_hires = sum(1 for p in active if p.hire_date >= now - RECENT_HIRE_WINDOW)

    return PeopleSummaryAPI(
        headcount=headcount,
        turnover=turnover,
        recent_hires=recent_hires,
        climate_score=climate_from_kpi(climate_kpi),
        teams=teams,
    )


class PeopleService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.person_repo = PersonRepository(db)
        self.kpi_repo = KpiRepository(db)
        self.rules = RulesService(db)
        self.activity = ActivityService(db)

    async def list_people(self, company_id: ObjectId, department: Optional[str] = None, status_filter: Optional[str] = None) -> List[PersonInDB]:
        query = {}
        if department and department != "all":
            query["department"] = department
        if status_filter and status_filter != "all":
            query["status"] = status_filter
        return await self.person_repo.list_for_company(company_id, query, sort=[("name", ASCENDING)])

    async def get_summary(self, company_id: ObjectId, now: Optional[datetime] = None) -> PeopleSummaryAPI:
        people = await self.person_repo.list_for_company(company_id)
        climate_kpi = await self.kpi_repo.find_by_name(company_id, CLIMATE_KPI_KEYWORDS)
        return build_people_summary(people, climate_kpi, now or utcnow())

    async def create_person(self, current_user: TokenUser, payload: PersonCreateAPI) -> PersonInDB:
        if not payload.name or not payload.role or not payload.department:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nome, cargo e departamento são obrigatórios")

        person = await self.person_repo.create({
            "name": payload.name,
            "role": payload.role,
            "department": payload.department,
            "hire_date": to_naive_utc(payload.hire_date) or utcnow(),
            "salary": payload.salary,
            "status": payload.status,
            "company_id": current_user.company_id,
        })
        logger.bind(service="PeopleService", company_id=str(current_user.company_id)).info(f"Colaborador criado: {person.name}")
        await self.rules.evaluate(current_user.company_id, "people", person.model_dump())
        await self.activity.log_activity(
            "created", "people", person.id, f"{person.name} - {person.role}", current_user.company_id, current_user.id,
            details={"department": person.department},
        )
        return person

    async def update_person(self, current_user: TokenUser, person_id: str, payload: PersonUpdateAPI) -> PersonInDB:
        before = await self.person_repo.get_for_company(person_id, current_user.company_id)
        if not before:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "hire_date" in changes:
            changes["hire_date"] = to_naive_utc(changes["hire_date"])
        updated = await self.person_repo.update_for_company(before.id, current_user.company_id, changes)

        await self.rules.evaluate(current_user.company_id, "people", updated.model_dump())
        await self.activity.log_activity(
            "updated", "people", updated.id, before.name, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True, mode="json")},
        )
        return updated

    async def delete_person(self, current_user: TokenUser, person_id: str) -> None:
        person = await self.person_repo.get_for_company(person_id, current_user.company_id)
        if not person:
            return
        await self.person_repo.delete_for_company(person.id, current_user.company_id)
        await self.activity.log_activity("deleted", "people", person.id, person.name, current_user.company_id, current_user.id)


async def get_people_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> PeopleService:
    return PeopleService(db)
