# sge/modules/people/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import PeopleSummaryAPI, PersonAPI, PersonCreateAPI, PersonUpdateAPI
from .services import PeopleService, get_people_service

people_router = APIRouter()


@people_router.get("", response_model=List[PersonAPI], summary="List people", tags=["People"])
async def list_people(
    current_user: CurrentUser,
    department: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    people_service: PeopleService = Depends(get_people_service),
):
    people = await people_service.list_people(current_user.company_id, department, status_filter)
    return [PersonAPI.model_validate(p) for p in people]


@people_router.get("/summary", response_model=PeopleSummaryAPI, summary="Headcount, turnover and teams", tags=["People"])
async def people_summary(
    current_user: CurrentUser,
    people_service: PeopleService = Depends(get_people_service),
):
    return await people_service.get_summary(current_user.company_id)


@people_router.post("", response_model=PersonAPI, status_code=status.HTTP_201_CREATED, summary="Add a person", tags=["People"])
async def create_person(
    payload: PersonCreateAPI,
    current_user: CurrentUser,
    people_service: PeopleService = Depends(get_people_service),
):
    return PersonAPI.model_validate(await people_service.create_person(current_user, payload))


@people_router.put("/{person_id}", response_model=PersonAPI, summary="Update a person", tags=["People"])
async def update_person(
    payload: PersonUpdateAPI,
    current_user: CurrentUser,
    person_id: str = Path(..., description="ID do colaborador"),
    people_service: PeopleService = Depends(get_people_service),
):
    return PersonAPI.model_validate(await people_service.update_person(current_user, person_id, payload))


@people_router.delete("/{person_id}", response_model=MessageResponse, summary="Remove a person", tags=["People"])
async def delete_person(
    current_user: CurrentUser,
    person_id: str = Path(..., description="ID do colaborador"),
    people_service: PeopleService = Depends(get_people_service),
):
    await people_service.delete_person(current_user, person_id)
    return MessageResponse(message="Colaborador removido")
