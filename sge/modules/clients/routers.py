# sge/modules/clients/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import ClientAPI, ClientCreateAPI, ClientDetailAPI, ClientUpdateAPI
from .services import ClientService, get_client_service

clients_router = APIRouter()


@clients_router.get("", response_model=List[ClientAPI], summary="List clients", tags=["Clients"])
async def list_clients(
    current_user: CurrentUser,
    search: Optional[str] = Query(None, description="Busca por nome ou email"),
    status_filter: Optional[str] = Query(None, alias="status"),
    client_service: ClientService = Depends(get_client_service),
):
    return await client_service.list_clients(current_user.company_id, search, status_filter)


@clients_router.get("/{client_id}", response_model=ClientDetailAPI, summary="Get a client with its items", tags=["Clients"])
async def get_client(
    current_user: CurrentUser,
    client_id: str = Path(..., description="ID do cliente"),
    client_service: ClientService = Depends(get_client_service),
):
    return await client_service.get_client(current_user.company_id, client_id)


@clients_router.post("", response_model=ClientAPI, status_code=status.HTTP_201_CREATED, summary="Create a client", tags=["Clients"])
async def create_client(
    payload: ClientCreateAPI,
    current_user: CurrentUser,
    client_service: ClientService = Depends(get_client_service),
):
    return await client_service.create_client(current_user, payload)


@clients_router.put("/{client_id}", response_model=ClientAPI, summary="Update a client", tags=["Clients"])
async def update_client(
    payload: ClientUpdateAPI,
    current_user: CurrentUser,
    client_id: str = Path(..., description="ID do cliente"),
    client_service: ClientService = Depends(get_client_service),
):
    return await client_service.update_client(current_user, client_id, payload)


@clients_router.delete("/{client_id}", response_model=MessageResponse, summary="Delete a client", tags=["Clients"])
async def delete_client(
    current_user: CurrentUser,
    client_id: str = Path(..., description="ID do cliente"),
    client_service: ClientService = Depends(get_client_service),
):
    await client_service.delete_client(current_user, client_id)
    return MessageResponse(message="Cliente removido")
