# sge/modules/items/routers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from sge.core.security import CurrentUser
from sge.models.api_common import MessageResponse
from .models import ItemAPI, ItemCreateAPI, ItemMoveAPI, ItemUpdateAPI
from .services import ItemService, get_item_service

items_router = APIRouter()


@items_router.get("", response_model=List[ItemAPI], summary="List operating items", tags=["Items"])
async def list_items(
    current_user: CurrentUser,
    flow_id: Optional[str] = Query(None, alias="flowId"),
    stage_id: Optional[str] = Query(None, alias="stageId"),
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Busca no título (case-insensitive)"),
    item_service: ItemService = Depends(get_item_service),
):
    return await item_service.list_items(current_user.company_id, flow_id, stage_id, status_filter, priority, search)


@items_router.get("/{item_id}", response_model=ItemAPI, summary="Get an item with its history", tags=["Items"])
async def get_item(
    current_user: CurrentUser,
    item_id: str = Path(..., description="ID do item"),
    item_service: ItemService = Depends(get_item_service),
):
    return await item_service.get_item(current_user.company_id, item_id)


@items_router.post("", response_model=ItemAPI, status_code=status.HTTP_201_CREATED, summary="Create an item", tags=["Items"])
async def create_item(
    payload: ItemCreateAPI,
    current_user: CurrentUser,
    item_service: ItemService = Depends(get_item_service),
):
    return await item_service.create_item(current_user, payload)


@items_router.put("/{item_id}", response_model=ItemAPI, summary="Update an item", tags=["Items"])
async def update_item(
    payload: ItemUpdateAPI,
    current_user: CurrentUser,
    item_id: str = Path(..., description="ID do item"),
    item_service: ItemService = Depends(get_item_service),
):
    return await item_service.update_item(current_user, item_id, payload)


@items_router.patch("/{item_id}/move", response_model=ItemAPI, summary="Move an item to another stage", tags=["Items"])
async def move_item(
    payload: ItemMoveAPI,
    current_user: CurrentUser,
    item_id: str = Path(..., description="ID do item"),
    item_service: ItemService = Depends(get_item_service),
):
    """Move o card no Kanban; etapas finais concluem (sucesso) ou perdem (falha) o item."""
    return await item_service.move_item(current_user, item_id, payload)


@items_router.delete("/{item_id}", response_model=MessageResponse, summary="Delete an item", tags=["Items"])
async def delete_item(
    current_user: CurrentUser,
    item_id: str = Path(..., description="ID do item"),
    item_service: ItemService = Depends(get_item_service),
):
    await item_service.delete_item(current_user, item_id)
    return MessageResponse(message="Item removido")
