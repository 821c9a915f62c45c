# sge/modules/rules/routers.py
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from sge.core.security import CurrentUser, TokenUser, require_role
from .models import BusinessRuleAPI, BusinessRuleCreateAPI, BusinessRuleUpdateAPI
from .services import RulesService, get_rules_service

rules_router = APIRouter()


@rules_router.get("", response_model=List[BusinessRuleAPI], summary="List business rules", tags=["Rules"])
async def list_rules(
    current_user: CurrentUser,
    rules_service: RulesService = Depends(get_rules_service),
):
    rules = await rules_service.list_rules(current_user.company_id)
    return [BusinessRuleAPI.model_validate(r) for r in rules]


@rules_router.post("", response_model=BusinessRuleAPI, status_code=status.HTTP_201_CREATED, summary="Create a business rule", tags=["Rules"])
async def create_rule(
    payload: BusinessRuleCreateAPI,
    current_user: TokenUser = Depends(require_role(["admin"])),
    rules_service: RulesService = Depends(get_rules_service),
):
    """(Admin) Cria uma regra de threshold avaliada a cada gravação da entidade."""
    return BusinessRuleAPI.model_validate(await rules_service.create_rule(current_user, payload))


@rules_router.patch("/{rule_id}", response_model=BusinessRuleAPI, summary="Update or toggle a business rule", tags=["Rules"])
async def update_rule(
    payload: BusinessRuleUpdateAPI,
    rule_id: str = Path(..., description="ID da regra"),
    current_user: TokenUser = Depends(require_role(["admin"])),
    rules_service: RulesService = Depends(get_rules_service),
):
    return BusinessRuleAPI.model_validate(await rules_service.update_rule(current_user, rule_id, payload))


@rules_router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a business rule", tags=["Rules"])
async def delete_rule(
    rule_id: str = Path(..., description="ID da regra"),
    current_user: TokenUser = Depends(require_role(["admin"])),
    rules_service: RulesService = Depends(get_rules_service),
):
    await rules_service.delete_rule(current_user, rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
