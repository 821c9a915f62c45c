# sge/modules/rules/services.py
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from sge.core.database import get_database
from sge.core.security import TokenUser
from sge.core.utils import format_number, to_number
from sge.modules.activity.services import ActivityService
from sge.modules.alerts.models import AlertInDB
from sge.modules.alerts.repository import AlertRepository
from .models import BusinessRuleCreateAPI, BusinessRuleInDB, BusinessRuleUpdateAPI, RuleValue
from .repository import BusinessRuleRepository

ORDERING_OPERATORS = {
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
}


def extract_metric_value(metric: str, data: Dict[str, Any]) -> Optional[float | str]:
    """Valor a comparar para a métrica da regra; None quando a métrica não se aplica ao registro."""
    if metric in ("value", "amount"):
        return to_number(data.get("value") or data.get("amount") or 0)
    if metric == "score":
        return to_number(data.get("score") or 0)
    if metric == "status":
        current = data.get("status")
        return None if current is None else str(current)
    # Métricas derivadas (margem, turnover) exigem agregação e ainda não são suportadas
    return None


def _loosely_equal(actual: Any, target: Any) -> bool:
    actual_num, target_num = to_number(actual), to_number(target)
    if actual_num is not None and target_num is not None and not isinstance(actual, bool) and not isinstance(target, bool):
        return actual_num == target_num
    return format_number(actual) == format_number(target)


def check_condition(actual: Any, operator: str, target: Any) -> bool:
    """True quando o valor atual viola (dispara) a condição `actual <operator> target`."""
    if operator in ORDERING_OPERATORS:
        actual_num, target_num = to_number(actual), to_number(target)
        if actual_num is None or target_num is None:
            return False
        return ORDERING_OPERATORS[operator](actual_num, target_num)
    if operator == "==":
        return _loosely_equal(actual, target)
    if operator == "!=":
        return not _loosely_equal(actual, target)
    return False


def normalize_rule_value(value: RuleValue) -> RuleValue:
    """Strings numéricas viram número; demais strings (ex: status) ficam como estão."""
    number = to_number(value)
    return number if number is not None else value


class RulesService:
    """
    Avalia as regras de negócio ativas de um tenant contra um registro recém-gravado
    e executa a ação configurada (hoje: criar alerta).
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.rule_repo = BusinessRuleRepository(db)
        self.alert_repo = AlertRepository(db)
        self.activity = ActivityService(db)

    async def evaluate(self, company_id: ObjectId, entity: str, data: Dict[str, Any]) -> List[AlertInDB]:
        log = logger.bind(service="RulesService", company_id=str(company_id), entity=entity)
        created: List[AlertInDB] = []
        try:
            rules = await self.rule_repo.list_active(company_id, entity)
            if not rules:
                return created

            for rule in rules:
                actual = extract_metric_value(rule.metric, data)
                if actual is None:
                    continue
                if check_condition(actual, rule.operator, rule.value):
                    alert = await self.trigger_action(rule, actual)
                    if alert:
                        created.append(alert)
            if created:
                log.info(f"{len(created)} regra(s) disparada(s).")
        except Exception as e:
            log.error(f"[RulesService] Error evaluating rules for {entity}: {e}")
        return created

    async def trigger_action(self, rule: BusinessRuleInDB, actual: Any) -> Optional[AlertInDB]:
        log = logger.bind(service="RulesService", rule_id=str(rule.id))
        log.info(f"Violation detected: {rule.name}. Value: {actual}")

        if rule.action_type != "alert":
            log.warning(f"Tipo de ação não suportado '{rule.action_type}', ignorando.")
            return None

        return await self.alert_repo.create({
            "title": f"Alerta: {rule.name}",
            "description": (
                f'A regra "{rule.name}" foi ativada. Valor atual: {format_number(actual)} '
                f"(Critério: {rule.operator} {format_number(rule.value)})"
            ),
            "type": rule.entity,
            "priority": rule.priority,
            "status": "active",
            "company_id": rule.company_id,
            "rule_id": rule.id,
        })

    # --- CRUD ---

    async def list_rules(self, company_id: ObjectId) -> List[BusinessRuleInDB]:
        return await self.rule_repo.list_for_company(company_id, sort=[("created_at", DESCENDING)])

    async def create_rule(self, current_user: TokenUser, payload: BusinessRuleCreateAPI) -> BusinessRuleInDB:
        missing_value = payload.value is None or (isinstance(payload.value, str) and not payload.value.strip())
        if not payload.name or not payload.entity or not payload.metric or not payload.operator or missing_value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Campos obrigatórios faltando")

        data = payload.model_dump()
        data["value"] = normalize_rule_value(payload.value)
        data["company_id"] = current_user.company_id
        rule = await self.rule_repo.create(data)
        logger.bind(service="RulesService", company_id=str(current_user.company_id)).info(f"Regra criada: {rule.name}")
        await self.activity.log_activity(
            "created", "rules", rule.id, rule.name, current_user.company_id, current_user.id,
            details={"entity": rule.entity, "metric": rule.metric, "operator": rule.operator, "value": rule.value},
        )
        return rule

    async def update_rule(self, current_user: TokenUser, rule_id: str, payload: BusinessRuleUpdateAPI) -> BusinessRuleInDB:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "value" in changes:
            changes["value"] = normalize_rule_value(changes["value"])
        rule = await self.rule_repo.update_for_company(rule_id, current_user.company_id, changes)
        if not rule:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Regra não encontrada")
        await self.activity.log_activity(
            "updated", "rules", rule.id, rule.name, current_user.company_id, current_user.id,
            details={"changes": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
        return rule

    async def delete_rule(self, current_user: TokenUser, rule_id: str) -> None:
        rule = await self.rule_repo.get_for_company(rule_id, current_user.company_id)
        if not rule:
            return
        await self.rule_repo.delete_for_company(rule.id, current_user.company_id)
        await self.activity.log_activity("deleted", "rules", rule.id, rule.name, current_user.company_id, current_user.id)


async def get_rules_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> RulesService:
    return RulesService(db)
