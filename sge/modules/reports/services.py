# sge/modules/reports/services.py
import csv
import io
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from sge.core.database import get_database
from sge.core.utils import format_number, utcnow
from sge.modules.alerts.repository import AlertRepository
from sge.modules.clients.repository import ClientRepository
from sge.modules.financial.repository import FinancialEntryRepository
from sge.modules.flows.repository import FlowRepository, FlowStageRepository
from sge.modules.items.repository import ItemRepository
from sge.modules.kpis.repository import KpiRepository
from sge.modules.people.repository import PersonRepository

BOM = "\ufeff"  # Excel reconhece UTF-8


class Column(NamedTuple):
    label: str
    getter: Callable[[Any], Any]


def _date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _bool(value: Any) -> str:
    return "Sim" if value else "Não"


def _attr(name: str) -> Callable[[Any], Any]:
    return lambda row: getattr(row, name, None)


def render_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return _bool(value)
    if isinstance(value, datetime):
        return _date(value)
    return format_number(value)


def to_csv(rows: Sequence[Any], columns: Sequence[Column]) -> str:
    """CSV com BOM, todas as células entre aspas e linhas separadas por \\n."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([c.label for c in columns])
    for row in rows:
        writer.writerow([render_cell(c.getter(row)) for c in columns])
    return BOM + output.getvalue().rstrip("\n")


CLIENT_COLUMNS = [
    Column("Nome", _attr("name")),
    Column("Tipo", _attr("type")),
    Column("Email", _attr("email")),
    Column("Telefone", _attr("phone")),
    Column("Segmento", _attr("segment")),
    Column("Status", _attr("status")),
    Column("Valor Total", _attr("total_value")),
    Column("Criado em", _attr("created_at")),
]

FINANCIAL_COLUMNS = [
    Column("Data", _attr("date")),
    Column("Tipo", _attr("type")),
    Column("Categoria", _attr("category")),
    Column("Descrição", _attr("description")),
    Column("Valor", _attr("value")),
    Column("Recorrente", _attr("recurring")),
]

PEOPLE_COLUMNS = [
    Column("Nome", _attr("name")),
    Column("Cargo", _attr("role")),
    Column("Departamento", _attr("department")),
    Column("Admissão", _attr("hire_date")),
    Column("Salário", _attr("salary")),
    Column("Status", _attr("status")),
]

KPI_COLUMNS = [
    Column("Nome", _attr("name")),
    Column("Categoria", _attr("category")),
    Column("Valor", _attr("value")),
    Column("Meta", _attr("target")),
    Column("Unidade", _attr("unit")),
    Column("Tendência", _attr("trend")),
    Column("Status", _attr("status")),
]

ALERT_COLUMNS = [
    Column("Título", _attr("title")),
    Column("Descrição", _attr("description")),
    Column("Tipo", _attr("type")),
    Column("Prioridade", _attr("priority")),
    Column("Status", _attr("status")),
    Column("Criado em", _attr("created_at")),
    Column("Resolvido em", _attr("resolved_at")),
]

# Itens são exportados como dicts já com os nomes de fluxo/etapa/cliente resolvidos
ITEM_COLUMNS = [
    Column("Título", lambda r: r["title"]),
    Column("Fluxo", lambda r: r["flow"]),
    Column("Etapa", lambda r: r["stage"]),
    Column("Cliente", lambda r: r["client"]),
    Column("Valor", lambda r: r["value"]),
    Column("Prioridade", lambda r: r["priority"]),
    Column("Status", lambda r: r["status"]),
    Column("Prazo SLA", lambda r: r["sla_due_at"]),
    Column("Criado em", lambda r: r["created_at"]),
]


class ReportService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.client_repo = ClientRepository(db)
        self.entry_repo = FinancialEntryRepository(db)
        self.person_repo = PersonRepository(db)
        self.kpi_repo = KpiRepository(db)
        self.alert_repo = AlertRepository(db)
        self.item_repo = ItemRepository(db)
        self.flow_repo = FlowRepository(db)
        self.stage_repo = FlowStageRepository(db)

    async def _item_rows(self, company_id: ObjectId) -> List[Dict[str, Any]]:
        items = await self.item_repo.list_for_company(company_id, sort=[("updated_at", DESCENDING)])
        flows = await self.flow_repo.map_by_ids(i.flow_id for i in items)
        stages = await self.stage_repo.map_by_ids(i.stage_id for i in items)
        clients = await self.client_repo.map_by_ids(i.client_id for i in items)
        return [
            {
                "title": i.title,
                "flow": flows[i.flow_id].name if i.flow_id in flows else "",
                "stage": stages[i.stage_id].name if i.stage_id in stages else "",
                "client": clients[i.client_id].name if i.client_id in clients else "",
                "value": i.value,
                "priority": i.priority,
                "status": i.status,
                "sla_due_at": i.sla_due_at,
                "created_at": i.created_at,
            }
            for i in items
        ]

    async def _load(self, company_id: ObjectId, resource: str) -> Tuple[Sequence[Any], Sequence[Column]]:
        if resource == "clients":
            return await self.client_repo.list_for_company(company_id, sort=[("name", ASCENDING)]), CLIENT_COLUMNS
        if resource == "financial":
            return await self.entry_repo.list_in_window(company_id), FINANCIAL_COLUMNS
        if resource == "people":
            return await self.person_repo.list_for_company(company_id, sort=[("name", ASCENDING)]), PEOPLE_COLUMNS
        if resource == "kpis":
            return await self.kpi_repo.list_for_company(company_id, sort=[("category", ASCENDING)]), KPI_COLUMNS
        if resource == "alerts":
            return await self.alert_repo.list_for_company(company_id, sort=[("created_at", DESCENDING)]), ALERT_COLUMNS
        if resource == "items":
            return await self._item_rows(company_id), ITEM_COLUMNS
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Relatório não encontrado")

    async def export_csv(self, company_id: ObjectId, resource: str, now: Optional[datetime] = None) -> Tuple[str, str]:
        """Devolve (nome do arquivo, conteúdo CSV) do recurso pedido."""
        rows, columns = await self._load(company_id, resource)
        filename = f"{resource}_{(now or utcnow()).strftime('%Y-%m-%d')}.csv"
        logger.bind(service="ReportService", company_id=str(company_id)).info(f"Exportando {len(rows)} linha(s) para {filename}")
        return filename, to_csv(rows, columns)


async def get_report_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> ReportService:
    return ReportService(db)
