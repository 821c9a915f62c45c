# sge/api/v1.py
from fastapi import APIRouter

from sge.api.endpoints import auth, status
from sge.modules.activity.routers import logs_router
from sge.modules.alerts.routers import alerts_router
from sge.modules.clients.routers import clients_router
from sge.modules.company.routers import company_router
from sge.modules.dashboard.routers import dashboard_router
from sge.modules.financial.routers import financial_router
from sge.modules.flows.routers import flows_router
from sge.modules.goals.routers import goals_router
from sge.modules.items.routers import items_router
from sge.modules.kpis.routers import kpis_router
from sge.modules.operations.routers import operations_router
from sge.modules.people.routers import people_router
from sge.modules.processes.routers import processes_router
from sge.modules.reports.routers import reports_router
from sge.modules.rules.routers import rules_router

api_router = APIRouter()

api_router.include_router(status.router)
api_router.include_router(auth.router, prefix="/auth")

api_router.include_router(company_router, prefix="/company")
api_router.include_router(clients_router, prefix="/clients")
api_router.include_router(flows_router, prefix="/flows")
api_router.include_router(items_router, prefix="/items")
api_router.include_router(processes_router, prefix="/process-blocks")
api_router.include_router(kpis_router, prefix="/kpis")
api_router.include_router(financial_router, prefix="/financial")
api_router.include_router(people_router, prefix="/people")
api_router.include_router(alerts_router, prefix="/alerts")
api_router.include_router(rules_router, prefix="/rules")
api_router.include_router(goals_router, prefix="/goals")
api_router.include_router(dashboard_router, prefix="/dashboard")
api_router.include_router(operations_router, prefix="/operations")
api_router.include_router(logs_router, prefix="/logs")
api_router.include_router(reports_router, prefix="/reports")
