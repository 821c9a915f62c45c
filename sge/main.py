# sge/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from sge.api.v1 import api_router
from sge.core.config import settings
from sge.core.database import mongo_manager
from sge.core.errors import exception_handlers
from sge.core.logging_config import add_trace_id_middleware, setup_logging
from sge.core.rate_limit import limiter
from sge.modules.activity.repository import ActivityLogRepository
from sge.modules.alerts.repository import AlertRepository
from sge.modules.clients.repository import ClientRepository
from sge.modules.company.repository import CompanyRepository
from sge.modules.financial.repository import FinancialEntryRepository
from sge.modules.flows.repository import FlowRepository, FlowStageRepository
from sge.modules.goals.repository import GoalRepository, KeyResultRepository
from sge.modules.items.repository import ItemRepository
from sge.modules.kpis.repository import KpiRepository
from sge.modules.people.repository import PersonRepository
from sge.modules.processes.repository import ProcessBlockRepository, ProcessItemRepository
from sge.modules.rules.repository import BusinessRuleRepository
from sge.modules.users.repository import UserRepository

REPOSITORIES = (
    UserRepository,
    CompanyRepository,
    ClientRepository,
    FlowRepository,
    FlowStageRepository,
    ItemRepository,
    ProcessBlockRepository,
    ProcessItemRepository,
    KpiRepository,
    FinancialEntryRepository,
    PersonRepository,
    AlertRepository,
    BusinessRuleRepository,
    GoalRepository,
    KeyResultRepository,
    ActivityLogRepository,
)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    for repo_cls in REPOSITORIES:
        await repo_cls(db).create_indexes()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})...")
    await mongo_manager.connect()
    await ensure_indexes(mongo_manager.get_db())
    yield
    logger.info("Shutting down...")
    await mongo_manager.disconnect()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        lifespan=lifespan,
        exception_handlers=exception_handlers,
    )
    app.state.limiter = limiter

    app.middleware("http")(add_trace_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
