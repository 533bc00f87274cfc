"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.core import config, init_db
from components.core.database import DatabaseManager
from components.core.exceptions import LedgerError
from components.core.log_config import configure_logging
from components.currency.service import StaticRateProvider, set_rate_provider
from restapi.endpoints import (
    account,
    budget,
    category,
    dashboard,
    goal,
    health_check,
    payment,
    payment_category,
    payment_settings,
    transaction,
    transfer,
)

logger = logging.getLogger(__name__)

TITLE = "Finance Ledger"
DESCRIPTION = "Personal finance ledger: accounts, transactions, budgets, goals and scheduled payments"
VERSION = "1.0.0"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    """Render every error as {"message": ...}."""

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: fastapi.Request, exc: LedgerError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: fastapi.Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: fastapi.Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: fastapi.Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = config.get_settings()
    configure_logging(settings.LOG_LEVEL)
    if settings.EXCHANGE_RATES:
        set_rate_provider(StaticRateProvider(settings.EXCHANGE_RATES))

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI):
        manager: DatabaseManager = app.state.db_manager
        await manager.create_all()
        if settings.SEED_SAMPLE_DATA:
            from scripts.seed_data import seed_sample_data

            async with manager.get_db() as session:
                await seed_sample_data(session)
        yield
        await manager.dispose()

    app = fastapi.FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version=VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # Initialize database
    init_db.init_db(app, db_manager)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(account.router)
    app.include_router(category.router)
    app.include_router(transaction.router)
    app.include_router(budget.router)
    app.include_router(goal.router)
    # Fixed /payments/* paths must be matched before /payments/{payment_id}
    app.include_router(payment_category.router)
    app.include_router(payment_settings.router)
    app.include_router(payment.router)
    app.include_router(transfer.router)
    app.include_router(dashboard.router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=TITLE,
            version=VERSION,
            description=DESCRIPTION,
            routes=app.routes,
        )
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
