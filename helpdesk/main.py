"""Helpdesk — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from helpdesk.adapters.persistence.database import engine
from helpdesk.config import settings
from helpdesk.domain.errors import (
    DuplicateUser,
    FeedbackRejected,
    InvalidCredentials,
    NoAgentsAvailable,
    NotAuthorized,
    NotFound,
    TicketValidationError,
)
from helpdesk.infrastructure.api.routes_analytics import router as analytics_router
from helpdesk.infrastructure.api.routes_audit import router as audit_router
from helpdesk.infrastructure.api.routes_feedback import router as feedback_router
from helpdesk.infrastructure.api.routes_health import router as health_router
from helpdesk.infrastructure.api.routes_notifications import router as notifications_router
from helpdesk.infrastructure.api.routes_tickets import router as tickets_router
from helpdesk.infrastructure.api.routes_users import router as users_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NoAgentsAvailable)
    async def no_agents(request: Request, exc: NoAgentsAvailable):
        return JSONResponse(
            status_code=503,
            content={"detail": "Cannot create ticket right now: no agents available"},
        )

    @app.exception_handler(TicketValidationError)
    async def invalid_ticket(request: Request, exc: TicketValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid ticket", "violations": exc.violations},
        )

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotAuthorized)
    async def forbidden(request: Request, exc: NotAuthorized):
        return JSONResponse(status_code=403, content={"detail": str(exc)})

    @app.exception_handler(FeedbackRejected)
    async def feedback_rejected(request: Request, exc: FeedbackRejected):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(DuplicateUser)
    async def duplicate_user(request: Request, exc: DuplicateUser):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(InvalidCredentials)
    async def invalid_credentials(request: Request, exc: InvalidCredentials):
        return JSONResponse(
            status_code=401,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error("Database failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Service unavailable: database failure"},
        )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Helpdesk — medical equipment support",
        description="Ticketing with round-robin agent assignment and an audit trail",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")
    app.include_router(feedback_router, prefix="/api")
    app.include_router(audit_router, prefix="/api")
    app.include_router(analytics_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    return app


app = create_app()
