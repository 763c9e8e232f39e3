"""Field-service ticketing — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldservice.adapters.persistence.database import engine
from fieldservice.application.results import OperationResult
from fieldservice.config import settings
from fieldservice.domain.errors import FieldServiceError
from fieldservice.infrastructure.api.responses import http_status_for
from fieldservice.infrastructure.api.routes_admin import router as admin_router
from fieldservice.infrastructure.api.routes_hazards import router as hazards_router
from fieldservice.infrastructure.api.routes_health import router as health_router
from fieldservice.infrastructure.api.routes_notifications import router as notifications_router
from fieldservice.infrastructure.api.routes_profile import router as profile_router
from fieldservice.infrastructure.api.routes_tickets import router as tickets_router

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
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
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


async def field_service_error_handler(request: Request, exc: FieldServiceError) -> JSONResponse:
    """Errors that escaped a use case still get the standard status mapping."""
    result = OperationResult.from_error(exc)
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=http_status_for(result),
        content={"detail": {"message": result.message, "error": None, "retryable": result.retryable}},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Field-service ticketing",
        description="Ticket raising, nearest-engineer assignment and ticket lifecycle",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FieldServiceError, field_service_error_handler)

    app.include_router(health_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(hazards_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    return app


app = create_app()
