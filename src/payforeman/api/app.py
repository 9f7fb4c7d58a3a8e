"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payforeman.api.routes import (
    chat_router,
    deadlines_router,
    health_router,
    invoices_router,
    llm_router,
    projects_router,
)
from payforeman.calculators.clock import Clock, SystemClock
from payforeman.config import Settings, get_settings
from payforeman.database import Database
from payforeman.errors import PayForemanError, UpstreamError
from payforeman.upstream.llm import LlmClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    yield
    # Shutdown
    await app.state.llm.aclose()
    await app.state.database.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    llm_client: LlmClient | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Shared resources are built here rather than at import time, so tests
    can pass their own database, LLM client and clock.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="PayForeman API",
        description="Construction invoicing, lien deadlines and collections assistant",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_url(settings.database_url)
    app.state.llm = llm_client or LlmClient.from_settings(settings.upstream)
    app.state.clock = clock or SystemClock()

    # Exception handlers
    @app.exception_handler(PayForemanError)
    async def domain_exception_handler(
        request: Request, exc: PayForemanError
    ) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        detail = exc.public_message if isinstance(exc, UpstreamError) else exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": detail, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed or missing request fields as a 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": _describe_validation_errors(exc),
                "code": "VALIDATION_ERROR",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        projects_router,
        deadlines_router,
        invoices_router,
        chat_router,
        llm_router,
    ):
        app.include_router(router, prefix="/api")

    return app


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """One line per failed field, e.g. "body.triggerDate: Field required"."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
