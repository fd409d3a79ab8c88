"""Team Balance API.

HTTP API used by team bots and back-office tools to claim pending withdrawal
transactions, report their outcome, and inspect website balances.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from balance_api.api.routes import api_router
from balance_api.core.config import AppEnvironment, Settings, get_settings
from balance_api.core.database import create_async_engine, create_session_factory, verify_connection
from balance_api.core.errors import (
    BalanceApiError,
    UnauthorizedError,
    error_envelope,
    get_status_code,
)
from balance_api.core.logging import setup_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager.

    Builds the process-wide engine and session factory. Startup aborts if
    either cannot be created or, when enabled, the connectivity check fails.
    """
    settings = get_settings()
    setup_logging(settings)

    logger.info(
        "Starting Team Balance API",
        extra={
            "app": settings.app.name,
            "env": settings.app.env,
            "version": settings.app.version,
        },
    )

    engine = create_async_engine(settings.database)
    try:
        if settings.database.verify_on_startup:
            await verify_connection(engine)
    except Exception:
        logger.exception("Database unreachable at startup")
        await engine.dispose()
        raise

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    yield

    await engine.dispose()

    logger.info("Team Balance API stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Team Balance API",
        description=(
            "Team API for claiming pending withdrawals, reporting their outcome "
            "and listing website balances. Authenticate with `Bearer <team_api_key>`."
        ),
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(api_router, prefix=API_PREFIX)

    setup_telemetry(app, settings)

    @app.exception_handler(BalanceApiError)
    async def domain_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: BalanceApiError
    ) -> JSONResponse:
        """Handle domain-specific errors and return the error envelope."""
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error(
                "Request failed on upstream store",
                extra={"path": request.url.path, "error": exc.message, **exc.details},
            )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        return JSONResponse(
            status_code=status_code,
            content=error_envelope(exc.message, exc.details),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render malformed request bodies as 400 envelopes."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_envelope("Invalid request body", {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions and return 500 error responses."""
        logger.exception(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
        )
        details = type(exc).__name__ if settings.security.sanitize_errors else str(exc)
        return JSONResponse(
            status_code=500,
            content=error_envelope("Internal server error", {"details": details or "Unknown error"}),
        )

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "balance_api.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.value.lower(),
    )


if __name__ == "__main__":
    run()
