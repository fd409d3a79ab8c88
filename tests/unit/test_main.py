"""Unit tests for main application module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from balance_api.core.config import AppEnvironment, LogLevel
from balance_api.main import (
    create_app,
    lifespan,
    run,
    setup_telemetry,
)


def make_mock_settings(env=AppEnvironment.LOCAL, verify_on_startup=False):
    mock_settings = MagicMock()
    mock_settings.app.name = "test-app"
    mock_settings.app.version = "1.0.0"
    mock_settings.app.env = env
    mock_settings.app.debug = False
    mock_settings.app.log_level = LogLevel.INFO
    mock_settings.server.host = "0.0.0.0"
    mock_settings.server.port = 8080
    mock_settings.server.workers = 4
    mock_settings.database.verify_on_startup = verify_on_startup
    mock_settings.observability.otlp_endpoint = None
    mock_settings.observability.service_name = "test-service"
    mock_settings.security.cors_allowed_origins = ["http://localhost:3000"]
    mock_settings.security.cors_allow_methods = ["GET", "POST"]
    mock_settings.security.cors_allow_headers = ["Authorization"]
    return mock_settings


class TestCreateApp:
    """Test create_app function."""

    def test_create_app_returns_fastapi(self):
        """Test that create_app returns a FastAPI instance."""
        with patch("balance_api.main.get_settings", return_value=make_mock_settings()):
            app = create_app()
        assert isinstance(app, FastAPI)
        assert app.title == "Team Balance API"

    def test_create_app_includes_routers(self):
        """Test that create_app mounts the team routes under /api."""
        with patch("balance_api.main.get_settings", return_value=make_mock_settings()):
            app = create_app()
        route_paths = {r.path for r in app.routes}
        assert {
            "/api/team/pending-transactions",
            "/api/team/transactions",
            "/api/team/update-transaction",
            "/api/team/websites",
        } <= route_paths

    def test_create_app_registers_exception_handlers(self):
        """Test domain, validation and fallback handlers are registered."""
        with patch("balance_api.main.get_settings", return_value=make_mock_settings()):
            app = create_app()
        assert Exception in app.exception_handlers
        assert len(app.exception_handlers) >= 3

    def test_create_app_docs_disabled_in_production(self):
        """Test that docs are disabled in production."""
        settings = make_mock_settings(env=AppEnvironment.PROD)
        with patch("balance_api.main.get_settings", return_value=settings):
            app = create_app()
        assert app.docs_url is None
        assert app.redoc_url is None
        assert app.openapi_url is None


class TestLifespan:
    """Test lifespan context manager."""

    @pytest.mark.asyncio
    async def test_lifespan_startup_and_shutdown(self):
        """Test lifespan stores engine and factory, then disposes the engine."""
        mock_settings = make_mock_settings()
        mock_engine = AsyncMock()
        mock_session_factory = MagicMock()

        with (
            patch("balance_api.main.get_settings", return_value=mock_settings),
            patch("balance_api.main.create_async_engine", return_value=mock_engine),
            patch("balance_api.main.create_session_factory", return_value=mock_session_factory),
            patch("balance_api.main.setup_logging"),
        ):
            app = FastAPI()
            async with lifespan(app):
                assert app.state.settings == mock_settings
                assert app.state.engine == mock_engine
                assert app.state.session_factory == mock_session_factory

        mock_engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_lifespan_aborts_when_database_unreachable(self):
        """Test startup fails and the engine is disposed when the connectivity check fails."""
        mock_settings = make_mock_settings(verify_on_startup=True)
        mock_engine = AsyncMock()

        with (
            patch("balance_api.main.get_settings", return_value=mock_settings),
            patch("balance_api.main.create_async_engine", return_value=mock_engine),
            patch(
                "balance_api.main.verify_connection",
                AsyncMock(side_effect=OSError("connection refused")),
            ),
            patch("balance_api.main.setup_logging"),
        ):
            app = FastAPI()
            with pytest.raises(OSError):
                async with lifespan(app):
                    pass

        mock_engine.dispose.assert_awaited_once()
        assert not hasattr(app.state, "session_factory")


class TestSetupTelemetry:
    """Test setup_telemetry function."""

    def test_setup_telemetry_returns_early_without_endpoint(self):
        """Test setup_telemetry does nothing without an OTLP endpoint."""
        mock_settings = MagicMock()
        mock_settings.observability.otlp_endpoint = None

        with patch("balance_api.main.FastAPIInstrumentor") as instrumentor:
            setup_telemetry(FastAPI(), mock_settings)

        instrumentor.instrument_app.assert_not_called()

    def test_setup_telemetry_with_endpoint(self):
        """Test setup_telemetry instruments the app when an endpoint is set."""
        mock_settings = MagicMock()
        mock_settings.observability.otlp_endpoint = "http://localhost:4317"
        mock_settings.observability.service_name = "test-service"

        with (
            patch("balance_api.main.OTLPSpanExporter"),
            patch("balance_api.main.TracerProvider"),
            patch("balance_api.main.BatchSpanProcessor"),
            patch("balance_api.main.trace"),
            patch("balance_api.main.FastAPIInstrumentor") as instrumentor,
        ):
            app = FastAPI()
            setup_telemetry(app, mock_settings)

        instrumentor.instrument_app.assert_called_once_with(app)


class TestRun:
    """Test run function."""

    def test_run_starts_uvicorn_factory(self):
        """Test run hands the app factory to uvicorn."""
        with (
            patch("balance_api.main.get_settings", return_value=make_mock_settings(env=AppEnvironment.PROD)),
            patch("uvicorn.run") as uvicorn_run,
        ):
            run()

        args, kwargs = uvicorn_run.call_args
        assert args[0] == "balance_api.main:create_app"
        assert kwargs["factory"] is True
        assert kwargs["reload"] is False
        assert kwargs["workers"] == 4
