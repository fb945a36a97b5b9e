"""Unit tests for the application factory and lifespan."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from cher_closet import __version__
from cher_closet.core.config import Settings
from cher_closet.core.database import ConnectionPoolManager
from cher_closet.core.errors import ConfigurationError
from cher_closet.core.health import HealthVerifier
from cher_closet.main import create_app, main
from cher_closet.services.storage import Storage


@pytest.fixture
def mock_pool_manager() -> MagicMock:
    manager = MagicMock(spec=ConnectionPoolManager)
    manager.initialize = AsyncMock()
    manager.close = AsyncMock()
    return manager


class TestCreateApp:
    """Test application construction."""

    def test_root_endpoint(self, settings: Settings) -> None:
        """Test the API information endpoint."""
        client = TestClient(create_app(settings))

        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "name": "Cher's Closet",
            "version": __version__,
            "status": "operational",
            "environment": "test",
        }

    def test_docs_hidden_in_production(self) -> None:
        settings = Settings(
            _env_file=None,
            app_env="production",
            database_url="postgresql://localhost/closet",
            session_secret="a-real-production-session-secret",
            jwt_secret="a-real-production-jwt-secret-value",
        )

        app = create_app(settings)

        assert app.docs_url is None
        assert app.openapi_url is None

    def test_routes_are_mounted_under_api(self, settings: Settings) -> None:
        paths = {route.path for route in create_app(settings).routes}

        assert "/api/health" in paths
        assert "/api/wardrobe" in paths
        assert "/api/sharing/shared/{share_id}" in paths


class TestLifespan:
    """Test startup and shutdown."""

    def test_startup_wires_services(
        self, settings: Settings, mock_pool_manager: MagicMock
    ) -> None:
        """Test that startup creates the pool and publishes services."""
        app = create_app(settings)

        with patch(
            "cher_closet.main.ConnectionPoolManager", return_value=mock_pool_manager
        ) as manager_cls:
            with TestClient(app):
                config = manager_cls.call_args.args[0]
                assert config.connection_string == settings.database_url
                mock_pool_manager.initialize.assert_awaited_once()
                assert app.state.pool_manager is mock_pool_manager
                assert isinstance(app.state.health_verifier, HealthVerifier)
                assert isinstance(app.state.storage, Storage)
                assert not app.state.weather_client.is_configured
                assert not app.state.ai_stylist.is_configured

        mock_pool_manager.close.assert_awaited_once()

    def test_missing_database_url_stops_startup(
        self, mock_pool_manager: MagicMock
    ) -> None:
        """Test that a self-hosted deployment without DATABASE_URL never starts."""
        settings = Settings(_env_file=None, app_env="test", database_url=None)
        app = create_app(settings)

        with patch("cher_closet.main.ConnectionPoolManager", return_value=mock_pool_manager):
            with pytest.raises(ConfigurationError, match="DATABASE_URL"):
                with TestClient(app):
                    pass

        mock_pool_manager.initialize.assert_not_awaited()

    def test_managed_deployment_reports_missing_variables(self) -> None:
        settings = Settings(
            _env_file=None,
            app_env="test",
            deployment_mode="managed",
            database_url="postgresql://localhost/closet",
            pghost=None,
            pguser=None,
            pgdatabase=None,
        )

        with pytest.raises(ConfigurationError) as exc_info:
            with TestClient(create_app(settings)):
                pass

        assert exc_info.value.missing == ["PGHOST", "PGUSER", "PGDATABASE"]


class TestMain:
    """Test the server entry point."""

    def test_runs_uvicorn_factory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "test")
        monkeypatch.setenv("API_PORT", "5050")

        with patch("cher_closet.main.uvicorn.run") as run:
            main()

        args, kwargs = run.call_args
        assert args == ("cher_closet.main:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 5050
        assert kwargs["reload"] is False
