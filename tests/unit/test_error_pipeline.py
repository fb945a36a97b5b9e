"""Unit tests for the central error handling pipeline."""

import json
import logging

import pytest
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse, Response

from cher_closet.api.error_handling import (
    REDACTED_MESSAGE,
    ErrorFunnelRoute,
    format_validation_errors,
    handle_error,
    register_error_handlers,
    to_failure,
    wrap_handler,
)
from cher_closet.core.config import Settings
from cher_closet.core.errors import ApiError, ErrorKind
from tests.fixtures.fakes import create_mock_request


class Garment(BaseModel):
    name: str
    size: int


def production_settings() -> Settings:
    return Settings(
        _env_file=None,
        app_env="production",
        session_secret="a-real-production-session-secret",
        jwt_secret="a-real-production-jwt-secret-value",
    )


class TestFormatValidationErrors:
    """Test nesting of validation messages."""

    def test_nests_by_location(self) -> None:
        """Test that each location segment becomes a nested node."""
        formatted = format_validation_errors(
            [
                {"loc": ("body", "name"), "msg": "Field required"},
                {"loc": ("body", "name"), "msg": "Too short"},
                {"loc": ("query", "limit"), "msg": "Not an integer"},
            ]
        )

        assert formatted == {
            "_errors": [],
            "body": {
                "_errors": [],
                "name": {"_errors": ["Field required", "Too short"]},
            },
            "query": {"_errors": [], "limit": {"_errors": ["Not an integer"]}},
        }

    def test_error_without_location(self) -> None:
        """Test that location-less errors land at the top level."""
        assert format_validation_errors([{"msg": "Bad payload"}]) == {
            "_errors": ["Bad payload"]
        }


class TestToFailure:
    """Test exception classification."""

    def test_api_error(self) -> None:
        """Test that ApiError keeps its status, code and details."""
        failure = to_failure(ApiError.conflict("Username already exists", details={"f": 1}))

        assert failure.kind is ErrorKind.API
        assert failure.status_code == 409
        assert failure.code == "ERROR_409"
        assert failure.envelope() == {
            "error": {
                "message": "Username already exists",
                "code": "ERROR_409",
                "details": {"f": 1},
            }
        }

    def test_api_error_default_code(self) -> None:
        """Test the ERROR_<status> fallback code."""
        failure = to_failure(ApiError("Teapot", 418))

        assert failure.code == "ERROR_418"
        assert "details" not in failure.envelope()["error"]

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ApiError.bad_request("Invalid share ID"), 400),
            (ApiError.unauthorized(), 401),
            (ApiError.forbidden(), 403),
            (ApiError.not_found(), 404),
            (ApiError.conflict("Username already exists"), 409),
            (ApiError.validation("Outfit needs at least one item"), 422),
            (ApiError.internal(), 500),
        ],
    )
    def test_factories_fall_back_to_status_code(
        self, error: ApiError, status_code: int
    ) -> None:
        """Test that factories without an explicit code use ERROR_<status>."""
        failure = to_failure(error)

        assert error.kind is ErrorKind.API
        assert failure.kind is ErrorKind.API
        assert failure.status_code == status_code
        assert failure.code == f"ERROR_{status_code}"

    def test_factory_keeps_explicit_code(self) -> None:
        error = ApiError.bad_request("Outfit references unknown wardrobe items", "UNKNOWN_ITEMS")

        assert to_failure(error).code == "UNKNOWN_ITEMS"

    def test_http_exception(self) -> None:
        """Test that framework HTTP errors are API failures."""
        failure = to_failure(HTTPException(status_code=404, detail="Not Found"))

        assert failure.kind is ErrorKind.API
        assert failure.status_code == 404
        assert failure.message == "Not Found"
        assert failure.code == "NOT_FOUND"

    def test_http_exception_with_unknown_status(self) -> None:
        """Test the code of a non-standard status."""
        assert to_failure(HTTPException(status_code=599, detail="Timeout")).code == "ERROR_599"

    def test_request_validation_error(self) -> None:
        """Test that request validation errors become 400s."""
        exc = RequestValidationError(
            [{"loc": ("body", "name"), "msg": "Field required", "type": "missing"}]
        )

        failure = to_failure(exc)

        assert failure.kind is ErrorKind.VALIDATION
        assert failure.status_code == 400
        assert failure.message == "Validation error"
        assert failure.code == "VALIDATION_ERROR"
        assert failure.details["body"]["name"]["_errors"] == ["Field required"]

    def test_model_validation_error(self) -> None:
        """Test that pydantic errors raised in handlers are validation failures."""
        with pytest.raises(ValidationError) as exc_info:
            Garment(name="Skirt", size="small")

        failure = to_failure(exc_info.value)

        assert failure.status_code == 400
        assert "size" in failure.details

    def test_unclassified_error(self) -> None:
        """Test that unknown exceptions are 500s carrying their message."""
        failure = to_failure(RuntimeError("disk on fire"))

        assert failure.kind is ErrorKind.UNCLASSIFIED
        assert failure.status_code == 500
        assert failure.message == "disk on fire"
        assert failure.code == "INTERNAL_SERVER_ERROR"

    def test_unclassified_error_is_redacted_in_production(self) -> None:
        """Test that production hides internal messages."""
        failure = to_failure(RuntimeError("password=hunter2"), production=True)

        assert failure.message == REDACTED_MESSAGE

    def test_api_error_is_not_redacted_in_production(self) -> None:
        """Test that deliberate client errors keep their message."""
        failure = to_failure(ApiError.not_found("Outfit not found"), production=True)

        assert failure.message == "Outfit not found"


class TestHandleError:
    """Test response rendering and logging."""

    @pytest.mark.asyncio
    async def test_client_error_is_logged_as_warning(
        self, settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test the response and log level of a 4xx."""
        request = create_mock_request(path="/api/outfits/9", settings=settings)

        response = await handle_error(request, ApiError.not_found("Outfit not found"))

        assert response.status_code == 404
        assert json.loads(response.body) == {
            "error": {"message": "Outfit not found", "code": "ERROR_404"}
        }
        (record,) = caplog.records
        assert record.levelno == logging.WARNING
        assert "Client error: Outfit not found [ERROR_404] path=/api/outfits/9" in record.getMessage()

    @pytest.mark.asyncio
    async def test_unhandled_error_is_logged_with_traceback(
        self, settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test the response and log of an unclassified failure."""
        request = create_mock_request(settings=settings)

        response = await handle_error(request, KeyError("missing"))

        assert response.status_code == 500
        (record,) = caplog.records
        assert record.levelno == logging.ERROR
        assert record.getMessage().startswith("Unhandled error")
        assert record.exc_info is not None

    @pytest.mark.asyncio
    async def test_production_response_is_redacted(self) -> None:
        """Test redaction driven by the application's settings."""
        request = create_mock_request(settings=production_settings())

        response = await handle_error(request, RuntimeError("secret detail"))

        assert json.loads(response.body)["error"]["message"] == REDACTED_MESSAGE

    @pytest.mark.asyncio
    async def test_http_exception_headers_are_kept(self, settings: Settings) -> None:
        """Test that headers such as WWW-Authenticate survive."""
        exc = HTTPException(401, "Not authenticated", headers={"WWW-Authenticate": "Basic"})

        response = await handle_error(create_mock_request(settings=settings), exc)

        assert response.headers["www-authenticate"] == "Basic"


class TestWrapHandler:
    """Test the per-route error funnel."""

    @pytest.mark.asyncio
    async def test_synchronous_raise(self, settings: Settings) -> None:
        """Test that a handler raising before returning an awaitable is caught."""

        def handler(request: Request) -> Response:
            raise ApiError.bad_request("Location is required")

        response = await wrap_handler(handler)(create_mock_request(settings=settings))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_asynchronous_raise(self, settings: Settings) -> None:
        """Test that a failing coroutine is caught."""

        async def handler(request: Request) -> Response:
            raise RuntimeError("boom")

        response = await wrap_handler(handler)(create_mock_request(settings=settings))

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_wrapped_failure_matches_direct_handling(self, settings: Settings) -> None:
        """Test that a rejected coroutine renders exactly like a direct handle_error."""
        error = ApiError("X", 404)

        async def handler(request: Request) -> Response:
            raise error

        direct = await handle_error(create_mock_request(settings=settings), error)
        wrapped = await wrap_handler(handler)(create_mock_request(settings=settings))

        assert wrapped.status_code == direct.status_code == 404
        assert wrapped.body == direct.body
        assert wrapped.body == b'{"error":{"message":"X","code":"ERROR_404"}}'

    @pytest.mark.asyncio
    async def test_success_passes_through(self, settings: Settings) -> None:
        """Test that successful responses are untouched."""
        ok = JSONResponse({"ok": True})

        async def handler(request: Request) -> Response:
            return ok

        assert await wrap_handler(handler)(create_mock_request(settings=settings)) is ok


class TestErrorFunnelRoute:
    """Test the pipeline end to end on a small application."""

    @pytest.fixture
    def client(self, settings: Settings) -> TestClient:
        app = FastAPI()
        app.state.settings = settings
        router = APIRouter(route_class=ErrorFunnelRoute)

        @router.get("/api-error")
        async def api_error() -> None:
            raise ApiError.forbidden()

        @router.get("/crash")
        def crash() -> None:
            raise RuntimeError("sync crash")

        @router.post("/garments")
        async def create_garment(garment: Garment) -> Garment:
            return garment

        @router.get("/http")
        async def http_error() -> None:
            raise HTTPException(status_code=409, detail="Already planned")

        app.include_router(router)
        register_error_handlers(app)
        return TestClient(app, raise_server_exceptions=False)

    def test_api_error(self, client: TestClient) -> None:
        response = client.get("/api-error")

        assert response.status_code == 403
        assert response.json() == {"error": {"message": "Forbidden", "code": "ERROR_403"}}

    def test_sync_handler_crash(self, client: TestClient) -> None:
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json()["error"] == {
            "message": "sync crash",
            "code": "INTERNAL_SERVER_ERROR",
        }

    def test_body_validation(self, client: TestClient) -> None:
        response = client.post("/garments", json={"name": "Skirt"})

        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["body"]["size"]["_errors"]

    def test_http_exception(self, client: TestClient) -> None:
        response = client.get("/http")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_unknown_route(self, client: TestClient) -> None:
        """Test that routing failures outside any route use the envelope."""
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {"error": {"message": "Not Found", "code": "NOT_FOUND"}}
