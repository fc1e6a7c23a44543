"""
Unit tests for HTTP error handling functionality.

Covers:
1. Request ID correlation - errors carry the request ID of the current request
2. Error types - status codes, error types and codes of each exception class
3. Exception handlers - the JSON envelope returned by a FastAPI app
"""

import re

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from services.common.http_errors import (
    APIException,
    AuthError,
    ErrorCode,
    NotFoundError,
    ServiceError,
    ValidationError,
    exception_to_response,
    register_exception_handlers,
    request_id_var,
)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class TestRequestIDCorrelation:
    """Test request ID correlation across exception handlers."""

    def setup_method(self):
        """Reset request_id_var before each test."""
        request_id_var.set("uninitialized")

    def test_request_id_from_context(self):
        request_id_var.set("test-request-123")

        response = exception_to_response(NotFoundError("Event", "evt-1"))

        assert response.request_id == "test-request-123"

    def test_request_id_generated_outside_request(self):
        """Outside a request a fresh UUID is used instead of "uninitialized"."""
        for exc in (
            HTTPException(status_code=422, detail="Validation failed"),
            ValueError("Something went wrong"),
            AuthError("Not authenticated"),
        ):
            response = exception_to_response(exc)

            assert response.request_id != "uninitialized"
            assert UUID_PATTERN.match(
                response.request_id
            ), f"Invalid UUID format: {response.request_id}"


class TestErrorTypes:
    def test_validation_error(self):
        exc = ValidationError("Invalid action", field="action", value="maybe")

        assert exc.status_code == 422
        response = exc.to_error_response()
        assert response.type == "validation_error"
        assert response.details == {
            "field": "action",
            "value": "maybe",
            "code": "VALIDATION_FAILED",
        }

    def test_not_found_error(self):
        exc = NotFoundError(resource="Event", identifier="evt-123")

        assert exc.status_code == 404
        assert exc.message == "Event evt-123 not found"
        assert NotFoundError("Invitation").message == "Invitation not found"

    def test_auth_error_defaults_to_401(self):
        exc = AuthError("Not authenticated")

        assert exc.status_code == 401
        assert exc.error_code == ErrorCode.AUTH_FAILED

    def test_auth_error_forbidden(self):
        exc = AuthError(
            "Only the organizer", code=ErrorCode.ACCESS_DENIED, status_code=403
        )

        assert exc.status_code == 403
        assert exc.to_error_response().details == {"code": "ACCESS_DENIED"}

    def test_service_error_status(self):
        assert ServiceError("Downstream failed").status_code == 502
        exc = ServiceError(
            "Failed to check event conflicts",
            code=ErrorCode.DATABASE_ERROR,
            status_code=500,
        )
        assert exc.status_code == 500
        assert exc.to_error_response().type == "service_error"

    def test_base_exception_without_details(self):
        response = APIException("Boom").to_error_response()

        assert response.type == "internal_error"
        assert response.details is None


class TestExceptionToResponse:
    def test_http_exception_string_detail(self):
        response = exception_to_response(
            HTTPException(status_code=404, detail="Resource not found")
        )

        assert response.type == "http_error"
        assert response.message == "Resource not found"

    def test_http_exception_dict_detail(self):
        response = exception_to_response(
            HTTPException(
                status_code=422, detail={"message": "Validation failed", "field": "date"}
            )
        )

        assert response.message == "Validation failed"
        assert response.details["field"] == "date"

    def test_generic_exception_hides_message(self):
        response = exception_to_response(RuntimeError("password=hunter2"))

        assert response.type == "internal_error"
        assert response.message == "Internal server error"
        assert response.details == {"error_type": "RuntimeError"}


class TestExceptionHandlers:
    def setup_method(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/missing")
        async def missing():
            raise NotFoundError("Event", "evt-1")

        @app.get("/forbidden")
        async def forbidden():
            raise HTTPException(status_code=403, detail="Nope")

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        self.client = TestClient(app, raise_server_exceptions=False)

    def test_api_exception_envelope(self):
        resp = self.client.get("/missing")

        assert resp.status_code == 404
        body = resp.json()
        assert set(body) == {"type", "message", "details", "timestamp", "request_id"}
        assert body["message"] == "Event evt-1 not found"
        assert body["details"]["code"] == "NOT_FOUND"

    def test_http_exception_envelope(self):
        resp = self.client.get("/forbidden")

        assert resp.status_code == 403
        assert resp.json()["type"] == "http_error"

    def test_unhandled_exception_is_500(self):
        resp = self.client.get("/boom")

        assert resp.status_code == 500
        assert resp.json()["message"] == "Internal server error"
        assert "kaboom" not in resp.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
