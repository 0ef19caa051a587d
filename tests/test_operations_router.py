"""Integration tests for the operations router: wire format of results and errors."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.deps import get_dispatch_operation_use_case
from application.models.errors import (
    BackendFault,
    ConfigurationError,
    FreeTrialLimitReached,
    GenerationTimeout,
    MalformedResponse,
    NetworkUnavailable,
)
from application.models.operations import FREE_TRIAL_LIMIT_MESSAGE, SUPPORTED_OPERATIONS
from application.use_cases.dispatch_operation import DispatchOperationUseCase
from backend.main import create_app


DISPATCH_PATH = "/.netlify/functions/ai-operations"
BUSINESS_NAMES = {
    "operation": "generateBusinessNames",
    "params": {"industry": "Technology", "keywords": "innovation, AI"},
    "userId": "u1",
}


@pytest.fixture
def ai_client():
    client = MagicMock()
    client.generate = AsyncMock(return_value="1. NovaMind")
    return client


@pytest.fixture
def use_case(ai_client):
    # No stores: quota is skipped and nothing is persisted
    return DispatchOperationUseCase(ai_client=ai_client)


@pytest.fixture
def ops_app(test_settings):
    return create_app(settings=test_settings)


@pytest.fixture
def client(ops_app, use_case):
    ops_app.dependency_overrides[get_dispatch_operation_use_case] = lambda: use_case
    yield TestClient(ops_app)
    ops_app.dependency_overrides.clear()


def _failing_client(ops_app, error):
    failing = MagicMock(spec=DispatchOperationUseCase)
    failing.execute = AsyncMock(side_effect=error)
    ops_app.dependency_overrides[get_dispatch_operation_use_case] = lambda: failing
    return TestClient(ops_app)


class TestSuccess:
    def test_returns_result(self, client, ai_client):
        response = client.post(DISPATCH_PATH, json=BUSINESS_NAMES)

        assert response.status_code == 200
        assert response.json() == {"result": "1. NovaMind"}
        ai_client.generate.assert_awaited_once()

    def test_alias_path(self, client):
        response = client.post("/ai-operations", json=BUSINESS_NAMES)
        assert response.status_code == 200
        assert response.json()["result"] == "1. NovaMind"

    def test_get_not_allowed(self, client):
        response = client.get(DISPATCH_PATH)
        assert response.status_code == 405


class TestValidationErrors:
    def test_invalid_json(self, client):
        response = client.post(
            DISPATCH_PATH,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON in request body"

    def test_missing_params(self, client, ai_client):
        response = client.post(
            DISPATCH_PATH,
            json={"operation": "analyzeMarket", "params": {"industry": "Fintech"}},
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required parameters: region for operation analyzeMarket",
            "errorType": "VALIDATION_ERROR",
        }
        ai_client.generate.assert_not_called()

    def test_missing_operation(self, client):
        response = client.post(DISPATCH_PATH, json={"params": {}})
        assert response.status_code == 400
        assert response.json()["error"] == "Operation type is required"

    def test_params_must_be_object(self, client):
        response = client.post(DISPATCH_PATH, json={"operation": "analyzeMarket", "params": [1]})
        assert response.status_code == 400
        assert response.json()["errorType"] == "VALIDATION_ERROR"

    def test_body_must_be_object(self, client):
        response = client.post(DISPATCH_PATH, json=["generateLogo"])
        assert response.status_code == 400
        assert response.json()["errorType"] == "VALIDATION_ERROR"

    def test_unsupported_operation(self, client, ai_client):
        response = client.post(DISPATCH_PATH, json={"operation": "writePoem", "params": {}})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Operation not supported: writePoem"
        assert data["errorType"] == "UNSUPPORTED_OPERATION"
        assert data["supportedOperations"] == SUPPORTED_OPERATIONS
        ai_client.generate.assert_not_called()


class TestClassifiedFailures:
    def test_quota_denial_is_200_with_limit_flag(self, ops_app):
        client = _failing_client(ops_app, FreeTrialLimitReached())

        response = client.post(DISPATCH_PATH, json=BUSINESS_NAMES)

        assert response.status_code == 200
        assert response.json() == {
            "error": FREE_TRIAL_LIMIT_MESSAGE,
            "errorType": "FREE_TRIAL_LIMIT",
            "isLimit": True,
        }

    @pytest.mark.parametrize(
        "error, status, body",
        [
            (
                GenerationTimeout(),
                408,
                {
                    "error": "Request to AI service timed out. Please try again.",
                    "errorType": "TIMEOUT",
                },
            ),
            (
                NetworkUnavailable(),
                503,
                {
                    "error": "Network error connecting to AI service. Please check your connection.",
                    "errorType": "NETWORK_UNAVAILABLE",
                },
            ),
            (
                BackendFault("Rate limit reached for requests"),
                500,
                {
                    "error": "AI service error: Rate limit reached for requests",
                    "errorType": "BACKEND_ERROR",
                },
            ),
            (
                MalformedResponse(),
                500,
                {"error": "No response from AI service", "errorType": "MALFORMED_RESPONSE"},
            ),
            (
                ConfigurationError(),
                500,
                {"error": "Server configuration error", "errorType": "CONFIGURATION_ERROR"},
            ),
        ],
    )
    def test_error_mapping(self, ops_app, error, status, body):
        client = _failing_client(ops_app, error)

        response = client.post(DISPATCH_PATH, json=BUSINESS_NAMES)

        assert response.status_code == status
        assert response.json() == body

    def test_unexpected_exception_is_backend_error(self, ops_app):
        client = _failing_client(ops_app, RuntimeError("boom"))

        response = client.post(DISPATCH_PATH, json=BUSINESS_NAMES)

        assert response.status_code == 500
        assert response.json()["errorType"] == "BACKEND_ERROR"
        assert "boom" not in response.json()["error"]

    def test_unconfigured_backend(self, ops_app):
        ops_app.dependency_overrides[get_dispatch_operation_use_case] = (
            lambda: DispatchOperationUseCase(ai_client=None)
        )
        client = TestClient(ops_app)

        response = client.post(DISPATCH_PATH, json=BUSINESS_NAMES)

        assert response.status_code == 500
        assert response.json()["error"] == "Server configuration error"
