"""Integration tests for the checkout and signup routers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.deps import get_checkout_service, get_user_repository_required
from backend.main import create_app
from backend.services.checkout_service import CheckoutError, CheckoutResult, CheckoutService


CHECKOUT_BODY = {
    "customerEmail": "founder@example.com",
    "userId": "user-1",
    "variantId": "877605",
}


@pytest.fixture
def app(test_settings):
    app = create_app(settings=test_settings)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def checkout_service():
    service = MagicMock(spec=CheckoutService)
    service.create_checkout = AsyncMock(
        return_value=CheckoutResult(
            checkout_id="chk_123",
            checkout_url="https://startupstack.lemonsqueezy.com/checkout/chk_123",
            plan_type="pro",
        )
    )
    return service


@pytest.fixture
def checkout_client(app, checkout_service):
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    return TestClient(app)


class TestCheckoutRouter:
    def test_creates_checkout(self, checkout_client, checkout_service):
        response = checkout_client.post("/checkout", json=CHECKOUT_BODY)

        assert response.status_code == 200
        assert response.json() == {
            "checkout_url": "https://startupstack.lemonsqueezy.com/checkout/chk_123",
            "checkout_id": "chk_123",
            "userId": "user-1",
            "success": True,
        }
        checkout_service.create_checkout.assert_awaited_once_with(
            customer_email="founder@example.com",
            user_id="user-1",
            variant_id="877605",
        )

    def test_numeric_variant_id(self, checkout_client, checkout_service):
        response = checkout_client.post("/checkout", json={**CHECKOUT_BODY, "variantId": 877610})

        assert response.status_code == 200
        assert checkout_service.create_checkout.call_args.kwargs["variant_id"] == "877610"

    def test_missing_fields(self, checkout_client, checkout_service):
        response = checkout_client.post("/checkout", json={"customerEmail": "a@b.co"})

        assert response.status_code == 400
        assert "Missing required fields" in response.json()["error"]
        checkout_service.create_checkout.assert_not_called()

    def test_not_configured(self, app):
        app.dependency_overrides[get_checkout_service] = lambda: None

        response = TestClient(app).post("/checkout", json=CHECKOUT_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error"}

    def test_user_not_found(self, checkout_client, checkout_service):
        checkout_service.create_checkout.side_effect = CheckoutError(
            404, "User not found - please try again in a moment"
        )

        response = checkout_client.post("/checkout", json=CHECKOUT_BODY)

        assert response.status_code == 404
        assert response.json()["error"] == "User not found - please try again in a moment"

    def test_provider_error_status_passed_through(self, checkout_client, checkout_service):
        checkout_service.create_checkout.side_effect = CheckoutError(
            422, "The variant is not published."
        )

        response = checkout_client.post("/checkout", json=CHECKOUT_BODY)

        assert response.status_code == 422
        assert response.json()["error"] == "The variant is not published."


class TestSignupRouter:
    @pytest.fixture
    def user_repo(self):
        repo = MagicMock()
        repo.get_or_create_by_email = AsyncMock(
            return_value={"id": "user-1", "email": "founder@example.com", "subscription_status": "pending"}
        )
        return repo

    @pytest.fixture
    def signup_client(self, app, user_repo):
        app.dependency_overrides[get_user_repository_required] = lambda: user_repo
        return TestClient(app)

    def test_signup_normalizes_email(self, signup_client, user_repo):
        response = signup_client.post("/users/signup", json={"email": "  Founder@Example.com "})

        assert response.status_code == 200
        assert response.json()["userId"] == "user-1"
        user_repo.get_or_create_by_email.assert_awaited_once_with("founder@example.com")

    @pytest.mark.parametrize("body", [{}, {"email": ""}, {"email": "not-an-email"}])
    def test_signup_rejects_invalid_email(self, signup_client, user_repo, body):
        response = signup_client.post("/users/signup", json=body)

        assert response.status_code == 400
        user_repo.get_or_create_by_email.assert_not_called()

    def test_signup_store_failure(self, signup_client, user_repo):
        user_repo.get_or_create_by_email.side_effect = RuntimeError("db down")

        response = signup_client.post("/users/signup", json={"email": "a@b.co"})

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to create user"}
