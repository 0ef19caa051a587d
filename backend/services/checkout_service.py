"""LemonSqueezy hosted checkout for subscription upgrades.

Creates a checkout for a verified user and marks the user as
`pending_activation` until the provider's webhook confirms payment.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from application.ports.user_repository import UserRepository

logger = logging.getLogger(__name__)

# Variant IDs configured in the LemonSqueezy store
PLAN_TYPES_BY_VARIANT: Dict[str, str] = {
    "877610": "lifetime",
    "877609": "starter",
    "877605": "pro",
}
DEFAULT_PLAN_TYPE = "subscription"

USER_LOOKUP_ATTEMPTS = 3
USER_LOOKUP_DELAY_SECONDS = 0.5
STATUS_UPDATE_ATTEMPTS = 3
STATUS_UPDATE_DELAY_SECONDS = 1.0


def plan_type_for_variant(variant_id: Optional[str]) -> str:
    return PLAN_TYPES_BY_VARIANT.get(str(variant_id), DEFAULT_PLAN_TYPE)


@dataclass
class CheckoutResult:
    checkout_id: str
    checkout_url: str
    plan_type: str


class CheckoutError(Exception):
    """User-facing checkout failure with the HTTP status to return."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class CheckoutService:
    """Creates LemonSqueezy checkouts and tracks their status on the user."""

    def __init__(
        self,
        user_repo: "UserRepository",
        http_client: httpx.AsyncClient,
        api_key: str,
        store_id: str,
        api_url: str = "https://api.lemonsqueezy.com/v1",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._user_repo = user_repo
        self._http = http_client
        self._api_key = api_key
        self._store_id = store_id
        self._api_url = api_url.rstrip("/")
        self._sleep = sleep

    async def create_checkout(
        self, customer_email: str, user_id: str, variant_id: str
    ) -> CheckoutResult:
        """Create a hosted checkout for a user.

        Raises:
            CheckoutError: User not found, or the provider rejected the request.
        """
        await self._verify_user(user_id, customer_email)

        plan_type = plan_type_for_variant(variant_id)
        logger.info("Creating checkout for user %s (variant=%s)", user_id, variant_id)
        checkout = await self._post_checkout(customer_email, user_id, variant_id)

        checkout_id = str(checkout["id"])
        checkout_url = checkout["attributes"]["url"]

        await self._mark_pending_activation(user_id, checkout_id, plan_type)
        return CheckoutResult(
            checkout_id=checkout_id, checkout_url=checkout_url, plan_type=plan_type
        )

    async def _verify_user(self, user_id: str, email: str) -> Dict[str, Any]:
        # A user who just signed up may not be visible yet, so look a few times.
        for attempt in range(1, USER_LOOKUP_ATTEMPTS + 1):
            try:
                user = await self._user_repo.find_by_id_and_email(user_id, email)
            except Exception as e:
                logger.warning("User lookup failed on attempt %d: %s", attempt, e)
                user = None
            if user:
                logger.debug("User found on attempt %d", attempt)
                return user
            if attempt < USER_LOOKUP_ATTEMPTS:
                await self._sleep(attempt * USER_LOOKUP_DELAY_SECONDS)

        logger.error("User %s not found after %d attempts", user_id, USER_LOOKUP_ATTEMPTS)
        raise CheckoutError(404, "User not found - please try again in a moment")

    async def _post_checkout(
        self, email: str, user_id: str, variant_id: str
    ) -> Dict[str, Any]:
        payload = {
            "data": {
                "type": "checkouts",
                "attributes": {
                    "checkout_data": {
                        "email": email,
                        "custom": {"user_id": user_id},
                    }
                },
                "relationships": {
                    "store": {"data": {"type": "stores", "id": self._store_id}},
                    "variant": {"data": {"type": "variants", "id": variant_id}},
                },
            }
        }
        headers = {
            "Accept": "application/vnd.api+json",
            "Content-Type": "application/vnd.api+json",
            "Authorization": f"Bearer {self._api_key}",
        }

        try:
            response = await self._http.post(
                f"{self._api_url}/checkouts", json=payload, headers=headers
            )
            response.raise_for_status()
            return response.json()["data"]
        except httpx.HTTPStatusError as e:
            detail = _provider_error_detail(e.response)
            logger.error(
                "LemonSqueezy checkout failed (%s): %s", e.response.status_code, detail
            )
            raise CheckoutError(e.response.status_code, detail)
        except httpx.RequestError as e:
            logger.error("Unable to reach LemonSqueezy: %s", e)
            raise CheckoutError(502, "Unable to connect to the checkout provider.")

    async def _mark_pending_activation(
        self, user_id: str, checkout_id: str, plan_type: str
    ) -> None:
        fields = {
            "subscription_status": "pending_activation",
            "lemonsqueezy_checkout_id": checkout_id,
            "plan_type": plan_type,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        for attempt in range(1, STATUS_UPDATE_ATTEMPTS + 1):
            try:
                await self._user_repo.update(user_id, fields)
                return
            except Exception as e:
                logger.warning(
                    "Updating user %s status failed on attempt %d: %s", user_id, attempt, e
                )
                if attempt < STATUS_UPDATE_ATTEMPTS:
                    await self._sleep(attempt * STATUS_UPDATE_DELAY_SECONDS)

        # The checkout already exists; the webhook can still activate the user.
        logger.error("Giving up updating user %s status after retries", user_id)


def _provider_error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Checkout provider error ({response.status_code})"
    errors = body.get("errors") or []
    if errors and errors[0].get("detail"):
        return errors[0]["detail"]
    return body.get("message") or f"Checkout provider error ({response.status_code})"
