"""Caller-side orchestration of AI operation requests.

OperationClient wraps one logical operation call in a bounded retry loop:
each attempt is a single POST with its own timeout, transient failures are
retried with linear backoff, and every failure surfaces as a ClientError with
a message fit for end users. Raw httpx exceptions never escape.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from application.models.errors import ErrorKind
from application.models.operations import FREE_TRIAL_LIMIT_MESSAGE, OperationKind
from backend.client.presenter import LoggingPresenter, ResultPresenter
from backend.client.user_store import MemoryUserIdStore, UserIdStore
from backend.observability import OperationMetrics

logger = logging.getLogger(__name__)

DISPATCH_PATH = "/.netlify/functions/ai-operations"

TIMEOUT_MESSAGE = "The request to our AI service timed out. Please try again."
NETWORK_MESSAGE = (
    "Network error while connecting to our AI service. "
    "Please check your internet connection."
)
UNAVAILABLE_MESSAGE = (
    "Our AI service is currently unavailable. This might be due to high traffic "
    "or maintenance. Please try again in a few minutes."
)
CONFIGURATION_MESSAGE = "StartupStack is not configured properly. Please contact support."
MISSING_RESULT_MESSAGE = "Unexpected API response format: missing result data"


class CallState(str, Enum):
    idle = "idle"
    attempting = "attempting"
    retry_scheduled = "retry_scheduled"
    succeeded = "succeeded"
    failed = "failed"


@dataclass
class CallStatus:
    """Progress of a single invoke() call.

    Pass one to invoke() to observe that call; concurrent calls each get
    their own.
    """

    operation: str = ""
    state: CallState = CallState.idle
    attempt: int = 0

    def advance(self, state: CallState, attempt: int) -> None:
        self.state = state
        self.attempt = attempt
        logger.debug(
            "Operation %s call state=%s attempt=%d", self.operation, state.value, attempt
        )


class ClientError(Exception):
    """A normalized operation failure.

    Attributes:
        kind: Classified failure kind.
        message: User-facing message.
        status_code: HTTP status of the last response, if one arrived.
    """

    def __init__(self, kind: ErrorKind, message: str, status_code: Optional[int] = None):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


def _classify_status(status_code: int) -> ErrorKind:
    if status_code == 408:
        return ErrorKind.timeout
    if status_code in (502, 503, 504):
        return ErrorKind.network_unavailable
    if status_code >= 500:
        return ErrorKind.backend_error
    return ErrorKind.validation_error


def _user_message(kind: ErrorKind, server_message: str) -> str:
    """Message for a failure reported by the server.

    A server-side NETWORK_UNAVAILABLE means the dispatcher could not reach its
    backend, so it never reads as a problem with the caller's connection.
    """
    if kind is ErrorKind.timeout:
        return TIMEOUT_MESSAGE
    if kind is ErrorKind.network_unavailable:
        return UNAVAILABLE_MESSAGE
    if kind is ErrorKind.free_trial_limit:
        return server_message or FREE_TRIAL_LIMIT_MESSAGE
    if kind is ErrorKind.configuration_error:
        return CONFIGURATION_MESSAGE
    return f"AI Operation failed: {server_message}"


class OperationClient:
    """Invokes AI operations against the dispatch endpoint."""

    def __init__(
        self,
        base_url: str,
        user_store: Optional[UserIdStore] = None,
        presenter: Optional[ResultPresenter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        attempt_timeout: float = 12.0,
        max_attempts: int = 2,
        backoff_base: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._url = base_url.rstrip("/") + DISPATCH_PATH
        self._user_store = user_store or MemoryUserIdStore()
        self._presenter = presenter or LoggingPresenter()
        # The attempt budget is enforced by wait_for, so the owned client gets
        # the same ceiling instead of httpx's 5 s default.
        self._http = http_client or httpx.AsyncClient(timeout=attempt_timeout)
        self._owns_http = http_client is None
        self._attempt_timeout = attempt_timeout
        self._max_attempts = max(1, max_attempts)
        self._backoff_base = backoff_base
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "OperationClient":
        """Build a client from the `client_*` settings."""
        return cls(
            base_url=settings.client_base_url,
            attempt_timeout=settings.client_attempt_timeout_seconds,
            max_attempts=settings.client_max_attempts,
            backoff_base=settings.client_backoff_base_seconds,
            **kwargs,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "OperationClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def invoke(
        self,
        operation: str,
        params: Dict[str, Any],
        status: Optional[CallStatus] = None,
    ) -> str:
        """Run one operation, retrying transient failures.

        Args:
            operation: Operation kind wire name.
            params: Operation parameters.
            status: Optional tracker updated as this call moves through its states.

        Returns:
            The generated text.

        Raises:
            ClientError: With a normalized user-facing message.
        """
        payload = {
            "operation": operation,
            "params": params,
            "userId": self._user_store.get(),
        }
        if status is None:
            status = CallStatus()
        status.operation = operation

        for attempt in range(1, self._max_attempts + 1):
            status.advance(CallState.attempting, attempt)
            try:
                result = await self._attempt_once(payload)
            except ClientError as e:
                if not e.retryable or attempt >= self._max_attempts:
                    status.advance(CallState.failed, attempt)
                    logger.warning(
                        "Operation %s failed after %d attempt(s): %s",
                        operation,
                        attempt,
                        e.kind.value,
                    )
                    raise
                status.advance(CallState.retry_scheduled, attempt + 1)
                OperationMetrics.client_retries_total().add(1, {"error_kind": e.kind.value})
                logger.info(
                    "Retrying operation %s after %s (attempt %d)",
                    operation,
                    e.kind.value,
                    attempt,
                )
                await self._sleep(attempt * self._backoff_base)
                continue

            status.advance(CallState.succeeded, attempt)
            self._presenter.present(operation, result, params)
            return result

        # Unreachable: the loop either returns or raises
        raise ClientError(ErrorKind.backend_error, "AI Operation failed: no attempts made")

    async def _attempt_once(self, payload: Dict[str, Any]) -> str:
        try:
            response = await asyncio.wait_for(
                self._http.post(self._url, json=payload),
                timeout=self._attempt_timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise ClientError(ErrorKind.timeout, TIMEOUT_MESSAGE)
        except httpx.RequestError:
            raise ClientError(ErrorKind.network_unavailable, NETWORK_MESSAGE)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status = response.status_code
        if data.get("error") or data.get("isLimit") or status >= 400:
            raise self._error_from_response(status, data)

        result = data.get("result")
        if not result:
            raise ClientError(
                ErrorKind.malformed_response,
                f"AI Operation failed: {MISSING_RESULT_MESSAGE}",
                status,
            )
        return result

    @staticmethod
    def _error_from_response(status: int, data: Dict[str, Any]) -> ClientError:
        kind = ErrorKind.parse(data.get("errorType"))
        if data.get("isLimit"):
            kind = ErrorKind.free_trial_limit
        if kind is None:
            kind = _classify_status(status)
        server_message = data.get("error") or f"HTTP error! status: {status}"
        return ClientError(kind, _user_message(kind, server_message), status)

    # --- Typed helpers ---

    async def _invoke_checked(
        self,
        kind: OperationKind,
        required: Dict[str, Any],
        message: str,
        extra: Dict[str, Any],
    ) -> str:
        if not all(required.values()):
            raise ClientError(ErrorKind.validation_error, message)
        return await self.invoke(kind.value, {**required, **extra})

    async def generate_business_names(self, industry: str, keywords: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_business_names,
            {"industry": industry, "keywords": keywords},
            "Both industry and keywords are required for business name generation",
            extra,
        )

    async def generate_logo(self, style: str, industry: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_logo,
            {"style": style, "industry": industry},
            "Both style and industry are required for logo generation",
            extra,
        )

    async def generate_pitch_deck(self, type: str, industry: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_pitch_deck,
            {"type": type, "industry": industry},
            "Both type and industry are required for pitch deck generation",
            extra,
        )

    async def analyze_market(self, industry: str, region: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.analyze_market,
            {"industry": industry, "region": region},
            "Both industry and region are required for market analysis",
            extra,
        )

    async def generate_content_calendar(self, business: str, audience: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_content_calendar,
            {"business": business, "audience": audience},
            "Both business and audience are required for content calendar generation",
            extra,
        )

    async def generate_email_templates(
        self, business: str, sequence: str, purpose: str = "general", **extra
    ) -> str:
        if not purpose:
            raise ClientError(
                ErrorKind.validation_error,
                "Purpose is required for email template generation",
            )
        return await self._invoke_checked(
            OperationKind.generate_email_templates,
            {"business": business, "sequence": sequence},
            "Both business and sequence are required for email template generation",
            {"purpose": purpose, **extra},
        )

    async def generate_legal_docs(self, business: str, doc_type: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_legal_docs,
            {"business": business, "docType": doc_type},
            "Both business and docType are required for legal document generation",
            extra,
        )

    async def generate_financials(self, business: str, timeframe: str, **extra) -> str:
        return await self._invoke_checked(
            OperationKind.generate_financials,
            {"business": business, "timeframe": timeframe},
            "Both business and timeframe are required for financial projections",
            extra,
        )
