"""Use case: Dispatch one AI operation.

Orchestrates: validation -> prompt building -> free-trial quota check ->
generation -> detached persistence of the operation record.

Quota lookups fail open: if the user or history tables cannot be read, the
operation proceeds. The check and the later insert are not atomic, so two
concurrent first-of-day requests from one user can both pass.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Set, TYPE_CHECKING

from application.models.errors import (
    ConfigurationError,
    FreeTrialLimitReached,
    MissingParameters,
    OperationError,
    UnsupportedOperation,
    ValidationError,
)
from application.models.operations import (
    FREE_TRIAL_STATUS,
    GENERATION_SETTINGS,
    OperationKind,
    OperationRecord,
    missing_params,
)
from backend.observability import OperationMetrics, get_tracer
from backend.services import rate_limiter
from backend.services.prompts import build_prompts

if TYPE_CHECKING:
    from application.ports.operation_history_repository import OperationHistoryRepository
    from application.ports.user_repository import UserRepository
    from backend.services.ai_client import AsyncAIClient

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispatchOperationUseCase:
    """Server-side dispatcher for the eight AI operations."""

    def __init__(
        self,
        ai_client: Optional["AsyncAIClient"],
        user_repo: Optional["UserRepository"] = None,
        history_repo: Optional["OperationHistoryRepository"] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ai_client = ai_client
        self._user_repo = user_repo
        self._history_repo = history_repo
        self._clock = clock
        self._pending: Set["asyncio.Task[None]"] = set()

    @property
    def pending_persistence(self) -> int:
        """Number of record inserts that have not settled yet."""
        return len(self._pending)

    async def execute(
        self,
        operation: Optional[str],
        params: Optional[Dict[str, Any]],
        user_id: Optional[str] = None,
    ) -> str:
        """Run an operation and return the generated text.

        Args:
            operation: Wire name of the operation kind.
            params: Operation parameters.
            user_id: Caller's user ID; None for anonymous (unmetered) use.

        Returns:
            The generated text, verbatim.

        Raises:
            OperationError: A classified failure; see application.models.errors.
        """
        params = dict(params or {})
        with get_tracer().start_as_current_span("operation.dispatch") as span:
            span.set_attribute("operation.name", operation or "")
            span.set_attribute("user.anonymous", not user_id)
            try:
                result = await self._execute(operation, params, user_id)
            except OperationError as e:
                span.set_attribute("operation.error_kind", e.kind.value)
                OperationMetrics.operation_requests_total().add(
                    1, {"operation": operation or "", "outcome": e.kind.value}
                )
                raise
            OperationMetrics.operation_requests_total().add(
                1, {"operation": operation or "", "outcome": "success"}
            )
            return result

    async def _execute(
        self, operation: Optional[str], params: Dict[str, Any], user_id: Optional[str]
    ) -> str:
        if not operation:
            raise ValidationError("Operation type is required")

        kind = OperationKind.parse(operation)
        if kind is None:
            raise UnsupportedOperation(operation)

        missing = missing_params(kind, params)
        if missing:
            raise MissingParameters(kind.value, missing)

        system_prompt, user_prompt = build_prompts(kind, params)

        if self._ai_client is None:
            logger.error("Generation backend is not configured")
            raise ConfigurationError()

        if user_id:
            await self._enforce_quota(kind, user_id)

        settings = GENERATION_SETTINGS[kind]
        result = await self._ai_client.generate(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

        if user_id:
            self._schedule_persist(
                OperationRecord(
                    user_id=user_id,
                    operation_type=kind,
                    input_params=params,
                    output_result=result,
                    created_at=self._clock(),
                )
            )
        return result

    async def _enforce_quota(self, kind: OperationKind, user_id: str) -> None:
        """Raise FreeTrialLimitReached when the user is over today's quota.

        Any lookup failure allows the operation.
        """
        if self._user_repo is None or self._history_repo is None:
            logger.debug("Quota stores not configured; skipping quota check")
            return

        try:
            status = await self._user_repo.get_subscription_status(user_id)
            if status is None:
                return
            count = 0
            if status == FREE_TRIAL_STATUS:
                start, end = rate_limiter.usage_window(self._clock())
                count = await self._history_repo.count_in_window(
                    user_id, kind.value, start, end
                )
        except Exception as e:
            logger.warning(
                "Quota lookup failed for user %s (%s); allowing operation: %s",
                user_id,
                kind.value,
                e,
            )
            return

        decision = rate_limiter.evaluate(status, count)
        if not decision.allowed:
            OperationMetrics.quota_denials_total().add(1, {"operation": kind.value})
            raise FreeTrialLimitReached(decision.message)

    def _schedule_persist(self, record: OperationRecord) -> None:
        """Fire-and-forget: store the operation record without blocking the caller."""
        if self._history_repo is None:
            return
        task = asyncio.create_task(self._persist(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, record: OperationRecord) -> None:
        try:
            await self._history_repo.insert(record)
        except Exception as e:
            logger.warning(
                "Failed to store operation history for user %s (%s): %s",
                record.user_id,
                record.operation_type.value,
                e,
            )

    async def drain(self) -> None:
        """Wait for outstanding record inserts to settle."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
