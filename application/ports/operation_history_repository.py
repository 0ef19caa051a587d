"""Port interface for operation history (the quota store)."""

from datetime import datetime
from typing import Protocol

from application.models.operations import OperationRecord


class OperationHistoryRepository(Protocol):
    """Repository protocol for completed AI operations."""

    async def count_in_window(
        self,
        user_id: str,
        operation_type: str,
        start: datetime,
        end: datetime,
    ) -> int:
        """Count records for one (user, operation) pair with start <= created_at < end."""
        ...

    async def insert(self, record: OperationRecord) -> None:
        """Insert a completed operation. Raises on database errors."""
        ...
