"""Async Supabase implementation of OperationHistoryRepository."""

from datetime import datetime

from supabase import AsyncClient

from application.models.operations import OperationRecord


class AsyncSupabaseOperationHistoryRepository:
    """Async Supabase-backed operation history.

    Each successful generation for a known user is one row in operation_history.
    Daily quota usage is the number of rows for (user_id, operation_type) whose
    created_at falls inside the UTC day window.
    """

    TABLE = "operation_history"

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def count_in_window(
        self,
        user_id: str,
        operation_type: str,
        start: datetime,
        end: datetime,
    ) -> int:
        result = await (
            self._client.table(self.TABLE)
            .select("id, operation_type, created_at")
            .eq("user_id", user_id)
            .eq("operation_type", operation_type)
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .execute()
        )
        return len(result.data or [])

    async def insert(self, record: OperationRecord) -> None:
        await self._client.table(self.TABLE).insert(record.to_row()).execute()
