"""Async Supabase implementation of UserRepository."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import AsyncClient


class AsyncSupabaseUserRepository:
    """Async Supabase-backed user repository over the users table."""

    TABLE = "users"

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_subscription_status(self, user_id: str) -> Optional[str]:
        result = await (
            self._client.table(self.TABLE)
            .select("subscription_status")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0].get("subscription_status")

    async def get_or_create_by_email(self, email: str) -> Dict[str, Any]:
        """Return the existing user for an email, or create one.

        New users start in the `pending` status until their trial or
        subscription is activated.
        """
        existing = await (
            self._client.table(self.TABLE)
            .select("*")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if existing.data:
            return existing.data[0]

        result = await (
            self._client.table(self.TABLE)
            .insert(
                {
                    "email": email,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                    "subscription_status": "pending",
                }
            )
            .execute()
        )
        return result.data[0]

    async def find_by_id_and_email(
        self, user_id: str, email: str
    ) -> Optional[Dict[str, Any]]:
        result = await (
            self._client.table(self.TABLE)
            .select("id, email, subscription_status")
            .eq("id", user_id)
            .eq("email", email)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    async def update(self, user_id: str, fields: Dict[str, Any]) -> None:
        await (
            self._client.table(self.TABLE)
            .update(fields)
            .eq("id", user_id)
            .execute()
        )
