"""Port interface for user records."""

from typing import Any, Dict, Optional, Protocol


class UserRepository(Protocol):
    """Repository protocol for users and their subscription status."""

    async def get_subscription_status(self, user_id: str) -> Optional[str]:
        """Return the user's subscription_status, or None if the user does not exist."""
        ...

    async def get_or_create_by_email(self, email: str) -> Dict[str, Any]:
        """Return the user with this email, creating a `pending` user if absent."""
        ...

    async def find_by_id_and_email(self, user_id: str, email: str) -> Optional[Dict[str, Any]]:
        """Return the user matching both id and email, or None."""
        ...

    async def update(self, user_id: str, fields: Dict[str, Any]) -> None:
        """Update columns on a user row. Raises on database errors."""
        ...
