"""Shared test fixtures."""

from tests.fixtures.supabase import (
    create_mock_supabase_client,
    setup_execute_response,
)

__all__ = [
    "create_mock_supabase_client",
    "setup_execute_response",
]
