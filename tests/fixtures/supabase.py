"""Mock Supabase async client for repository and router tests."""

from unittest.mock import AsyncMock, MagicMock


def create_mock_supabase_client():
    """Create a mock Supabase async client.

    In the Supabase async client:
    - table(name) is SYNC and returns a query builder
    - All chain methods (insert, select, eq, etc.) are SYNC and return self
    - Only execute() is ASYNC

    Tests configure return values on the query builder's execute() method.
    """
    client = MagicMock()

    query_builder = MagicMock()
    for method in [
        "insert",
        "select",
        "update",
        "delete",
        "upsert",
        "eq",
        "neq",
        "gt",
        "gte",
        "lt",
        "lte",
        "limit",
        "order",
        "range",
        "single",
    ]:
        getattr(query_builder, method).return_value = query_builder
    query_builder.execute = AsyncMock(return_value=MagicMock(data=[]))

    client.table.return_value = query_builder
    return client


def setup_execute_response(mock_client, data):
    """Configure the query builder's execute() to return data.

    Args:
        mock_client: Mock client from create_mock_supabase_client()
        data: Data to return from execute().data
    """
    mock_client.table.return_value.execute.return_value = MagicMock(data=data)
