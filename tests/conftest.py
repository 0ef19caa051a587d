import pytest

from backend.settings import Settings


TEST_USER_ID = "test-user-123"


@pytest.fixture
def test_settings() -> Settings:
    """Fully configured settings that never read the environment file."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-service-key",
        openai_api_key="sk-test",
        lemonsqueezy_api_key="ls-test-key",
        lemonsqueezy_store_id="12345",
        _env_file=None,
    )
