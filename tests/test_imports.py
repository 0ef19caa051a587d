"""Verify all modules can be imported without errors."""


def test_core_imports():
    """Import core modules to catch bad import paths."""
    import application.models
    import application.use_cases.dispatch_operation
    import backend.services.rate_limiter
    import backend.services.prompts
    import backend.services.ai_client
    import backend.services.checkout_service
    import infrastructure.db.async_user_repository
    import infrastructure.db.async_operation_history_repository


def test_api_imports():
    """Import router and dependency modules."""
    import api.deps
    import api.routers


def test_client_imports():
    """Import the caller-side client modules."""
    import backend.client.operation_client
    import backend.client.presenter
    import backend.client.user_store


def test_app_starts():
    """Verify FastAPI app can be instantiated."""
    from backend.main import app
    assert app is not None
    assert hasattr(app, 'routes')
