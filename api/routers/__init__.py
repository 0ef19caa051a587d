"""
Router package for the StartupStack AI Operations API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- operations: AI operation dispatch
- users: Signup
- checkout: LemonSqueezy hosted checkout
"""

from api.routers.health import router as health_router
from api.routers.operations import router as operations_router
from api.routers.users import router as users_router
from api.routers.checkout import router as checkout_router

__all__ = [
    "health_router",
    "operations_router",
    "users_router",
    "checkout_router",
]
