"""
FastAPI Dependency Providers for the StartupStack AI Operations API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings, the OpenAI client and the outbound httpx client are cached per-process
- The async Supabase client is a lock-guarded singleton
- Repositories are instantiated per-request with the shared Supabase client
- The dispatcher is a process-wide singleton so it owns its detached persistence tasks
"""

import asyncio
from functools import lru_cache
from typing import Optional

import httpx
from fastapi import Depends
from supabase import AsyncClient, create_async_client

from backend.settings import Settings, get_settings as _get_settings
from backend.ai.client_factory import AIClientFactory
from backend.services.ai_client import AsyncAIClient
from backend.services.checkout_service import CheckoutService

# Repositories (async)
from infrastructure.db.async_user_repository import AsyncSupabaseUserRepository
from infrastructure.db.async_operation_history_repository import (
    AsyncSupabaseOperationHistoryRepository,
)

# Use cases
from application.use_cases.dispatch_operation import DispatchOperationUseCase


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Async Supabase Client Provider
# =============================================================================

# Async singleton state (lru_cache doesn't work with async functions)
_async_supabase_client: Optional[AsyncClient] = None
_async_supabase_lock = asyncio.Lock()


async def get_supabase_async_client() -> Optional[AsyncClient]:
    """
    Get async Supabase client instance (singleton).

    Returns None if credentials are not configured. Uses asyncio.Lock so only
    one client is created under concurrent access.

    Returns:
        AsyncClient: Async Supabase client instance, or None if not configured
    """
    global _async_supabase_client

    if _async_supabase_client is not None:
        return _async_supabase_client

    async with _async_supabase_lock:
        # Another coroutine may have initialized while we waited
        if _async_supabase_client is not None:
            return _async_supabase_client

        settings = _get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            return None

        _async_supabase_client = await create_async_client(
            settings.supabase_url, settings.supabase_key
        )
        return _async_supabase_client


async def get_supabase_async_client_required() -> AsyncClient:
    """
    Get async Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    from fastapi import HTTPException

    client = await get_supabase_async_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


async def get_user_repository(
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
) -> Optional[AsyncSupabaseUserRepository]:
    """Get user repository, or None when Supabase is not configured."""
    if client is None:
        return None
    return AsyncSupabaseUserRepository(client)


async def get_user_repository_required(
    client: AsyncClient = Depends(get_supabase_async_client_required),
) -> AsyncSupabaseUserRepository:
    """Get user repository, 503 when Supabase is not configured."""
    return AsyncSupabaseUserRepository(client)


async def get_operation_history_repository(
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
) -> Optional[AsyncSupabaseOperationHistoryRepository]:
    """Get operation history repository, or None when Supabase is not configured."""
    if client is None:
        return None
    return AsyncSupabaseOperationHistoryRepository(client)


# =============================================================================
# Service Providers
# =============================================================================


@lru_cache
def get_ai_client() -> Optional[AsyncAIClient]:
    """Get cached generation client; None when OPENAI_API_KEY is not set."""
    return AIClientFactory.create_ai_client(_get_settings())


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Get cached outbound HTTP client for third-party REST APIs."""
    return httpx.AsyncClient(timeout=httpx.Timeout(30.0, connect=10.0))


_dispatch_use_case: Optional[DispatchOperationUseCase] = None


async def get_dispatch_operation_use_case(
    user_repo: Optional[AsyncSupabaseUserRepository] = Depends(get_user_repository),
    history_repo: Optional[AsyncSupabaseOperationHistoryRepository] = Depends(
        get_operation_history_repository
    ),
) -> DispatchOperationUseCase:
    """
    Get the process-wide operation dispatcher.

    Built once from the first request's collaborators; the same instance
    tracks every detached persistence task so shutdown can drain them.
    """
    global _dispatch_use_case

    if _dispatch_use_case is None:
        _dispatch_use_case = DispatchOperationUseCase(
            ai_client=get_ai_client(),
            user_repo=user_repo,
            history_repo=history_repo,
        )
    return _dispatch_use_case


def get_active_dispatch_use_case() -> Optional[DispatchOperationUseCase]:
    """Dispatcher instance if one has been built (used at shutdown)."""
    return _dispatch_use_case


async def get_checkout_service(
    user_repo: Optional[AsyncSupabaseUserRepository] = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> Optional[CheckoutService]:
    """Get checkout service, or None when LemonSqueezy or Supabase is unconfigured."""
    if user_repo is None or not settings.checkout_configured:
        return None
    return CheckoutService(
        user_repo=user_repo,
        http_client=get_http_client(),
        api_key=settings.lemonsqueezy_api_key,
        store_id=settings.lemonsqueezy_store_id,
        api_url=settings.lemonsqueezy_api_url,
    )
