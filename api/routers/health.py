"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from supabase import AsyncClient

from api.deps import get_settings, get_supabase_async_client
from backend.settings import Settings

logger = logging.getLogger(__name__)

SERVICE_NAME = "ai-operations"

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
async def health_ready(
    settings: Settings = Depends(get_settings),
    client: Optional[AsyncClient] = Depends(get_supabase_async_client),
):
    """
    Readiness probe that checks downstream dependencies.

    Verifies Supabase connectivity and reports whether the generation backend
    is configured. Returns 503 if Supabase is unavailable.
    """
    checks = {
        "openai": "ok" if settings.openai_api_key else "not_configured",
    }

    try:
        if client is not None:
            # Lightweight query to verify connectivity
            await client.table("users").select("id").limit(1).execute()
            checks["supabase"] = "ok"
        else:
            checks["supabase"] = "not_configured"
    except Exception as e:
        logger.warning("Readiness check failed for supabase: %s", e)
        checks["supabase"] = "unavailable"
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": SERVICE_NAME,
                "checks": checks,
            },
        )

    return {"status": "ready", "service": SERVICE_NAME, "checks": checks}
