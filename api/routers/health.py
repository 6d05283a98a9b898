"""Health check endpoints."""

from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter, Depends

from api.config import get_settings, Settings
from api.supabase.client import SupabaseNotConfigured, kitchen_data_client

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic liveness check.

    Returns 200 if the service is running.
    """
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/health/ready")
async def readiness_check(
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """
    Readiness check - verifies dependencies are available.

    Checks:
    - Database (Supabase, or the in-memory store in development)
    - OpenAI API for receipt scanning (if configured)
    """
    checks: Dict[str, Dict[str, Any]] = {}

    if settings.supabase_enabled:
        try:
            kitchen_data_client()
            checks["database"] = {"status": "ok", "backend": "supabase"}
        except SupabaseNotConfigured as e:
            checks["database"] = {"status": "error", "backend": "supabase", "message": str(e)}
    else:
        checks["database"] = {"status": "ok", "backend": "memory"}

    if settings.openai_api_key:
        checks["receipt_scanning"] = {"status": "configured"}
    else:
        checks["receipt_scanning"] = {"status": "not_configured"}

    all_ok = all(c.get("status") != "error" for c in checks.values())

    return {
        "status": "ready" if all_ok else "degraded",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "version": settings.app_version,
        "checks": checks
    }


@router.get("/health/info")
async def service_info(
    settings: Settings = Depends(get_settings)
) -> Dict[str, Any]:
    """Return service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": "development" if settings.debug else "production",
        "subscription_price": settings.subscription_price,
    }
