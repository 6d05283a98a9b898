"""
API Dependencies

Dependency injection for repositories and services.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from api.config import get_settings
from api.supabase.middleware import require_active_subscription, require_admin
from api.supabase.models import CurrentUser
from kitchencogs.services import MemoryRepository, ReceiptService, ReportService, Repository

logger = logging.getLogger(__name__)


@lru_cache()
def get_memory_repository() -> MemoryRepository:
    """Shared in-memory repository for development without Supabase."""
    logger.info("Supabase not configured, using in-memory repository with demo data")
    return MemoryRepository(seed=True)


def get_repository(
    current_user: CurrentUser = Depends(require_active_subscription),
) -> Repository:
    """
    Get the repository for the current user's kitchen.

    Requires an active subscription; blocked and expired accounts get 403
    before any data is read.
    """
    if not get_settings().supabase_enabled:
        return get_memory_repository()

    from api.supabase.client import kitchen_data_client
    from api.supabase.repository import SupabaseRepository
    return SupabaseRepository(current_user.user_id, client=kitchen_data_client())


def get_admin_repository(
    current_user: CurrentUser = Depends(require_admin),
) -> Repository:
    """Repository with access to every profile, for the admin panel."""
    if not get_settings().supabase_enabled:
        return get_memory_repository()

    from api.supabase.client import supabase_client
    from api.supabase.repository import SupabaseRepository
    return SupabaseRepository(current_user.user_id, client=supabase_client(service_role=True))


@lru_cache()
def get_receipt_service() -> ReceiptService:
    """Get singleton receipt scanning service."""
    settings = get_settings()
    return ReceiptService(
        openai_api_key=settings.openai_api_key,
        model=settings.receipt_model,
        match_threshold=settings.receipt_match_threshold,
    )


@lru_cache()
def get_report_service() -> ReportService:
    """Get singleton report service."""
    return ReportService()
