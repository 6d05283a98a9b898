"""
Admin endpoints

Subscription management: list accounts and mark them active or blocked
with an expiry date. Payments are confirmed by hand, outside the app.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_admin_repository
from api.supabase.middleware import require_admin
from api.supabase.models import CurrentUser
from kitchencogs.errors import NotFoundError
from kitchencogs.models.subscription import SubscriptionUpdate, UserProfile
from kitchencogs.services.repository import Repository
from kitchencogs.services.subscription_service import apply_subscription_update

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profiles", response_model=List[UserProfile])
async def list_profiles(repo: Repository = Depends(get_admin_repository)):
    """All user profiles with their subscription state."""
    return repo.list_profiles()


@router.put("/profiles/{user_id}", response_model=UserProfile)
async def update_subscription(
    user_id: str,
    request: SubscriptionUpdate,
    current_user: CurrentUser = Depends(require_admin),
    repo: Repository = Depends(get_admin_repository),
):
    """Set a user's subscription status and expiry date."""
    profile = repo.get_profile(user_id)
    if profile is None:
        raise NotFoundError("Profile", user_id)

    updated = apply_subscription_update(profile, request)
    saved = repo.update_profile(user_id, {
        "subscription_status": updated.subscription_status,
        "subscription_expires_at": updated.subscription_expires_at,
    })
    if saved is None:
        raise NotFoundError("Profile", user_id)

    logger.info(
        f"Admin {current_user.email} set {user_id} to {saved.subscription_status.value} "
        f"until {saved.subscription_expires_at}"
    )
    return saved
