"""
Subscription Service

Decides whether a signed-in user may load their data, and keeps profile
rows in step with auth metadata.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from kitchencogs.models.subscription import (
    AccessDecision,
    AccessReason,
    SubscriptionStatus,
    SubscriptionUpdate,
    UserProfile,
)

logger = logging.getLogger(__name__)

NAME_METADATA_KEYS = ("full_name", "name", "display_name")


def is_owner(email: Optional[str], owner_emails: Iterable[str]) -> bool:
    if not email:
        return False
    return email.strip().lower() in {e.strip().lower() for e in owner_emails}


def evaluate_access(
    profile: Optional[UserProfile],
    email: Optional[str] = None,
    owner_emails: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> AccessDecision:
    """
    Gate data access on the subscription.

    Owners are always admin and active. Admins are never blocked. A user
    without a profile row is let in so a failed signup trigger does not
    lock them out.
    """
    now = now or datetime.utcnow()
    email = email or (profile.email if profile else None)

    if is_owner(email, owner_emails):
        if profile is not None:
            profile = profile.model_copy(update={
                "is_admin": True,
                "subscription_status": SubscriptionStatus.ACTIVE,
            })
        return AccessDecision(allowed=True, reason=AccessReason.OWNER, profile=profile)

    if profile is None:
        return AccessDecision(allowed=True, reason=AccessReason.NO_PROFILE)

    if profile.is_admin:
        return AccessDecision(allowed=True, reason=AccessReason.ADMIN, profile=profile)

    if profile.subscription_status == SubscriptionStatus.BLOCKED:
        logger.info(f"Access refused for {profile.id}: subscription blocked")
        return AccessDecision(allowed=False, reason=AccessReason.BLOCKED, profile=profile)

    if profile.is_expired(now):
        logger.info(f"Access refused for {profile.id}: subscription expired")
        return AccessDecision(allowed=False, reason=AccessReason.EXPIRED, profile=profile)

    return AccessDecision(allowed=True, reason=AccessReason.ACTIVE, profile=profile)


def sync_profile_from_metadata(
    profile: UserProfile,
    metadata: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """Fields to copy from auth metadata into an incomplete profile."""
    metadata = metadata or {}
    updates: Dict[str, Any] = {}

    if not profile.full_name:
        name = next((metadata[k] for k in NAME_METADATA_KEYS if metadata.get(k)), None)
        if name:
            updates["full_name"] = name

    if not profile.phone and metadata.get("phone"):
        updates["phone"] = metadata["phone"]

    return updates


def apply_subscription_update(profile: UserProfile, update: SubscriptionUpdate) -> UserProfile:
    return profile.model_copy(update={
        "subscription_status": update.subscription_status,
        "subscription_expires_at": update.subscription_expires_at,
    })
