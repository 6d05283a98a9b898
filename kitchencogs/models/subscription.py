"""
Subscription Models

Per-user profile with a manually managed monthly subscription.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from kitchencogs.models.common import UtcDatetime


class SubscriptionStatus(str, Enum):
    """Subscription status as set by an admin."""
    ACTIVE = "active"
    BLOCKED = "blocked"


class AccessReason(str, Enum):
    """Why access was granted or refused."""
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    ACTIVE = "ACTIVE"
    NO_PROFILE = "NO_PROFILE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"


class UserProfile(BaseModel):
    """Profile row kept alongside the auth user."""
    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    subscription_expires_at: Optional[UtcDatetime] = None
    is_admin: bool = False

    def is_expired(self, now: datetime) -> bool:
        if self.subscription_expires_at is None:
            return False
        return self.subscription_expires_at < now


class AccessDecision(BaseModel):
    """Whether a user may load their data."""
    allowed: bool
    reason: AccessReason
    profile: Optional[UserProfile] = None


class SubscriptionUpdate(BaseModel):
    """Admin edit of a user's subscription."""
    subscription_status: SubscriptionStatus
    subscription_expires_at: Optional[UtcDatetime] = Field(
        default=None,
        description="None clears the expiry date",
    )
