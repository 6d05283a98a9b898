"""
Supabase Auth Middleware

JWT token validation, user context injection and subscription gating
for FastAPI.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.config import get_settings
from api.supabase.auth_service import AuthError, AuthService
from api.supabase.models import CurrentUser
from kitchencogs.models.subscription import AccessDecision, AccessReason, UserProfile

logger = logging.getLogger(__name__)

# Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)

DEBUG_USER_ID = "00000000-0000-0000-0000-000000000000"
DEBUG_USER_EMAIL = "debug@example.com"


@lru_cache()
def get_auth_service() -> AuthService:
    """Get singleton auth service."""
    return AuthService()


def _debug_user() -> CurrentUser:
    profile = UserProfile(
        id=DEBUG_USER_ID,
        email=DEBUG_USER_EMAIL,
        full_name="Debug User",
        is_admin=True,
    )
    return CurrentUser(
        user_id=DEBUG_USER_ID,
        email=DEBUG_USER_EMAIL,
        full_name="Debug User",
        profile=profile,
        access=AccessDecision(allowed=True, reason=AccessReason.ACTIVE, profile=profile),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Dependency to get the current authenticated user.

    Validates JWT token and returns user context with the subscription
    decision. Raises HTTPException if not authenticated.
    """
    settings = get_settings()

    # Skip auth in debug mode if Supabase not configured
    if settings.debug and not settings.supabase_enabled:
        return _debug_user()

    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "AUTH_REQUIRED",
                    "message": "Authentication required. Include Authorization: Bearer <token> header.",
                }
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await get_auth_service().get_current_user(credentials.credentials)

    except AuthError as e:
        logger.warning(f"Auth failed: {e.code} - {e.message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": e.code,
                    "message": e.message,
                }
            },
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_active_subscription(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """
    Dependency that requires a usable subscription.

    Use this for every endpoint that reads or writes kitchen data.
    """
    if current_user.has_access:
        return current_user

    settings = get_settings()
    reason = current_user.access.reason

    if reason == AccessReason.EXPIRED:
        code = "SUBSCRIPTION_EXPIRED"
        message = "Your subscription has expired."
    else:
        code = "SUBSCRIPTION_BLOCKED"
        message = "Your account is blocked."

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={
            "error": {
                "code": code,
                "message": (
                    f"{message} Renew the monthly plan "
                    f"(R$ {settings.subscription_price:.2f}) to keep using kitchenCOGS."
                ),
            }
        },
    )


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """
    Dependency that requires an admin (or owner) account.

    Use for the subscription management panel.
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "ADMIN_REQUIRED",
                    "message": "This operation requires admin privileges.",
                }
            },
        )

    return current_user
