"""
Supabase Auth Models

Request/response models for signup and login, and the user context
injected into endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from kitchencogs.models.subscription import AccessDecision, UserProfile


class UserCreate(BaseModel):
    """Request model for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)


class User(BaseModel):
    """User model from Supabase Auth."""
    id: str
    email: EmailStr
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    # App metadata
    full_name: Optional[str] = None
    phone: Optional[str] = None


# =============================================================================
# Auth Response Models
# =============================================================================

class AuthTokens(BaseModel):
    """Authentication tokens returned by Supabase."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiry in seconds")
    expires_at: Optional[int] = Field(None, description="Unix timestamp of expiry")


class LoginRequest(BaseModel):
    """Login request model."""
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Login response with user, subscription access and tokens."""
    user: User
    access: AccessDecision
    tokens: Optional[AuthTokens] = Field(
        default=None,
        description="Absent after signup until the email is confirmed",
    )


class RefreshRequest(BaseModel):
    """Token refresh request."""
    refresh_token: str


# =============================================================================
# Current User Context
# =============================================================================

class CurrentUser(BaseModel):
    """
    Current authenticated user context.

    Injected into endpoints via dependency injection. Carries the
    subscription decision so routes can gate on it.
    """
    user_id: str
    email: EmailStr
    full_name: Optional[str] = None
    profile: Optional[UserProfile] = None
    access: AccessDecision

    @property
    def is_admin(self) -> bool:
        return bool(self.access.profile and self.access.profile.is_admin)

    @property
    def has_access(self) -> bool:
        return self.access.allowed
