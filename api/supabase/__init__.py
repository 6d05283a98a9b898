"""
Supabase Integration Module

Provides authentication, database and subscription gating with Supabase.
"""

from api.supabase.auth_service import AuthError, AuthService
from api.supabase.client import SupabaseNotConfigured, kitchen_data_client, supabase_client
from api.supabase.middleware import (
    get_auth_service,
    get_current_user,
    require_active_subscription,
    require_admin,
)
from api.supabase.models import (
    AuthTokens,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    User,
    UserCreate,
)
from api.supabase.repository import SupabaseRepository

__all__ = [
    # Client
    "supabase_client",
    "kitchen_data_client",
    "SupabaseNotConfigured",
    # Auth Service
    "AuthService",
    "AuthError",
    # Middleware
    "get_auth_service",
    "get_current_user",
    "require_active_subscription",
    "require_admin",
    # Repository
    "SupabaseRepository",
    # Models
    "User",
    "UserCreate",
    "CurrentUser",
    "AuthTokens",
    "LoginRequest",
    "LoginResponse",
    "RefreshRequest",
]
