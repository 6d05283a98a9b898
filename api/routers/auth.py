"""
Authentication API Endpoints

User registration, login and the current user's subscription state.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.config import get_settings
from api.supabase.auth_service import AuthError, AuthService
from api.supabase.middleware import get_auth_service, get_current_user
from api.supabase.models import (
    AuthTokens,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    UserCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def require_auth_service() -> AuthService:
    """Auth service, or 503 when Supabase is not configured."""
    if not get_settings().supabase_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": {
                    "code": "AUTH_NOT_CONFIGURED",
                    "message": "Authentication is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY.",
                }
            },
        )
    return get_auth_service()


# =============================================================================
# Registration & Login
# =============================================================================

@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: UserCreate,
    auth_service: AuthService = Depends(require_auth_service),
):
    """
    Register a new user account.

    Name and phone are required; the subscription starts active.
    """
    try:
        return await auth_service.register(
            email=request.email,
            password=request.password,
            full_name=request.full_name,
            phone=request.phone,
        )

    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": {"code": e.code, "message": e.message}},
        )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(require_auth_service),
):
    """
    Login with email and password.

    A blocked or expired subscription still logs in; `access` tells the
    client to show the renewal screen instead of loading data.
    """
    try:
        return await auth_service.login(
            email=request.email,
            password=request.password,
        )

    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": e.code, "message": e.message}},
        )


@router.post("/refresh", response_model=AuthTokens)
async def refresh_tokens(
    request: RefreshRequest,
    auth_service: AuthService = Depends(require_auth_service),
):
    """Refresh access token using refresh token."""
    try:
        return await auth_service.refresh_tokens(request.refresh_token)

    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": e.code, "message": e.message}},
        )


# =============================================================================
# Current User
# =============================================================================

@router.get("/me", response_model=CurrentUser)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    """Get current authenticated user with subscription decision."""
    return current_user
