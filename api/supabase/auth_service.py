"""
Supabase Auth Service

Handles user registration, login, JWT validation and the subscription
check that runs before any data is loaded.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import jwt
from supabase import AuthApiError

from api.config import get_settings
from api.supabase.client import supabase_client
from api.supabase.models import AuthTokens, CurrentUser, LoginResponse, User
from api.supabase.repository import SupabaseRepository
from kitchencogs.models.subscription import AccessDecision, UserProfile
from kitchencogs.services.subscription_service import (
    evaluate_access,
    sync_profile_from_metadata,
)

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Authentication error."""

    def __init__(self, message: str, code: str = "AUTH_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class AuthService:
    """
    Supabase authentication service.

    Handles:
    - User registration and login
    - JWT token validation
    - Profile sync and subscription gating
    """

    def __init__(self):
        self.client = supabase_client()

    # =========================================================================
    # User Registration
    # =========================================================================

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: str,
    ) -> LoginResponse:
        """
        Register a new user.

        Name and phone go into auth metadata; the profile row is created by
        a database trigger and completed here.
        """
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {
                        "full_name": full_name,
                        "phone": phone,
                        "display_name": full_name,
                    }
                }
            })

            if not response.user:
                raise AuthError("Registration failed", "REGISTRATION_FAILED")

            user = self._map_supabase_user(response.user)

            repo = SupabaseRepository(user.id, client=self.client)
            profile = repo.update_profile(user.id, {"full_name": full_name, "phone": phone})
            if profile is None:
                logger.warning(f"Profile row missing after signup for {user.id}")

            access = self.check_access(profile, user.email)

            tokens = None
            if response.session:
                tokens = self._map_tokens(response.session)

            return LoginResponse(user=user, access=access, tokens=tokens)

        except AuthApiError as e:
            logger.error(f"Registration error: {e}")
            if "already registered" in str(e).lower():
                raise AuthError("Email already registered", "EMAIL_EXISTS")
            raise AuthError(str(e), "REGISTRATION_FAILED")

    # =========================================================================
    # Login
    # =========================================================================

    async def login(self, email: str, password: str) -> LoginResponse:
        """Login with email and password."""
        try:
            response = self.client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except AuthApiError as e:
            logger.error(f"Login error: {e}")
            raise AuthError("Invalid credentials", "INVALID_CREDENTIALS")

        if not response.user or not response.session:
            raise AuthError("Invalid credentials", "INVALID_CREDENTIALS")

        user = self._map_supabase_user(response.user)
        profile = self._load_profile(user.id, response.user.user_metadata)

        return LoginResponse(
            user=user,
            access=self.check_access(profile, user.email),
            tokens=self._map_tokens(response.session),
        )

    async def refresh_tokens(self, refresh_token: str) -> AuthTokens:
        """Refresh access token using refresh token."""
        try:
            response = self.client.auth.refresh_session(refresh_token)
        except AuthApiError as e:
            logger.error(f"Token refresh error: {e}")
            raise AuthError("Invalid refresh token", "INVALID_REFRESH_TOKEN")

        if not response.session:
            raise AuthError("Invalid refresh token", "INVALID_REFRESH_TOKEN")

        return self._map_tokens(response.session)

    # =========================================================================
    # JWT Validation
    # =========================================================================

    def validate_token(self, token: str) -> Tuple[str, str, Dict[str, Any]]:
        """
        Validate a JWT token and extract user info.

        Returns: (user_id, email, user_metadata)
        Raises: AuthError if token is invalid
        """
        settings = get_settings()

        if not settings.supabase_jwt_secret:
            # Fall back to verifying with Supabase API
            return self._validate_token_via_api(token)

        try:
            payload = jwt.decode(
                token,
                settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired", "TOKEN_EXPIRED")
        except jwt.InvalidTokenError as e:
            logger.error(f"JWT validation error: {e}")
            raise AuthError("Invalid token", "INVALID_TOKEN")

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid token", "INVALID_TOKEN")

        return user_id, payload.get("email", ""), payload.get("user_metadata") or {}

    def _validate_token_via_api(self, token: str) -> Tuple[str, str, Dict[str, Any]]:
        """Validate token by calling Supabase API."""
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as e:
            logger.error(f"Token validation error: {e}")
            raise AuthError("Invalid token", "INVALID_TOKEN")

        if not response or not response.user:
            raise AuthError("Invalid token", "INVALID_TOKEN")

        return response.user.id, response.user.email, response.user.user_metadata or {}

    async def get_current_user(self, token: str) -> CurrentUser:
        """Get full current user context, subscription decision included."""
        user_id, email, metadata = self.validate_token(token)
        profile = self._load_profile(user_id, metadata)

        return CurrentUser(
            user_id=user_id,
            email=email,
            full_name=profile.full_name if profile else metadata.get("full_name"),
            profile=profile,
            access=self.check_access(profile, email),
        )

    # =========================================================================
    # Subscription
    # =========================================================================

    def check_access(self, profile: Optional[UserProfile], email: Optional[str]) -> AccessDecision:
        settings = get_settings()
        return evaluate_access(
            profile,
            email=email,
            owner_emails=settings.owner_email_list,
            now=datetime.utcnow(),
        )

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _load_profile(self, user_id: str, metadata: Optional[Dict[str, Any]]) -> Optional[UserProfile]:
        """Fetch the profile row, filling name/phone from auth metadata if missing."""
        repo = SupabaseRepository(user_id, client=self.client)
        profile = repo.get_profile(user_id)
        if profile is None:
            return None

        updates = sync_profile_from_metadata(profile, metadata)
        if updates:
            logger.info(f"Syncing profile {user_id} from auth metadata: {sorted(updates)}")
            profile = repo.update_profile(user_id, updates) or profile

        return profile

    def _map_supabase_user(self, supabase_user) -> User:
        """Map Supabase user object to our User model."""
        user_metadata = supabase_user.user_metadata or {}

        return User(
            id=str(supabase_user.id),
            email=supabase_user.email,
            email_confirmed_at=supabase_user.email_confirmed_at,
            created_at=supabase_user.created_at,
            full_name=user_metadata.get("full_name"),
            phone=user_metadata.get("phone"),
        )

    def _map_tokens(self, session) -> AuthTokens:
        return AuthTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            token_type="bearer",
            expires_in=session.expires_in or 3600,
            expires_at=session.expires_at,
        )
