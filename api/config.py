"""
API Configuration

All secrets loaded from environment variables.
NEVER hardcode API keys, passwords, or secrets.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App info
    app_name: str = "kitchenCOGS API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Supabase (database + auth)
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None  # admin panel only
    supabase_jwt_secret: Optional[str] = None  # local JWT validation

    # OpenAI (receipt scanning)
    openai_api_key: Optional[str] = None  # Loaded from OPENAI_API_KEY env var
    receipt_model: str = "gpt-4o-mini"
    receipt_match_threshold: float = 80.0
    max_upload_size_mb: int = 10

    # Subscription
    owner_emails: str = ""  # comma-separated, always admin and active
    subscription_price: float = 10.99  # monthly, paid by Pix

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def owner_email_list(self) -> List[str]:
        """Parse comma-separated owner emails."""
        return [e.strip().lower() for e in self.owner_emails.split(",") if e.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
