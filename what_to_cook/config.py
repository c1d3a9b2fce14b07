"""Configuration management for the What To Cook API.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env so os.getenv picks up values defined there.
load_dotenv()

DEFAULT_MAX_REQUESTS = 5
DEFAULT_WINDOW_SECONDS = 3600
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

# Route layout shared by the recipes router and the quota gate
API_PREFIX = "/api/v1"
RECIPES_ROUTE = "/recipes"
RECIPES_PATH = API_PREFIX + RECIPES_ROUTE


def _get_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _get_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Application configuration loaded from environment variables."""

    # Request quota
    @staticmethod
    def max_requests() -> int:
        """Quota ceiling per session and window (MAX_REQUESTS)."""
        return _get_int("MAX_REQUESTS", DEFAULT_MAX_REQUESTS)

    @staticmethod
    def window_seconds() -> int:
        """Quota window length in seconds (WINDOW_DURATION)."""
        return _get_int("WINDOW_DURATION", DEFAULT_WINDOW_SECONDS)

    # Session cookie
    @staticmethod
    def session_secret_key() -> str:
        """Signing key for the session cookie."""
        return os.getenv("SESSION_SECRET_KEY", "dev-insecure-session-key")

    @staticmethod
    def session_cookie_name() -> str:
        return os.getenv("SESSION_COOKIE_NAME", "_what_to_cook_session")

    @staticmethod
    def session_https_only() -> bool:
        return _get_bool("SESSION_HTTPS_ONLY", False)

    @staticmethod
    def cors_allow_origins() -> List[str]:
        """Browser origins allowed to call the API with credentials."""
        raw = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:5173")
        items = [origin.strip() for origin in raw.split(",")]
        return [origin for origin in items if origin]

    # Gemini AI API
    @staticmethod
    def gemini_api_key() -> Optional[str]:
        """Get Gemini API key from environment."""
        return os.getenv("GOOGLE_GENERATIVE_AI_API_KEY") or os.getenv("GEMINI_API_KEY")

    @staticmethod
    def gemini_model() -> str:
        return os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)

    # Supabase configuration
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    # Helper methods
    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.gemini_api_key():
            missing.append("GEMINI_API_KEY or GOOGLE_GENERATIVE_AI_API_KEY")
        if not Config.supabase_url():
            missing.append("SUPABASE_URL")
        if not Config.supabase_service_role_key():
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


# Singleton instance for easy access
config = Config()
