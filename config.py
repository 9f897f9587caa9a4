"""
Centralized configuration for Expressions Analytics
All environment variables and settings are defined here
"""

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from models import parse_site_id


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Global tracking values that are empty or of the wrong type disable
    the matching provider instead of failing validation.
    """

    # ======================
    # Google Global Tracking
    # ======================
    GOOGLE_GLOBAL_TRACKING_ID: Optional[str] = Field(
        default=None,
        description="Account id for global tracking in Google (empty disables)"
    )
    GOOGLE_GLOBAL_TRACKING_NAMESPACE: Optional[str] = Field(
        default=None,
        description="Namespace for global tracking in Google"
    )

    # ======================
    # Piwik Global Tracking
    # ======================
    PIWIK_GLOBAL_TRACKING_ID: Optional[int] = Field(
        default=1,
        description="Site id for global tracking in Piwik (non-integer disables)"
    )
    PIWIK_GLOBAL_TRACKING_DOMAIN: Optional[str] = Field(
        default="*.syr.edu",
        description="Domain for global tracking in Piwik (empty disables)"
    )
    PIWIK_GLOBAL_TRACKING_REST_API: Optional[str] = Field(
        default=None,
        description="Piwik REST API host and path, minus the protocol"
    )
    PIWIK_REST_API_SCHEME: str = Field(
        default="https",
        description="Protocol used when querying the Piwik REST API"
    )

    # ======================
    # External API Configuration
    # ======================
    EXTERNAL_API_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for remote API requests"
    )
    EXTERNAL_API_DISABLE_SSL_VERIFICATION: bool = Field(
        default=False,
        description="Set to True to disable remote API SSL verification"
    )
    EXTERNAL_API_USER_AGENT: Optional[str] = Field(
        default=None,
        description="User agent for remote requests (transport default if unset)"
    )

    # ======================
    # Host Configuration
    # ======================
    SITE_URL: str = Field(
        default="http://localhost:8000",
        description="Public URL of the site being tracked"
    )

    # ======================
    # Settings Storage
    # ======================
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )
    SETTINGS_NAME: str = Field(
        default="expana_settings",
        description="Storage key and form prefix for the stored settings"
    )

    # ======================
    # Logging Configuration
    # ======================
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator(
        "GOOGLE_GLOBAL_TRACKING_ID",
        "GOOGLE_GLOBAL_TRACKING_NAMESPACE",
        "PIWIK_GLOBAL_TRACKING_DOMAIN",
        "PIWIK_GLOBAL_TRACKING_REST_API",
        "EXTERNAL_API_USER_AGENT",
        mode="before",
    )
    @classmethod
    def _blank_string_disables(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    @field_validator("PIWIK_GLOBAL_TRACKING_ID", mode="before")
    @classmethod
    def _non_integer_disables(cls, value: Any) -> Optional[int]:
        return parse_site_id(value)

    @property
    def piwik_global_tracking_enabled(self) -> bool:
        """Domain, REST API and site id must all be usable"""
        return (
            self.PIWIK_GLOBAL_TRACKING_DOMAIN is not None
            and self.PIWIK_GLOBAL_TRACKING_REST_API is not None
            and self.PIWIK_GLOBAL_TRACKING_ID is not None
        )

    @property
    def google_global_tracking_enabled(self) -> bool:
        return self.GOOGLE_GLOBAL_TRACKING_ID is not None

    @property
    def piwik_rest_api_url(self) -> Optional[str]:
        """Full REST API base URL, or None when the API is not configured"""
        if self.PIWIK_GLOBAL_TRACKING_REST_API is None:
            return None
        return f"{self.PIWIK_REST_API_SCHEME}://{self.PIWIK_GLOBAL_TRACKING_REST_API}"

    @property
    def site_domain(self) -> str:
        """Hostname of SITE_URL, used as the cookie domain for site tracking"""
        return urlparse(self.SITE_URL).hostname or ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Allow extra env vars in .env file


# Global settings instance
settings = Settings()


# ======================
# Convenience Functions
# ======================

def get_redis_url() -> str:
    """Get Redis connection URL"""
    return settings.REDIS_URL

