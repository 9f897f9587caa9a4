from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


# Errors
class ErrorKind(str, Enum):
    INVALID_URL = "invalid_url"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"
    REMOTE_API_ERROR = "remote_api_error"
    NO_MATCHING_SITE = "no_matching_site"


# Results
class RemoteResult(BaseModel):
    kind: Literal["success", "error"]
    body: Optional[str] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, body: str) -> "RemoteResult":
        return cls(kind="success", body=body)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "RemoteResult":
        return cls(kind="error", error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.kind == "success"


class SiteIdResult(BaseModel):
    kind: Literal["success", "error"]
    site_id: Optional[int] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, site_id: int) -> "SiteIdResult":
        return cls(kind="success", site_id=site_id)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "SiteIdResult":
        return cls(kind="error", error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.kind == "success"


# Settings
class AnalyticsSettings(BaseModel):
    piwik_auth_token: str = ""
    piwik_site_id: Optional[int] = Field(default=None, ge=0)
    google_web_property_id: str = ""


class SettingsUpdate(BaseModel):
    """Partial settings as submitted by a form or JSON client"""

    piwik_auth_token: Optional[str] = None
    google_web_property_id: Optional[str] = None


class SettingsSaveResponse(BaseModel):
    settings: AnalyticsSettings
    messages: List[str] = []


# Tracking
class TrackingAccount(BaseModel):
    namespace: Optional[str] = None


TrackingAccounts = Dict[str, TrackingAccount]


def parse_site_id(value: Any) -> Optional[int]:
    """Convert an integer-like site id, or None if it is not a non-negative integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        # isdecimal() only admits characters int() accepts ("²" is a digit, not a decimal)
        if text.isdecimal():
            return int(text)
    return None
