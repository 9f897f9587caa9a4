"""
Analytics settings: defaults, merging, sanitizing and persistence.

Settings are loaded once per request through a SettingsRepository and passed
explicitly to whatever needs them; there is no process-wide settings cache.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Protocol

from config import Settings, settings as app_settings
from models import AnalyticsSettings, SiteIdResult, parse_site_id
from utils.clients.piwik import resolve_site_id

logger = logging.getLogger(__name__)

Resolver = Callable[[str, str, str], SiteIdResult]

DEFAULT_SETTINGS = AnalyticsSettings(
    piwik_auth_token="",
    piwik_site_id=None,
    google_web_property_id="",
)

SETTINGS_FIELDS = ("piwik_auth_token", "piwik_site_id", "google_web_property_id")


class SettingsStore(Protocol):
    """Key-value collaborator that persists the settings record."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> bool: ...

    def delete(self, key: str) -> bool: ...


def _string_field(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _site_id_field(value: Any, default: Optional[int]) -> Optional[int]:
    site_id = parse_site_id(value)
    return default if site_id is None else site_id


def merge_with_defaults(raw: Optional[Mapping[str, Any]]) -> AnalyticsSettings:
    """
    Fill a full settings record from raw values, field by field.

    Missing or wrongly typed values fall back to DEFAULT_SETTINGS and unknown
    keys are ignored.
    """
    raw = raw if isinstance(raw, Mapping) else {}
    return AnalyticsSettings(
        piwik_auth_token=_string_field(
            raw.get("piwik_auth_token"), DEFAULT_SETTINGS.piwik_auth_token
        ),
        piwik_site_id=_site_id_field(
            raw.get("piwik_site_id"), DEFAULT_SETTINGS.piwik_site_id
        ),
        google_web_property_id=_string_field(
            raw.get("google_web_property_id"), DEFAULT_SETTINGS.google_web_property_id
        ),
    )


def _needs_site_id(current: AnalyticsSettings, token: str) -> bool:
    """Re-pull the site id when the token changed or no id was resolved yet."""
    if current.piwik_auth_token != token:
        return True
    return current.piwik_site_id is None and bool(token)


def sanitize(
    current: AnalyticsSettings,
    submitted: Optional[Mapping[str, Any]],
    config: Settings = app_settings,
    resolver: Resolver = resolve_site_id,
    messages: Optional[List[str]] = None,
) -> AnalyticsSettings:
    """
    Merge submitted form fields over the defaults and sanitize them.

    Strings are trimmed. When the Piwik auth token changed, or no site id is
    stored yet, the site id is resolved again from the Piwik API. Resolution
    errors clear the site id and are reported through messages.

    Args:
        current: The stored settings
        submitted: Flat mapping of submitted field values
        config: Application configuration
        resolver: Site id resolver (api_base_url, auth_token, site_url)
        messages: Collects human-readable notices for the admin form

    Returns:
        The updated settings record (not persisted)
    """
    if messages is None:
        messages = []
    if submitted is None:
        return current

    merged = merge_with_defaults(submitted)
    token = merged.piwik_auth_token.strip()
    site_id = current.piwik_site_id

    if not token:
        site_id = None
    elif _needs_site_id(current, token):
        site_id = None
        rest_api_url = config.piwik_rest_api_url
        if rest_api_url is None:
            messages.append("Piwik REST API is not configured; site id was not resolved")
            logger.warning("Piwik auth token set but PIWIK_GLOBAL_TRACKING_REST_API is not configured")
        else:
            result = resolver(rest_api_url, token, config.SITE_URL)
            if result.ok:
                site_id = result.site_id
            else:
                messages.append(result.message)
                logger.warning(f"Piwik site id not resolved: {result.message}")

    return AnalyticsSettings(
        piwik_auth_token=token,
        piwik_site_id=site_id,
        google_web_property_id=merged.google_web_property_id.strip(),
    )


class SettingsRepository:
    """
    Loads and persists the analytics settings for one request.
    """

    def __init__(self, store: SettingsStore, name: Optional[str] = None):
        self.store = store
        self.name = name or app_settings.SETTINGS_NAME
        self._settings: Optional[AnalyticsSettings] = None

    def load(self) -> AnalyticsSettings:
        """Get the stored settings merged over the defaults."""
        if self._settings is None:
            self._settings = merge_with_defaults(self.store.get(self.name))
        return self._settings

    def save(self, updated: AnalyticsSettings) -> bool:
        """Persist the settings record."""
        saved = self.store.set(self.name, updated.model_dump())
        if saved:
            self._settings = updated
            logger.info(f"Saved analytics settings '{self.name}'")
        else:
            logger.error(f"Failed to save analytics settings '{self.name}'")
        return saved

    def reset(self, field: Optional[str] = None) -> bool:
        """
        Delete one setting, or all settings when no field is given.

        Args:
            field: A specific setting to reset to its default

        Returns:
            True if the store accepted the change
        """
        if field is None:
            self.store.delete(self.name)
            self._settings = None
            logger.info(f"Reset all analytics settings '{self.name}'")
            return True

        if field not in SETTINGS_FIELDS:
            raise KeyError(field)

        raw = self.load().model_dump()
        raw.pop(field)
        if not self.store.set(self.name, merge_with_defaults(raw).model_dump()):
            logger.error(f"Failed to reset analytics setting '{field}'")
            return False

        self._settings = None
        logger.info(f"Reset analytics setting '{field}'")
        return True
