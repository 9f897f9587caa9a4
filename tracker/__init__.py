# Tracker package - tracking code, settings and admin form
from .snippets import render_piwik, render_google, render_tracking_code
from .settings import (
    DEFAULT_SETTINGS,
    SettingsRepository,
    merge_with_defaults,
    sanitize,
)
from .admin import build_sections, parse_submitted, render_settings_page

__all__ = [
    # Tracking code
    "render_piwik",
    "render_google",
    "render_tracking_code",
    # Settings
    "DEFAULT_SETTINGS",
    "SettingsRepository",
    "merge_with_defaults",
    "sanitize",
    # Admin form
    "build_sections",
    "parse_submitted",
    "render_settings_page",
]
