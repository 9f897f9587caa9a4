"""
Admin settings page for Expressions Analytics.

Fields are described declaratively and rendered to plain HTML; the posted
form is flattened back into a field mapping for the sanitizer.
"""

import html
import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from models import AnalyticsSettings

PAGE_TITLE = "Expressions Analytics"


class FieldDescriptor(BaseModel):
    field_key: str
    label: str
    input_type: str = "text"
    css_class: str = "regular-text code"
    current_value: str = ""


class SettingsSection(BaseModel):
    slug: str
    title: str
    description: str
    fields: List[FieldDescriptor]


def build_sections(settings: AnalyticsSettings) -> List[SettingsSection]:
    """Describe the settings form for the current settings."""
    return [
        SettingsSection(
            slug="expana-settings-piwik",
            title="Piwik Analytics",
            description="Enter your Piwik Auth Token below to enable tracking.",
            fields=[
                FieldDescriptor(
                    field_key="piwik_auth_token",
                    label="Auth Token",
                    current_value=settings.piwik_auth_token,
                ),
            ],
        ),
        SettingsSection(
            slug="expana-settings-google",
            title="Google Analytics",
            description="Enter your Google Web Property ID below to enable tracking.",
            fields=[
                FieldDescriptor(
                    field_key="google_web_property_id",
                    label="Web Property ID",
                    current_value=settings.google_web_property_id,
                ),
            ],
        ),
    ]


def render_field(settings_name: str, field: FieldDescriptor) -> str:
    """Render one input widget; unsupported input types render nothing."""
    if field.input_type != "text":
        return ""
    return (
        '<input type="text" '
        f'id="{html.escape(field.field_key)}" '
        f'class="{html.escape(field.css_class)}" '
        f'name="{html.escape(settings_name)}[{html.escape(field.field_key)}]" '
        f'value="{html.escape(field.current_value)}" />'
    )


def render_section(settings_name: str, section: SettingsSection) -> str:
    rows = "".join(
        '<tr><th scope="row">'
        f'<label for="{html.escape(field.field_key)}">{html.escape(field.label)}</label>'
        f"</th><td>{render_field(settings_name, field)}</td></tr>"
        for field in section.fields
    )
    return (
        f'<h3 id="{section.slug}">{html.escape(section.title)}</h3>'
        f"<p>{html.escape(section.description)}</p>"
        f'<table class="form-table">{rows}</table>'
    )


def render_settings_page(
    settings: AnalyticsSettings,
    settings_name: str,
    messages: Optional[List[str]] = None,
    action: str = "",
) -> str:
    """Render the complete admin settings page."""
    notices = "".join(
        f'<div class="notice"><p>{html.escape(message)}</p></div>'
        for message in (messages or [])
    )
    sections = "".join(
        render_section(settings_name, section) for section in build_sections(settings)
    )
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><title>{PAGE_TITLE}</title></head><body>"
        '<div class="wrap">'
        f"<h2>{PAGE_TITLE}</h2>"
        f"{notices}"
        f'<form action="{html.escape(action)}" method="post">'
        f"{sections}"
        '<p class="submit">'
        '<input type="submit" value="Save Changes" class="button button-primary" id="submit" name="submit" />'
        "</p>"
        "</form>"
        "</div>"
        "</body></html>\n"
    )


def parse_submitted(form: Mapping[str, Any], settings_name: str) -> Dict[str, Any]:
    """
    Flatten a posted form into a field mapping.

    Accepts both "<settings_name>[field]" keys, as rendered by render_field,
    and bare field keys. Prefixed keys win.
    """
    pattern = re.compile(rf"^{re.escape(settings_name)}\[(\w+)\]$")
    submitted = {}
    prefixed = {}
    for key, value in form.items():
        match = pattern.match(key)
        if match:
            prefixed[match.group(1)] = value
        elif key != "submit":
            submitted[key] = value
    submitted.update(prefixed)
    return submitted
