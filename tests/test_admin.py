"""
Tests for the admin settings form
"""

from models import AnalyticsSettings
from tracker.admin import (
    FieldDescriptor,
    build_sections,
    parse_submitted,
    render_field,
    render_settings_page,
)


def test_sections_describe_both_providers():
    sections = build_sections(
        AnalyticsSettings(piwik_auth_token="tok", google_web_property_id="UA-9")
    )

    assert [s.title for s in sections] == ["Piwik Analytics", "Google Analytics"]
    piwik_field = sections[0].fields[0]
    assert piwik_field.field_key == "piwik_auth_token"
    assert piwik_field.label == "Auth Token"
    assert piwik_field.input_type == "text"
    assert piwik_field.css_class == "regular-text code"
    assert piwik_field.current_value == "tok"
    assert sections[1].fields[0].current_value == "UA-9"


def test_render_text_field():
    field = FieldDescriptor(field_key="piwik_auth_token", label="Auth Token", current_value="abc")

    assert render_field("expana_settings", field) == (
        '<input type="text" id="piwik_auth_token" class="regular-text code" '
        'name="expana_settings[piwik_auth_token]" value="abc" />'
    )


def test_render_field_escapes_value():
    field = FieldDescriptor(field_key="piwik_auth_token", label="Auth Token", current_value='"><script>')

    output = render_field("expana_settings", field)

    assert "<script>" not in output
    assert 'value="&quot;&gt;&lt;script&gt;"' in output


def test_render_unknown_input_type_is_empty():
    field = FieldDescriptor(field_key="x", label="X", input_type="checkbox")

    assert render_field("expana_settings", field) == ""


def test_settings_page_includes_fields_and_messages():
    page = render_settings_page(
        AnalyticsSettings(piwik_auth_token="tok"),
        "expana_settings",
        messages=["API error"],
        action="/admin/settings",
    )

    assert "<h2>Expressions Analytics</h2>" in page
    assert 'name="expana_settings[piwik_auth_token]"' in page
    assert 'name="expana_settings[google_web_property_id]"' in page
    assert "<p>API error</p>" in page
    assert 'action="/admin/settings"' in page
    assert 'value="Save Changes"' in page


def test_parse_submitted_prefixed_keys():
    form = {
        "expana_settings[piwik_auth_token]": " tok ",
        "expana_settings[google_web_property_id]": "UA-9",
        "submit": "Save Changes",
    }

    assert parse_submitted(form, "expana_settings") == {
        "piwik_auth_token": " tok ",
        "google_web_property_id": "UA-9",
    }


def test_parse_submitted_bare_keys_and_precedence():
    form = {
        "piwik_auth_token": "bare",
        "expana_settings[piwik_auth_token]": "prefixed",
        "google_web_property_id": "UA-9",
    }

    assert parse_submitted(form, "expana_settings") == {
        "piwik_auth_token": "prefixed",
        "google_web_property_id": "UA-9",
    }
