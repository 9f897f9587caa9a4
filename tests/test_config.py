"""
Tests for configuration parsing
"""

from config import Settings


def make(**overrides):
    return Settings(_env_file=None, **overrides)


def test_defaults():
    config = make()

    assert config.PIWIK_GLOBAL_TRACKING_ID == 1
    assert config.PIWIK_GLOBAL_TRACKING_DOMAIN == "*.syr.edu"
    assert config.EXTERNAL_API_TIMEOUT == 30
    assert config.EXTERNAL_API_DISABLE_SSL_VERIFICATION is False


def test_invalid_global_values_disable_tracking():
    config = make(
        GOOGLE_GLOBAL_TRACKING_ID="   ",
        PIWIK_GLOBAL_TRACKING_ID="one",
        PIWIK_GLOBAL_TRACKING_DOMAIN=42,
        PIWIK_GLOBAL_TRACKING_REST_API="piwik.example.edu",
    )

    assert config.GOOGLE_GLOBAL_TRACKING_ID is None
    assert config.PIWIK_GLOBAL_TRACKING_ID is None
    assert config.PIWIK_GLOBAL_TRACKING_DOMAIN is None
    assert not config.google_global_tracking_enabled
    assert not config.piwik_global_tracking_enabled


def test_piwik_id_from_string():
    assert make(PIWIK_GLOBAL_TRACKING_ID="12").PIWIK_GLOBAL_TRACKING_ID == 12
    assert make(PIWIK_GLOBAL_TRACKING_ID=True).PIWIK_GLOBAL_TRACKING_ID is None
    assert make(PIWIK_GLOBAL_TRACKING_ID=-2).PIWIK_GLOBAL_TRACKING_ID is None


def test_piwik_enabled_needs_rest_api():
    assert not make(PIWIK_GLOBAL_TRACKING_REST_API=None).piwik_global_tracking_enabled
    assert make(PIWIK_GLOBAL_TRACKING_REST_API="piwik.example.edu").piwik_global_tracking_enabled


def test_rest_api_url_and_site_domain():
    config = make(
        PIWIK_GLOBAL_TRACKING_REST_API="piwik.example.edu/analytics",
        PIWIK_REST_API_SCHEME="http",
        SITE_URL="https://blog.example.edu/path",
    )

    assert config.piwik_rest_api_url == "http://piwik.example.edu/analytics"
    assert config.site_domain == "blog.example.edu"
    assert make(PIWIK_GLOBAL_TRACKING_REST_API=None).piwik_rest_api_url is None


def test_piwik_id_non_decimal_digits_disable_tracking():
    config = make(
        PIWIK_GLOBAL_TRACKING_ID="²",
        PIWIK_GLOBAL_TRACKING_REST_API="piwik.example.edu",
    )

    assert config.PIWIK_GLOBAL_TRACKING_ID is None
    assert not config.piwik_global_tracking_enabled
