"""
Shared fixtures for the Expressions Analytics test suite
"""

import json
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from config import Settings
from models import RemoteResult, SiteIdResult


class InMemoryStore:
    """Dict-backed stand-in for RedisClient with the same get/set/delete contract"""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data = dict(data or {})
        self.fail_writes = False

    def get(self, key: str) -> Optional[Any]:
        value = self.data.get(key)
        return json.loads(value) if value is not None else None

    def set(self, key: str, value: Any) -> bool:
        if self.fail_writes:
            return False
        self.data[key] = json.dumps(value)
        return True

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class RecordingResolver:
    """Site id resolver double that records its calls"""

    def __init__(self, result: SiteIdResult):
        self.result = result
        self.calls: List[tuple] = []

    def __call__(self, api_base_url: str, auth_token: str, site_url: str) -> SiteIdResult:
        self.calls.append((api_base_url, auth_token, site_url))
        return self.result


class RecordingFetcher:
    """Remote fetcher double returning a canned RemoteResult"""

    def __init__(self, result: RemoteResult):
        self.result = result
        self.urls: List[str] = []

    def __call__(self, url: str) -> RemoteResult:
        self.urls.append(url)
        return self.result


@pytest.fixture
def config() -> Settings:
    return Settings(
        _env_file=None,
        GOOGLE_GLOBAL_TRACKING_ID="UA-GLOBAL-1",
        GOOGLE_GLOBAL_TRACKING_NAMESPACE="global",
        PIWIK_GLOBAL_TRACKING_ID=1,
        PIWIK_GLOBAL_TRACKING_DOMAIN="*.example.edu",
        PIWIK_GLOBAL_TRACKING_REST_API="piwik.example.edu",
        PIWIK_REST_API_SCHEME="https",
        SITE_URL="https://blog.example.edu",
        SETTINGS_NAME="expana_settings",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver(SiteIdResult.success(7))


@pytest.fixture
def client(config, store, resolver):
    from main import app
    from routes import get_config, get_resolver, get_store

    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_resolver] = lambda: resolver
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
