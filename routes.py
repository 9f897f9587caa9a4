from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
import logging

from config import Settings, settings
from models import AnalyticsSettings, SettingsSaveResponse, SettingsUpdate
from redis_client import RedisClient, get_redis_client
from tracker.admin import parse_submitted, render_settings_page
from tracker.settings import Resolver, SettingsRepository, sanitize
from tracker.snippets import render_tracking_code
from utils.clients.piwik import resolve_site_id

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


# ======================
# Dependencies
# ======================

def get_config() -> Settings:
    return settings


def get_store() -> RedisClient:
    """Settings storage; 503 when Redis is unreachable"""
    try:
        return get_redis_client()
    except RuntimeError as e:
        logger.error(f"Settings storage unavailable: {str(e)}")
        raise HTTPException(status_code=503, detail=f"Settings storage unavailable: {str(e)}")


def get_repository(
    store: RedisClient = Depends(get_store),
    config: Settings = Depends(get_config),
) -> SettingsRepository:
    """One repository, and so one settings load, per request"""
    return SettingsRepository(store, config.SETTINGS_NAME)


def get_resolver() -> Resolver:
    return resolve_site_id


def _sanitize_and_save(
    repository: SettingsRepository,
    submitted: dict,
    config: Settings,
    resolver: Resolver,
) -> SettingsSaveResponse:
    messages = []
    updated = sanitize(
        repository.load(), submitted, config=config, resolver=resolver, messages=messages
    )
    if not repository.save(updated):
        raise HTTPException(status_code=503, detail="Failed to save settings")
    return SettingsSaveResponse(settings=updated, messages=messages)


# ======================
# Service
# ======================

@router.get("/")
async def root():
    return {
        "service": "Expressions Analytics",
        "status": "running",
        "endpoints": {
            "tracking_code": "/tracking-code (GET)",
            "admin": "/admin/settings (GET, POST)",
            "settings": "/settings (GET, PUT, DELETE)",
        },
    }


@router.get("/health")
async def health_check():
    return {"status": "healthy"}


@router.get("/status/detailed")
def detailed_status_check(config: Settings = Depends(get_config)):
    """
    Status check with settings storage health and which tracking paths are
    configured.
    """
    status_info = {
        "api": "healthy",
        "redis": "unknown",
        "piwik_global_tracking": "enabled" if config.piwik_global_tracking_enabled else "disabled",
        "google_global_tracking": "enabled" if config.google_global_tracking_enabled else "disabled",
        "piwik_rest_api": "configured" if config.piwik_rest_api_url else "missing",
    }

    try:
        redis_client = get_redis_client()
        if redis_client.ping():
            status_info["redis"] = "connected"
            status_info["redis_stats"] = redis_client.get_stats()
        else:
            status_info["redis"] = "disconnected"
    except RuntimeError as e:
        status_info["redis"] = f"error: {str(e)}"

    if status_info["redis"] == "connected":
        status_info["overall_status"] = "healthy"
    else:
        status_info["overall_status"] = "degraded"

    return status_info


# ======================
# Tracking code
# ======================

@router.get("/tracking-code", response_class=HTMLResponse)
def tracking_code(
    repository: SettingsRepository = Depends(get_repository),
    config: Settings = Depends(get_config),
):
    """
    Tracking code for the page footer, appended to page output as-is.
    Empty when no provider is configured.
    """
    return HTMLResponse(render_tracking_code(config, repository.load()))


# ======================
# Admin settings page
# ======================

@router.get("/admin/settings", response_class=HTMLResponse)
def admin_settings_page(
    repository: SettingsRepository = Depends(get_repository),
    config: Settings = Depends(get_config),
):
    return HTMLResponse(
        render_settings_page(repository.load(), config.SETTINGS_NAME, action="/admin/settings")
    )


@router.post("/admin/settings", response_class=HTMLResponse)
async def admin_settings_submit(
    request: Request,
    repository: SettingsRepository = Depends(get_repository),
    config: Settings = Depends(get_config),
    resolver: Resolver = Depends(get_resolver),
):
    """
    Sanitize and save the submitted settings form, then show the form again
    with any notices from the save.
    """
    form = await request.form()
    submitted = parse_submitted(form, config.SETTINGS_NAME)

    result = await run_in_threadpool(
        _sanitize_and_save, repository, submitted, config, resolver
    )
    messages = result.messages or ["Settings saved."]
    return HTMLResponse(
        render_settings_page(
            result.settings, config.SETTINGS_NAME, messages, action="/admin/settings"
        )
    )


# ======================
# Settings API
# ======================

@router.get("/settings", response_model=AnalyticsSettings)
def get_settings(repository: SettingsRepository = Depends(get_repository)):
    return repository.load()


@router.put("/settings", response_model=SettingsSaveResponse)
def update_settings(
    update: SettingsUpdate,
    repository: SettingsRepository = Depends(get_repository),
    config: Settings = Depends(get_config),
    resolver: Resolver = Depends(get_resolver),
):
    """
    Replace the editable settings. Fields left out fall back to their
    defaults, exactly like a form submission.
    """
    return _sanitize_and_save(
        repository, update.model_dump(exclude_none=True), config, resolver
    )


@router.delete("/settings")
def reset_settings(
    field: Optional[str] = None,
    repository: SettingsRepository = Depends(get_repository),
):
    """Reset one setting to its default, or delete all settings."""
    try:
        reset = repository.reset(field)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown setting: {field}")

    if not reset:
        raise HTTPException(status_code=503, detail=f"Failed to reset setting: {field}")

    return {
        "status": "reset",
        "field": field,
        "settings": repository.load(),
    }
