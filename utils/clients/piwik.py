"""
Piwik REST API client for Expressions Analytics.

Resolves the Piwik site id registered for this site's URL. Every outcome is
returned as a SiteIdResult; nothing here raises on remote failures.
"""

import json
import logging
from typing import Any, Callable, Dict
from urllib.parse import urlencode

from config import settings
from models import ErrorKind, RemoteResult, SiteIdResult, parse_site_id
from utils.clients.remote import fetch

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], RemoteResult]

DEFAULT_QUERY = {
    "module": "API",
    "format": "JSON",
}

SITES_ID_FROM_SITE_URL = "SitesManager.getSitesIdFromSiteUrl"

# Sentinel so callers can pass None to mean "no global id configured"
_CONFIGURED = object()


def build_query_url(rest_api_url: str, query: Dict[str, Any]) -> str:
    """Append the query to the REST API base, filling in module and format."""
    params = {**DEFAULT_QUERY, **query}
    return rest_api_url.rstrip("/") + "/?" + urlencode(params)


def query_piwik_api(
    rest_api_url: str,
    query: Dict[str, Any],
    fetcher: Fetcher = fetch,
) -> RemoteResult:
    """Query the Piwik API with the given parameters."""
    return fetcher(build_query_url(rest_api_url, query))


def resolve_site_id(
    api_base_url: str,
    auth_token: str,
    site_url: str,
    global_site_id: Any = _CONFIGURED,
    fetcher: Fetcher = fetch,
) -> SiteIdResult:
    """
    Query the Piwik API for the site id associated with site_url.

    The first integer-like idsite that differs from the global tracking id
    wins, in the order the API returned the records.

    Args:
        api_base_url: Full REST API base URL (with protocol)
        auth_token: Piwik token_auth
        site_url: URL of the site to look up
        global_site_id: Id to skip (defaults to PIWIK_GLOBAL_TRACKING_ID)
        fetcher: Transport returning a RemoteResult

    Returns:
        SiteIdResult with the site id, or the error kind and message
    """
    if global_site_id is _CONFIGURED:
        global_site_id = settings.PIWIK_GLOBAL_TRACKING_ID

    result = query_piwik_api(
        api_base_url,
        {
            "token_auth": auth_token,
            "method": SITES_ID_FROM_SITE_URL,
            "url": site_url,
        },
        fetcher=fetcher,
    )

    if not result.ok or not result.body:
        logger.warning(f"Piwik API request failed: {result.message}")
        return SiteIdResult.failure(
            ErrorKind.TRANSPORT_FAILURE, "Failed to connect to the API"
        )

    try:
        content = json.loads(result.body)
    except (json.JSONDecodeError, TypeError):
        content = None

    if not isinstance(content, (list, dict)):
        logger.warning("Piwik API returned a body that is not a JSON array")
        return SiteIdResult.failure(
            ErrorKind.MALFORMED_RESPONSE, "API returned an invalid response"
        )

    if isinstance(content, dict):
        if content.get("result") == "error":
            logger.warning(f"Piwik API error: {content.get('message', 'unknown')}")
            return SiteIdResult.failure(ErrorKind.REMOTE_API_ERROR, "API error")
        sites = list(content.values())
    else:
        sites = content

    for site in sites:
        if not isinstance(site, dict) or "idsite" not in site:
            continue
        site_id = parse_site_id(site["idsite"])
        if site_id is not None and site_id != global_site_id:
            logger.info(f"Resolved Piwik site id {site_id} for {site_url}")
            return SiteIdResult.success(site_id)

    return SiteIdResult.failure(
        ErrorKind.NO_MATCHING_SITE, "No site associated with this URL"
    )
