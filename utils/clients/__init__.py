# Clients subpackage - External API clients
from .remote import fetch, is_valid_url
from .piwik import build_query_url, query_piwik_api, resolve_site_id

__all__ = [
    "fetch",
    "is_valid_url",
    "build_query_url",
    "query_piwik_api",
    "resolve_site_id",
]
