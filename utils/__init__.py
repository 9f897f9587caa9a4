# Utils package - Utility modules organized by domain
# Import from subpackages for convenience

from .clients.remote import fetch
from .clients.piwik import resolve_site_id

__all__ = [
    "fetch",
    "resolve_site_id",
]
