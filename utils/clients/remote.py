"""
Remote request client for Expressions Analytics.

Fetches an external URL with a single GET and reports the outcome as a
RemoteResult instead of raising. Redirects are followed (requests default);
there is exactly one attempt and no retry.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

import requests
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from config import settings
from models import ErrorKind, RemoteResult

logger = logging.getLogger(__name__)

# AnyHttpUrl: same http(s) rules as HttpUrl without its 2083 character cap
_url_adapter = TypeAdapter(AnyHttpUrl)


def is_valid_url(url: str) -> bool:
    """Check that url is an absolute http(s) URL."""
    if not isinstance(url, str) or not url or url != url.strip():
        return False
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        return False
    return True


def fetch(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[int] = None,
    verify: Optional[bool] = None,
    user_agent: Optional[str] = None,
) -> RemoteResult:
    """
    Fetch an external URL and return the body or an error message.

    The HTTP status code is not inspected: any response counts as success.

    Args:
        url: Absolute URL to fetch
        session: Transport to use (a fresh requests call when None)
        timeout: Seconds to wait (defaults to EXTERNAL_API_TIMEOUT)
        verify: Verify TLS peers (defaults to not EXTERNAL_API_DISABLE_SSL_VERIFICATION)
        user_agent: User agent header (defaults to EXTERNAL_API_USER_AGENT)

    Returns:
        RemoteResult with the body on success, or the error kind and message
    """
    if not is_valid_url(url):
        return RemoteResult.failure(ErrorKind.INVALID_URL, "Invalid URL")

    if timeout is None:
        timeout = settings.EXTERNAL_API_TIMEOUT
    if verify is None:
        verify = not settings.EXTERNAL_API_DISABLE_SSL_VERIFICATION
    if user_agent is None:
        user_agent = settings.EXTERNAL_API_USER_AGENT

    # Rely on the transport default user agent when none is configured
    headers = {"User-Agent": user_agent} if user_agent else None
    transport = session if session is not None else requests

    try:
        response = transport.get(
            url,
            headers=headers,
            timeout=timeout,
            verify=verify,
            allow_redirects=True,
        )
    except requests.RequestException as e:
        # The query string may carry auth tokens
        logger.warning(f"Remote request failed for {urlparse(url).netloc}: {str(e)}")
        return RemoteResult.failure(ErrorKind.TRANSPORT_FAILURE, str(e) or "Remote request failed")

    return RemoteResult.success(response.text)
