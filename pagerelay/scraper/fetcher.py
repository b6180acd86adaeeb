"""HTTP fetcher for source pages.

The fetcher is the only place that talks to ``httpx`` on the extraction side,
so it is also where transport failures are told apart from status failures:
connection-level problems raise :class:`~pagerelay.errors.FetchNetworkError`,
non-2xx answers raise :class:`~pagerelay.errors.FetchError` with the status.
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

import httpx
from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from pagerelay.config import DEFAULT_USER_AGENT
from pagerelay.errors import FetchError, FetchNetworkError, InvalidUrlError
from pagerelay.scraper.models import RawPage

logger = logging.getLogger(__name__)

# No length cap: long query strings are still well-formed URLs.
_HTTP_URL = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def build_headers(
    user_agent: str = DEFAULT_USER_AGENT,
    accept_language: str = "en-US,en;q=0.5",
) -> dict[str, str]:
    """Return browser-like request headers.

    Some origins reject requests that carry an empty or library-default
    ``User-Agent``.
    """
    return {
        "User-Agent": user_agent,
        "Accept": _ACCEPT,
        "Accept-Language": accept_language,
    }


def validate_url(url: str) -> str:
    """Return *url* unchanged if it is a well-formed absolute http(s) URL.

    Raises:
        InvalidUrlError: Otherwise.  No network call is made.
    """
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError as exc:
        logger.error("Invalid URL format: %r", url)
        raise InvalidUrlError(
            "Invalid URL format. Please provide a valid URL.", source_url=url
        ) from exc
    return url


def fetch_url(
    url: str,
    timeout: float = 20.0,
    headers: Optional[dict[str, str]] = None,
) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    Redirects are followed.  *url* must already have passed
    :func:`validate_url`.

    Raises:
        FetchError: If the server answers with a non-2xx status.
        FetchNetworkError: If the server cannot be reached or times out.
    """
    logger.info("Fetching content for URL: %s", url)
    try:
        with httpx.Client(
            headers=headers or build_headers(),
            timeout=timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            html = response.text
    except httpx.TransportError as exc:
        logger.error("Network error fetching %s: %s", url, exc)
        raise FetchNetworkError(
            f"Network error while fetching URL: {exc}. "
            "Ensure the server can access this URL and the URL is correct.",
            source_url=url,
        ) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise FetchError(f'Failed to process URL "{url}": {exc}', source_url=url) from exc

    if not response.is_success:
        logger.error("HTTP error fetching URL %s. Status: %s", url, response.status_code)
        raise FetchError(
            "Failed to fetch content from URL. "
            f"Server responded with status: {response.status_code}",
            source_url=url,
            status_code=response.status_code,
        )

    return RawPage(url=url, html=html, status_code=response.status_code)
