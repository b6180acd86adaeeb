"""Exception hierarchy shared by the scraper, the notifier and the callers.

Low-level ``httpx`` and parser exceptions never leave the module that caught
them: each is converted, at the point of failure, into one of the classes
below and chained with ``raise ... from exc``.
"""

from __future__ import annotations

from typing import Optional


class PageRelayError(Exception):
    """Base class for every error raised by PageRelay."""


class InvalidInputError(PageRelayError):
    """The request did not carry a usable ``url`` field."""


class DependencyUnavailableError(PageRelayError):
    """A required runtime capability (e.g. the HTML parser) is missing."""


class ConfigurationError(PageRelayError):
    """A configured value cannot be used, e.g. a malformed boilerplate regex."""


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class ExtractionError(PageRelayError):
    """Retrieving or parsing the source page failed.

    ``source_url`` is the URL exactly as the caller supplied it.
    """

    def __init__(self, message: str, source_url: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source_url = source_url


class InvalidUrlError(ExtractionError):
    """The URL is not a well-formed absolute http(s) URL."""


class FetchError(ExtractionError):
    """The page could not be retrieved.

    ``status_code`` is set when the origin answered with a non-2xx status and
    is ``None`` for transport-level failures.
    """

    def __init__(
        self,
        message: str,
        source_url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, source_url=source_url)
        self.status_code = status_code


class FetchNetworkError(FetchError):
    """The origin could not be reached at all (DNS, refused, timeout)."""


class ParseError(ExtractionError):
    """Building or walking the document tree failed."""


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------

class NotificationError(PageRelayError):
    """The webhook rejected the payload."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class NotificationNetworkError(NotificationError):
    """The webhook endpoint could not be reached."""
