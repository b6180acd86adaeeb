"""Content extraction: turns a :class:`RawPage` into :class:`ExtractedContent`.

Pipeline (see :func:`extract_content`):

    parse → title → main-content root → strip noise → flatten text
          → drop boilerplate phrases → normalise whitespace → truncate

:func:`extract` wraps it with URL validation and the HTTP fetch.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from bs4 import BeautifulSoup, Tag

from pagerelay.config import DEFAULT_BOILERPLATE_PHRASES, Settings, compile_phrases
from pagerelay.errors import ExtractionError, ParseError
from pagerelay.scraper.fetcher import build_headers, fetch_url, validate_url
from pagerelay.scraper.models import (
    NO_CONTENT,
    NO_TITLE,
    TRUNCATION_MARKER,
    ExtractedContent,
    RawPage,
)

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 10_000

# Elements whose text never belongs to the article body.
NOISE_SELECTOR = ", ".join(
    [
        "script",
        "style",
        "noscript",
        "iframe",
        "header",
        "footer",
        "nav",
        "aside",
        "form",
        "button",
        "input",
        "select",
        "textarea",
        '[aria-hidden="true"]',
        "[hidden]",
    ]
)

_BLANK_LINES = re.compile(r"\n\s*\n+")
_WHITESPACE_RUN = re.compile(r"\s\s+")

_DEFAULT_PATTERNS = compile_phrases(DEFAULT_BOILERPLATE_PHRASES)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(soup: BeautifulSoup) -> str:
    """Return the trimmed text of the first ``<title>``, or the placeholder."""
    title_tag = soup.find("title")
    if title_tag is None:
        return NO_TITLE
    return title_tag.get_text().strip() or NO_TITLE


def _select_root(soup: BeautifulSoup) -> Tag:
    """Pick the main-content root: ``main``, ``article``, ``[role=main]``, body.

    First match wins.  Documents without a ``<body>`` (bare fragments under
    ``html.parser``) fall back to the whole tree minus its ``<head>``.
    """
    root = (
        soup.find("main")
        or soup.find("article")
        or soup.find(attrs={"role": "main"})
        or soup.body
    )
    if root is not None:
        return root

    for tag in soup.find_all(["head", "title"]):
        tag.extract()
    return soup


def _strip_noise(root: Tag) -> None:
    """Detach every descendant of *root* matching :data:`NOISE_SELECTOR`."""
    for element in root.select(NOISE_SELECTOR):
        element.extract()


def _remove_phrases(text: str, patterns: Sequence[re.Pattern[str]]) -> str:
    for pattern in patterns:
        text = pattern.sub("", text)
    return text


def _normalise_whitespace(text: str) -> str:
    text = _BLANK_LINES.sub("\n", text).strip()
    return _WHITESPACE_RUN.sub(" ", text).strip()


def _truncate(text: str, max_length: int) -> str:
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_content(
    raw: RawPage,
    phrases: Optional[Sequence[re.Pattern[str]]] = None,
    max_length: int = MAX_CONTENT_LENGTH,
    parser: str = "html.parser",
) -> ExtractedContent:
    """Extract the title and cleaned plain-text body of *raw*.

    A pure function of ``raw.html``: the same document always produces the
    same result.

    Args:
        raw: The fetched page.
        phrases: Compiled boilerplate patterns, applied in order.  Defaults
            to the built-in list.
        max_length: Content longer than this is cut and suffixed with
            :data:`~pagerelay.scraper.models.TRUNCATION_MARKER`.
        parser: BeautifulSoup tree-builder feature.

    Raises:
        ParseError: If building or walking the document tree fails.
    """
    patterns = _DEFAULT_PATTERNS if phrases is None else phrases
    try:
        soup = BeautifulSoup(raw.html, parser)
        title = _extract_title(soup)

        root = _select_root(soup)
        _strip_noise(root)
        text = root.get_text()
    except Exception as exc:
        logger.error("Error parsing content from %s: %s", raw.url, exc)
        raise ParseError(
            f'Failed to process URL "{raw.url}": {exc}', source_url=raw.url
        ) from exc

    text = _remove_phrases(text, patterns)
    text = _normalise_whitespace(text)
    text = _truncate(text, max_length)

    return ExtractedContent(title=title, content=text or NO_CONTENT)


def extract(url: str, settings: Settings) -> ExtractedContent:
    """Validate, fetch and extract *url* using the resolved *settings*.

    Raises:
        InvalidUrlError: If *url* is malformed; nothing is fetched.
        FetchError: If the page cannot be retrieved.
        ParseError: If the document cannot be processed.
    """
    validate_url(url)
    raw = fetch_url(
        url,
        timeout=settings.request_timeout,
        headers=build_headers(settings.user_agent, settings.accept_language),
    )
    try:
        return extract_content(
            raw,
            phrases=settings.phrase_patterns,
            max_length=settings.max_content_length,
            parser=settings.html_parser,
        )
    except ExtractionError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error extracting %s", url)
        raise ParseError(f'Failed to process URL "{url}": {exc}', source_url=url) from exc
