"""Start-up check that the HTML parsing stack is usable."""

from __future__ import annotations

import importlib

from pagerelay.errors import DependencyUnavailableError


def require_html_parser(feature: str = "html.parser") -> None:
    """Fail fast unless BeautifulSoup can build trees with *feature*.

    *feature* is anything :class:`bs4.BeautifulSoup` accepts as its
    ``features`` argument (``"html.parser"``, ``"lxml"``, ``"html5lib"``).

    Raises:
        DependencyUnavailableError: If ``bs4`` is not installed or no tree
            builder is registered for *feature*.
    """
    try:
        bs4 = importlib.import_module("bs4")
    except ImportError as exc:
        raise DependencyUnavailableError(
            "HTML parsing requires 'beautifulsoup4'. Install it with "
            "`pip install beautifulsoup4`."
        ) from exc

    if bs4.builder.builder_registry.lookup(feature) is None:
        raise DependencyUnavailableError(
            f"No HTML tree builder is available for parser {feature!r}. "
            "Install the matching package (e.g. 'lxml' or 'html5lib') or set "
            "HTML_PARSER=html.parser."
        )
