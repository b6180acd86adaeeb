"""Scraper package: web fetch and content extraction."""

from pagerelay.scraper.capabilities import require_html_parser
from pagerelay.scraper.extractor import extract, extract_content
from pagerelay.scraper.fetcher import fetch_url, validate_url
from pagerelay.scraper.models import ExtractedContent, RawPage

__all__ = [
    "extract",
    "extract_content",
    "fetch_url",
    "validate_url",
    "require_html_parser",
    "ExtractedContent",
    "RawPage",
]
