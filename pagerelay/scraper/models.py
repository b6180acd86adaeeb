"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass

NO_TITLE = "No Title Found"
NO_CONTENT = "No discernible text content extracted."
TRUNCATION_MARKER = "... (truncated)"


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class ExtractedContent:
    """Title and flattened plain-text body extracted from a :class:`RawPage`."""

    title: str
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"title": self.title, "content": self.content}
