"""Outbound webhook payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from pagerelay.scraper.models import ExtractedContent


def _utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class NotificationPayload:
    """The JSON document POSTed to the webhook for one extracted page."""

    source_url: str
    title: str
    content: str
    timestamp: str = field(default_factory=_utc_timestamp)

    @classmethod
    def from_content(cls, source_url: str, extracted: ExtractedContent) -> NotificationPayload:
        return cls(source_url=source_url, title=extracted.title, content=extracted.content)

    def as_dict(self) -> dict[str, str]:
        """Return the wire representation (camel-case ``sourceUrl``)."""
        return {
            "sourceUrl": self.source_url,
            "title": self.title,
            "content": self.content,
            "timestamp": self.timestamp,
        }
