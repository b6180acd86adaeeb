"""Centralised settings for PageRelay.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

Settings are resolved once, by :func:`load_settings`, and the resulting object
is handed explicitly to :func:`~pagerelay.api.app.create_app` and
:class:`~pagerelay.relay.RelayHandler`.  Nothing reads the environment per
request.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

from pagerelay.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_WEBHOOK_URL = "http://localhost:9000/webhook"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

# Site chrome of the Turkish news portals this tool was first tuned against.
# Order matters: the combined share bar goes before its individual labels.
DEFAULT_BOILERPLATE_PHRASES: List[str] = [
    r"URL Copied",
    r"Editör",
    r"Bir e-posta göndermek",
    r"4 saat önce",
    r"Son güncelleme: Mayıs 6, 2025",
    r"1 dakika okuma süresi",
    r"Paylaş Facebook LinkedIn WhatsApp Telegram E-Posta ile paylaş Yazdır",
    r"Paylaş",
    r"Facebook",
    r"LinkedIn",
    r"WhatsApp",
    r"Telegram",
    r"E-Posta ile paylaş",
    r"Yazdır",
]


def read_phrase_file(path: Path) -> List[str]:
    """Return the patterns listed in *path*, one regex per line.

    Blank lines and lines starting with ``#`` are ignored.  Surrounding
    whitespace is stripped, so a pattern cannot start or end with a space.
    """
    patterns: List[str] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def compile_phrases(phrases: Iterable[str]) -> List[re.Pattern[str]]:
    """Compile boilerplate patterns, case-insensitively, keeping their order.

    Raises:
        ConfigurationError: If a pattern is not a valid regular expression.
    """
    patterns: List[re.Pattern[str]] = []
    for phrase in phrases:
        try:
            patterns.append(re.compile(phrase, re.IGNORECASE))
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid boilerplate pattern {phrase!r}: {exc}"
            ) from exc
    return patterns


def _phrases_from_env() -> List[str]:
    phrase_file = os.environ.get("BOILERPLATE_PHRASES_FILE")
    if phrase_file:
        return read_phrase_file(Path(phrase_file))
    return list(DEFAULT_BOILERPLATE_PHRASES)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Outbound webhook
    # ------------------------------------------------------------------
    webhook_url: str = field(
        default_factory=lambda: os.environ.get("MAKE_WEBHOOK_URL") or DEFAULT_WEBHOOK_URL
    )
    webhook_timeout: float = field(
        default_factory=lambda: float(os.environ.get("WEBHOOK_TIMEOUT", "15.0"))
    )

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "20.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("FETCH_USER_AGENT", DEFAULT_USER_AGENT)
    )
    accept_language: str = field(
        default_factory=lambda: os.environ.get("FETCH_ACCEPT_LANGUAGE", "en-US,en;q=0.5")
    )
    html_parser: str = field(
        default_factory=lambda: os.environ.get("HTML_PARSER", "html.parser")
    )

    # ------------------------------------------------------------------
    # Content cleaning
    # ------------------------------------------------------------------
    max_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_LENGTH", "10000"))
    )
    boilerplate_phrases: List[str] = field(default_factory=_phrases_from_env)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    # Compiled from boilerplate_phrases; a bad pattern fails here, at start-up.
    phrase_patterns: List[re.Pattern[str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.phrase_patterns = compile_phrases(self.boilerplate_phrases)

    @property
    def webhook_is_default(self) -> bool:
        """``True`` when no webhook override was configured."""
        return self.webhook_url == DEFAULT_WEBHOOK_URL


def load_settings(**overrides: object) -> Settings:
    """Resolve a :class:`Settings` from the environment.

    Keyword arguments replace individual fields, e.g.
    ``load_settings(webhook_url="https://hooks.example.com/x")``.

    Raises:
        ConfigurationError: If a boilerplate pattern does not compile.
    """
    settings = Settings(**overrides)  # type: ignore[arg-type]
    if settings.webhook_is_default:
        logger.warning(
            "MAKE_WEBHOOK_URL is not set. Using default webhook URL: %s",
            DEFAULT_WEBHOOK_URL,
        )
    else:
        logger.info("Using configured webhook URL: %s", settings.webhook_url)
    return settings