"""Tests for the /api/extract endpoint.

The FastAPI ``TestClient`` drives the app; ``respx`` stands in for both the
source page and the webhook, so no network is used.
"""

from __future__ import annotations

import logging
from typing import Generator
from unittest.mock import MagicMock

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from pagerelay.api.app import create_app
from pagerelay.config import Settings
from pagerelay.errors import DependencyUnavailableError
from pagerelay.relay import RelayHandler

_WEBHOOK = "https://hooks.example.com/relay"
_SOURCE = "https://example.com/post"
_HTML = (
    "<html><head><title>  Hi  </title></head><body><nav>X</nav>"
    "<main>Hello <script>evil()</script>World</main></body></html>"
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings() -> Settings:
    return Settings(webhook_url=_WEBHOOK)


@pytest.fixture()
def restore_logging():
    handlers = logging.root.handlers[:]
    level = logging.root.level
    yield
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    for handler in handlers:
        logging.root.addHandler(handler)
    logging.root.setLevel(level)


@pytest.fixture()
def client(settings: Settings) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class TestBadInput:
    def test_missing_url_returns_400(self, client: TestClient) -> None:
        resp = client.post("/api/extract", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "URL is required and must be a string"}

    def test_non_string_url_returns_400(self, client: TestClient) -> None:
        resp = client.post("/api/extract", json={"url": 42})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_non_object_body_returns_400(self, client: TestClient) -> None:
        resp = client.post("/api/extract", json=["https://example.com"])
        assert resp.status_code == 400

    def test_empty_body_returns_400(self, client: TestClient) -> None:
        resp = client.post("/api/extract")
        assert resp.status_code == 400

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        resp = client.post(
            "/api/extract",
            content=b'{"url": ',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Request body must be valid JSON"}


# ---------------------------------------------------------------------------
# Extraction failures
# ---------------------------------------------------------------------------

class TestExtractionFailure:
    def test_invalid_url_returns_500_with_source_url(self, client: TestClient) -> None:
        with respx.mock as router:
            resp = client.post("/api/extract", json={"url": "not a url"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["sourceUrl"] == "not a url"
        assert "Invalid URL format" in body["error"]
        assert router.calls.call_count == 0

    def test_404_returns_500_and_skips_webhook(self, client: TestClient) -> None:
        with respx.mock(assert_all_called=False) as router:
            router.get(_SOURCE).mock(return_value=httpx.Response(404))
            hook = router.post(_WEBHOOK).mock(return_value=httpx.Response(200))
            resp = client.post("/api/extract", json={"url": _SOURCE})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Failed to fetch content from URL. Server responded with status: 404",
            "sourceUrl": _SOURCE,
        }
        assert not hook.called


# ---------------------------------------------------------------------------
# Success / partial success
# ---------------------------------------------------------------------------

class TestRelay:
    def test_success(self, client: TestClient) -> None:
        with respx.mock:
            respx.get(_SOURCE).mock(return_value=httpx.Response(200, text=_HTML))
            respx.post(_WEBHOOK).mock(return_value=httpx.Response(200, text="Accepted"))
            resp = client.post("/api/extract", json={"url": _SOURCE})

        assert resp.status_code == 200
        assert resp.json() == {
            "title": "Hi",
            "content": "Hello World",
            "webhook_status": "success",
        }

    def test_webhook_500_is_partial_success(self, client: TestClient) -> None:
        with respx.mock:
            respx.get(_SOURCE).mock(return_value=httpx.Response(200, text=_HTML))
            respx.post(_WEBHOOK).mock(return_value=httpx.Response(500, text="down"))
            resp = client.post("/api/extract", json={"url": _SOURCE})

        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Hi"
        assert body["content"] == "Hello World"
        assert body["webhook_status"] == "failed"
        assert body["webhook_error"].startswith("Webhook notification failed:")
        assert "500" in body["webhook_error"]

    def test_unreachable_webhook_is_partial_success(self, client: TestClient) -> None:
        with respx.mock:
            respx.get(_SOURCE).mock(return_value=httpx.Response(200, text=_HTML))
            respx.post(_WEBHOOK).mock(side_effect=httpx.ConnectError("refused"))
            resp = client.post("/api/extract", json={"url": _SOURCE})

        assert resp.status_code == 200
        assert resp.json()["webhook_status"] == "failed"
        assert "Network error" in resp.json()["webhook_error"]


# ---------------------------------------------------------------------------
# App-level behaviour
# ---------------------------------------------------------------------------

class TestApp:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_unexpected_error_returns_500(self, settings: Settings) -> None:
        handler = MagicMock(spec=RelayHandler)
        handler.run.side_effect = RuntimeError("boom")
        app = create_app(settings, handler=handler)

        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.post("/api/extract", json={"url": _SOURCE})

        assert resp.status_code == 500
        assert resp.json() == {"error": "boom"}

    def test_factory_configures_logging_from_environment(
        self, monkeypatch, restore_logging
    ) -> None:
        for var in ("HTML_PARSER", "BOILERPLATE_PHRASES_FILE", "PAGERELAY_LOG_FILE"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("MAKE_WEBHOOK_URL", _WEBHOOK)
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        app = create_app()

        assert app.state.settings.log_level == "DEBUG"
        assert logging.root.level == logging.DEBUG

    def test_missing_parser_fails_at_start_up(self) -> None:
        settings = Settings(webhook_url=_WEBHOOK, html_parser="no-such-parser")
        with pytest.raises(DependencyUnavailableError):
            create_app(settings)
