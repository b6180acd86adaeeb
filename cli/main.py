"""PageRelay CLI entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    scrape   → extract a page and print it (no webhook call)
    relay    → extract a page and forward it to the webhook
    serve    → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from pagerelay.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import Optional

import typer

from pagerelay.config import Settings, load_settings, read_phrase_file
from pagerelay.errors import PageRelayError
from pagerelay.logging_setup import configure_logging
from pagerelay.scraper import require_html_parser

app = typer.Typer(
    name="pagerelay",
    help="Extract web page text and relay it to a webhook.",
    no_args_is_help=True,
)


def _settings(
    ctx: typer.Context,
    webhook: Optional[str] = None,
    phrases_file: Optional[Path] = None,
    max_length: Optional[int] = None,
) -> Settings:
    """Resolve settings, apply CLI overrides, configure logging, and run the
    start-up checks.
    """
    overrides: dict[str, object] = {}
    log_level = (ctx.obj or {}).get("log_level")
    if log_level:
        overrides["log_level"] = log_level
    if webhook:
        overrides["webhook_url"] = webhook
    if phrases_file:
        overrides["boilerplate_phrases"] = read_phrase_file(phrases_file)
    if max_length is not None:
        overrides["max_content_length"] = max_length
    settings = load_settings(**overrides)
    configure_logging(settings.log_level)
    require_html_parser(settings.html_parser)
    return settings


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, ...). Defaults to LOG_LEVEL.",
    ),
) -> None:
    """Record global options for the command that runs next."""
    ctx.ensure_object(dict)["log_level"] = log_level


# ---------------------------------------------------------------------------
# Scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    ctx: typer.Context,
    url: str = typer.Option(..., help="URL to scrape."),
    phrases_file: Optional[Path] = typer.Option(
        None,
        "--phrases-file",
        exists=True,
        dir_okay=False,
        help="File of boilerplate regexes, one per line.",
    ),
    max_length: Optional[int] = typer.Option(
        None, "--max-length", help="Truncate content beyond this many characters."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Scrape a URL and print the extracted title and text to stdout."""
    from pagerelay.scraper import extract

    try:
        settings = _settings(ctx, phrases_file=phrases_file, max_length=max_length)
        typer.echo(f"[scrape] Fetching {url!r} …", err=True)
        extracted = extract(url, settings)
    except PageRelayError as exc:
        typer.echo(f"❌ Error: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(extracted.as_dict(), ensure_ascii=False, indent=2))
        return

    typer.echo(f"[scrape] Title  : {extracted.title}")
    typer.echo(f"[scrape] Chars  : {len(extracted.content)}")
    typer.echo("")
    typer.echo(extracted.content)


# ---------------------------------------------------------------------------
# Relay
# ---------------------------------------------------------------------------
@app.command("relay")
def relay(
    ctx: typer.Context,
    url: str = typer.Option(..., help="URL to extract and forward."),
    webhook: Optional[str] = typer.Option(
        None, "--webhook", help="Override the webhook URL (defaults to MAKE_WEBHOOK_URL)."
    ),
) -> None:
    """Extract a URL and forward the result to the webhook."""
    from pagerelay.relay import RelayHandler

    try:
        handler = RelayHandler(_settings(ctx, webhook=webhook))
        result = handler.run(url)
    except PageRelayError as exc:
        typer.echo(f"❌ Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    if result.webhook_status == "failed":
        typer.echo(f"⚠️  {result.webhook_error}", err=True)
        raise typer.Exit(code=3)


# ---------------------------------------------------------------------------
# Serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from pagerelay.api import create_app

    try:
        api = create_app(_settings(ctx))
    except PageRelayError as exc:
        typer.echo(f"❌ Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[serve] Listening on http://{host}:{port}")
    uvicorn.run(api, host=host, port=port, log_config=None)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
