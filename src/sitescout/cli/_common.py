"""Common CLI utilities and the main app group."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from sitescout.utils import JSONFormatter

console = Console(stderr=True)
_configured = False


def configure_logging(*, verbose: bool = False, json_logs: bool = False) -> None:
    """Configure logging with Rich handler (or JSON lines on stderr). Call once at startup."""
    global _configured
    if _configured:
        return

    handler: logging.Handler
    if json_logs:
        handler = logging.StreamHandler(console.file)
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
        )

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _configured = True


@click.group(help="Discover the URLs of a website from its sitemaps, or by crawling.")
def app() -> None:
    """
    Entry point for the sitescout CLI.

    Provides commands for extracting a site's URLs and categorising URL lists.
    """
