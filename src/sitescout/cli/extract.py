"""URL extraction command."""

from pathlib import Path

import click

from sitescout.cli._common import app, configure_logging


@app.command("extract", help="Discover the URLs of a website.")
@click.argument("url")
@click.option(
    "--max-urls",
    type=int,
    default=None,
    help="Maximum number of URLs to discover (1-10000). Default: 1000 or SITESCOUT_MAX_URLS.",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=int,
    default=None,
    help="Overall timeout in seconds (1-600). Default: 300 or SITESCOUT_TIMEOUT_SECONDS.",
)
@click.option(
    "--user-agent",
    type=str,
    default=None,
    help="User-Agent header, also used to select robots.txt rules. Also reads SITESCOUT_USER_AGENT env.",
)
@click.option(
    "--crawl-delay",
    "crawl_delay_ms",
    type=int,
    default=None,
    help="Delay between crawled pages in ms (0-5000). Default: 100 or SITESCOUT_CRAWL_DELAY_MS.",
)
@click.option(
    "--force-crawl",
    is_flag=True,
    default=False,
    help="Crawl the site even when sitemaps already provided URLs.",
)
@click.option(
    "--categorize",
    is_flag=True,
    default=False,
    help="Detect standard pages (home, contact, about, ...) among the results.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: json (full result) or text (URLs only).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file path. If omitted, prints to stdout.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.option("--json-logs", is_flag=True, default=False, help="Emit logs as JSON lines on stderr.")
def extract_cmd(
    url: str,
    max_urls: int | None,
    timeout_seconds: int | None,
    user_agent: str | None,
    crawl_delay_ms: int | None,
    force_crawl: bool,
    categorize: bool,
    output_format: str,
    output: Path | None,
    verbose: bool,
    json_logs: bool,
) -> None:
    """Extract the URLs of a website.

    Examples:
        sitescout extract example.com
        sitescout extract https://example.com --max-urls 50 --format json
        sitescout extract example.com --force-crawl --categorize --output urls.json --format json
    """
    import asyncio
    import json
    import sys

    from pydantic import ValidationError

    from sitescout.config import get_settings
    from sitescout.discovery.categorizer import categorize_urls, standard_pages_summary
    from sitescout.exceptions import SitescoutError
    from sitescout.models import ExtractionRequest
    from sitescout.services.extract import ExtractService

    configure_logging(verbose=verbose, json_logs=json_logs)

    try:
        settings = get_settings()
        request = ExtractionRequest(
            url=url,
            max_urls=max_urls if max_urls is not None else settings.max_urls,
            timeout_seconds=timeout_seconds if timeout_seconds is not None else settings.timeout_seconds,
            user_agent=user_agent or settings.user_agent,
            crawl_delay_ms=crawl_delay_ms if crawl_delay_ms is not None else settings.crawl_delay_ms,
            force_crawl=force_crawl,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        click.echo(f"Error: invalid {field}: {first['msg']}", err=True)
        raise SystemExit(1) from e
    except SitescoutError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    show_progress = sys.stderr.isatty() and not json_logs
    last_progress = ""

    def on_progress(count: int, phase: str) -> None:
        nonlocal last_progress
        progress = f"{phase.replace('_', ' ').capitalize()}: {count} URLs"
        click.echo(f"\r{progress:<60}", nl=False, err=True)
        last_progress = progress

    service = ExtractService(request_timeout=settings.request_timeout)
    try:
        result = asyncio.run(service.extract(request, progress=on_progress if show_progress else None))
    except SitescoutError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e
    finally:
        # Clear progress line
        if last_progress:
            click.echo("\r" + " " * 60 + "\r", nl=False, err=True)

    categories = categorize_urls(result.urls) if categorize else None

    if output_format == "json":
        data = result.model_dump()
        if categories is not None:
            data["categories"] = {category.value: urls for category, urls in categories.items()}
        content = json.dumps(data, indent=2)
    else:
        # Text format: URLs only, one per line
        lines = list(result.urls)
        if categories is not None:
            lines.append(standard_pages_summary(categories))
        content = "\n".join(lines)

    # Write to file or stdout
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(content)
            if not content.endswith("\n"):
                f.write("\n")
        click.echo(f"Wrote {result.total_urls} URLs to {output}")
    else:
        click.echo(content)
