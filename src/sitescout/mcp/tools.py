"""
Tools for the sitescout MCP server.

Wrap ExtractService and the page categorizer for MCP consumption.
"""

import logging

from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from sitescout.discovery.categorizer import categorize_urls, standard_pages_summary
from sitescout.exceptions import SitescoutError, generate_correlation_id
from sitescout.models import (
    DEFAULT_CRAWL_DELAY_MS,
    DEFAULT_MAX_URLS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ExtractionRequest,
)
from sitescout.services.extract import ExtractService

LOGGER = logging.getLogger(__name__)


async def sitescout_extract_urls(
    service: ExtractService,
    url: str,
    max_urls: int = DEFAULT_MAX_URLS,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
    crawl_delay_ms: int = DEFAULT_CRAWL_DELAY_MS,
    force_crawl: bool = False,
    categorize: bool = False,
) -> dict:
    """
    Discover the URLs of a website.

    Reads robots.txt and the site's sitemaps first; when they yield nothing
    (or force_crawl is set) the site is crawled breadth-first, politely and
    within the same domain. Private and local network targets are refused.

    **When to use this tool:**
    - You need a list of the pages on a website
    - You want to find a site's contact, about, or privacy pages (categorize=True)

    Args:
        service: Injected ExtractService instance
        url: Website address; "example.com" is treated as "https://example.com"
        max_urls: Maximum URLs to return (1-10000, default: 1000)
        timeout_seconds: Overall time budget in seconds (1-600, default: 300).
            A timed-out extraction returns the URLs found so far.
        user_agent: User-Agent header, also used to select robots.txt rules
        crawl_delay_ms: Delay between crawled pages in ms (0-5000, default: 100)
        force_crawl: Crawl even when sitemaps already provided URLs
        categorize: Add standard page categories and a summary to the result

    Returns:
        {
            "base_url": "https://www.example.com/",
            "urls": ["https://www.example.com/about", ...],
            "total_urls": 42,
            "robots_txt_found": true,
            "sitemap_found": true,
            "sources": {"sitemap": 42},
            "categories": {"about": ["https://www.example.com/about"]},  # with categorize
            "summary": "Found standard pages: about (1 URL)"              # with categorize
        }
    """
    correlation_id = generate_correlation_id()

    try:
        request = ExtractionRequest(
            url=url,
            max_urls=max_urls,
            timeout_seconds=timeout_seconds,
            user_agent=user_agent,
            crawl_delay_ms=crawl_delay_ms,
            force_crawl=force_crawl,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ToolError(f"Invalid {field}: {first['msg']} [correlation_id={correlation_id}]") from e

    try:
        result = await service.extract(request)
    except SitescoutError as e:
        LOGGER.warning("TOOL ERROR: sitescout_extract_urls failed: %s", e)
        raise ToolError(str(e)) from e

    data = result.model_dump()
    if categorize:
        categories = categorize_urls(result.urls)
        data["categories"] = {category.value: urls for category, urls in categories.items()}
        data["summary"] = standard_pages_summary(categories)
    return data


async def sitescout_categorize_urls(urls: list[str]) -> dict:
    """
    Detect standard pages (home, contact, about, products, blog, faq,
    privacy, login, cart) in a list of URLs.

    Matching is by URL path and understands common paths in several
    languages, e.g. /contatti, /uber-uns, /quienes-somos.

    Args:
        urls: URLs to classify

    Returns:
        {
            "categories": {"contact": ["https://example.com/contact"]},
            "summary": "Found standard pages: contact (1 URL)"
        }
    """
    categories = categorize_urls(urls)
    return {
        "categories": {category.value: matched for category, matched in categories.items()},
        "summary": standard_pages_summary(categories),
    }
