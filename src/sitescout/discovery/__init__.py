"""Site discovery building blocks.

This package provides seed URL normalisation, SSRF protection, redirect
resolution, robots.txt and sitemap handling, HTML link extraction and page
categorisation.
"""

from sitescout.discovery.categorizer import (
    CATEGORY_PATTERNS,
    categorize_urls,
    matches_pattern,
    standard_pages_summary,
)
from sitescout.discovery.links import extract_links
from sitescout.discovery.redirects import resolve_canonical_url
from sitescout.discovery.robots import RobotsConfig, fetch_robots, parse_robots_txt
from sitescout.discovery.safety import ensure_safe_target, is_private_or_local_ip
from sitescout.discovery.sitemap import (
    SitemapDocument,
    SitemapIndex,
    UrlSet,
    fetch_sitemap,
    parse_sitemap_document,
)
from sitescout.discovery.urls import UrlFilter, normalise_seed_url

__all__ = [
    # Categorizer
    "CATEGORY_PATTERNS",
    "categorize_urls",
    "matches_pattern",
    "standard_pages_summary",
    # Links
    "extract_links",
    # Redirects
    "resolve_canonical_url",
    # Robots
    "RobotsConfig",
    "fetch_robots",
    "parse_robots_txt",
    # Safety
    "ensure_safe_target",
    "is_private_or_local_ip",
    # Sitemap
    "SitemapDocument",
    "SitemapIndex",
    "UrlSet",
    "fetch_sitemap",
    "parse_sitemap_document",
    # URLs
    "UrlFilter",
    "normalise_seed_url",
]
