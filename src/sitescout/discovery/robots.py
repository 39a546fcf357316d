"""robots.txt fetching and parsing.

Rules are scoped per User-agent block: directives apply only inside a block
for ``*`` or for an agent name contained in our own User-Agent string.
"""

import logging
from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit, urlunsplit

import httpx

from sitescout.discovery.fetch import FETCH_ERRORS, fetch_capped
from sitescout.utils import strip_www

LOGGER = logging.getLogger(__name__)


@dataclass
class RobotsConfig:
    """
    Parsed robots.txt rules applicable to our user agent.

    Attributes:
        user_agent: User agent the rules were matched against.
        crawl_delay_ms: Crawl-delay in milliseconds (optional).
        sitemaps: Sitemap URLs, rewritten onto the canonical host where they differ only by ``www.``.
        disallow_patterns: Disallowed path prefixes.
    """

    user_agent: str = "*"
    crawl_delay_ms: int | None = None
    sitemaps: list[str] = field(default_factory=list)
    disallow_patterns: list[str] = field(default_factory=list)


async def fetch_robots(
    client: httpx.AsyncClient,
    base: SplitResult,
    user_agent: str,
) -> RobotsConfig | None:
    """
    Fetch and parse robots.txt for the canonical host.

    Args:
        client: HTTP client.
        base: Canonical base URL.
        user_agent: Our User-Agent string, used to select rule blocks.

    Returns:
        RobotsConfig with parsed rules, or None if robots.txt is unavailable.
    """
    robots_url = f"{base.scheme}://{base.netloc}/robots.txt"

    try:
        fetched = await fetch_capped(client, robots_url)
    except FETCH_ERRORS as e:
        LOGGER.warning("Failed to fetch robots.txt from %s: %s", robots_url, e)
        return None

    if not fetched.ok:
        LOGGER.debug("No robots.txt at %s (status %d)", robots_url, fetched.status_code)
        return None

    content = fetched.content.decode("utf-8", errors="replace")
    return parse_robots_txt(content, user_agent=user_agent, canonical_host=base.netloc)


def parse_robots_txt(content: str, user_agent: str = "*", canonical_host: str | None = None) -> RobotsConfig:
    """
    Parse robots.txt content.

    Args:
        content: Raw robots.txt content.
        user_agent: User agent to match rule blocks for.
        canonical_host: Host that Sitemap URLs are aligned to when they
            differ only by a leading ``www.``.

    Returns:
        RobotsConfig with parsed rules.
    """
    config = RobotsConfig(user_agent=user_agent)
    our_agent = user_agent.lower()

    # Directives before the first User-agent line belong to no block
    in_our_block = False

    for line in content.splitlines():
        line = line.strip()

        # Skip comments and empty lines
        if not line or line.startswith("#"):
            continue

        # Remove inline comments
        if "#" in line:
            line = line.split("#", 1)[0].strip()

        if ":" not in line:
            continue

        directive, value = line.split(":", 1)
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "user-agent":
            agent = value.lower()
            in_our_block = agent == "*" or agent in our_agent
            continue

        if not in_our_block:
            continue

        if directive == "sitemap":
            if value:
                sitemap_url = align_sitemap_host(value, canonical_host) if canonical_host else value
                config.sitemaps.append(sitemap_url)

        elif directive == "disallow":
            if value:
                config.disallow_patterns.append(value)

        elif directive == "crawl-delay":
            try:
                config.crawl_delay_ms = int(float(value) * 1000)
            except (ValueError, OverflowError):
                LOGGER.debug("Ignoring invalid Crawl-delay: %r", value)

    return config


def align_sitemap_host(sitemap_url: str, canonical_host: str) -> str:
    """
    Rewrite a sitemap URL onto the canonical host when only ``www.`` differs.

    Args:
        sitemap_url: Sitemap URL from robots.txt.
        canonical_host: Host of the canonical base URL.

    Returns:
        The sitemap URL on the canonical host, or unchanged if the hosts differ.
    """
    try:
        parsed = urlsplit(sitemap_url)
    except ValueError:
        return sitemap_url

    if strip_www(parsed.netloc.lower()) == strip_www(canonical_host.lower()):
        return urlunsplit(parsed._replace(netloc=canonical_host))
    return sitemap_url
