"""Canonical host resolution by following redirects from the seed URL."""

import logging
from urllib.parse import SplitResult, urlsplit, urlunsplit

import httpx

from sitescout.discovery.fetch import FETCH_ERRORS, fetch_capped

LOGGER = logging.getLogger(__name__)

# Redirect hops followed before httpx raises TooManyRedirects
MAX_REDIRECTS = 10


async def resolve_canonical_url(client: httpx.AsyncClient, base: SplitResult) -> SplitResult:
    """
    Follow redirects from the seed URL to find the canonical address.

    A HEAD request to the seed is tried first. If it fails at the transport
    level (including too many redirects), robots.txt on the original host is
    fetched instead and, when that request was redirected, its scheme and
    host are adopted.

    Args:
        client: HTTP client configured to follow up to MAX_REDIRECTS redirects.
        base: Normalised seed URL.

    Returns:
        The URL after redirects, or ``base`` unchanged if nothing redirected.

    Raises:
        httpx.HTTPError: If both the HEAD request and the robots.txt fallback fail.
    """
    try:
        response = await client.head(urlunsplit(base))
    except FETCH_ERRORS as e:
        LOGGER.debug("HEAD %s failed, trying robots.txt for redirects: %s", urlunsplit(base), e)
        return await _canonical_from_robots(client, base)

    return urlsplit(str(response.url))


async def _canonical_from_robots(client: httpx.AsyncClient, base: SplitResult) -> SplitResult:
    """Use the redirect target of robots.txt to determine the canonical origin."""
    robots_url = f"{base.scheme}://{base.netloc}/robots.txt"
    fetched = await fetch_capped(client, robots_url, read_body=False)
    if not fetched.redirected:
        return base

    final = urlsplit(fetched.url)
    return SplitResult(final.scheme, final.netloc, "", "", "")
