"""Sitemap fetching and parsing utilities.

A fetched sitemap document is read either as a sitemap index (nested sitemap
locations) or as a flat urlset (page locations), never both.
"""

import logging
import zlib
from dataclasses import dataclass, field
from typing import TypeAlias
from xml.etree import ElementTree

import httpx

from sitescout.discovery.fetch import MAX_BODY_SIZE, fetch_capped, inflate

LOGGER = logging.getLogger(__name__)

DEFAULT_SITEMAP_PATH = "/sitemap.xml"


@dataclass
class SitemapIndex:
    """A ``<sitemapindex>`` document: locations of nested sitemaps."""

    sitemaps: list[str] = field(default_factory=list)


@dataclass
class UrlSet:
    """A ``<urlset>`` document: locations of pages."""

    urls: list[str] = field(default_factory=list)


SitemapDocument: TypeAlias = SitemapIndex | UrlSet


async def fetch_sitemap(
    client: httpx.AsyncClient,
    sitemap_url: str,
    max_bytes: int = MAX_BODY_SIZE,
) -> bytes | None:
    """
    Fetch sitemap content, handling gzip compression.

    The body is capped at ``max_bytes`` before decompression, and the inflated
    output is capped at the same size.

    Args:
        client: HTTP client.
        sitemap_url: URL of the sitemap.
        max_bytes: Body size cap.

    Returns:
        Sitemap XML bytes, or None for non-200 responses.

    Raises:
        httpx.HTTPError: On transport failures.
    """
    fetched = await fetch_capped(client, sitemap_url, max_bytes)
    if not fetched.ok:
        LOGGER.debug("Sitemap returned status %d: %s", fetched.status_code, sitemap_url)
        return None

    content = fetched.content
    if sitemap_url.endswith(".gz"):
        try:
            content = _gunzip(content, max_bytes)
        except zlib.error:
            # Transport already decoded it, use as-is
            LOGGER.debug("Sitemap %s is not gzip data, parsing as-is", sitemap_url)

    return content


def _gunzip(data: bytes, max_bytes: int) -> bytes:
    """Inflate gzip data, keeping at most ``max_bytes`` of output."""
    return inflate(data, max_bytes, 16 + zlib.MAX_WBITS)


def parse_sitemap_document(content: bytes) -> SitemapDocument:
    """
    Interpret sitemap XML as an index or a flat urlset.

    The index reading wins when it yields at least one nested location;
    otherwise the document is read as a urlset. Malformed XML or an unknown
    root element gives an empty urlset.

    Args:
        content: Sitemap XML bytes.

    Returns:
        SitemapIndex or UrlSet.
    """
    try:
        root = ElementTree.fromstring(content)
    except ElementTree.ParseError as e:
        LOGGER.debug("Failed to parse sitemap XML: %s", e)
        return UrlSet()

    tag_name = _strip_namespace(root.tag)

    if tag_name == "sitemapindex":
        nested = _child_locations(root, "sitemap")
        if nested:
            return SitemapIndex(sitemaps=nested)

    if tag_name == "urlset":
        return UrlSet(urls=_child_locations(root, "url"))

    if tag_name != "sitemapindex":
        LOGGER.debug("Unknown sitemap root element: %s", tag_name)
    return UrlSet()


def _child_locations(root: ElementTree.Element, entry_tag: str) -> list[str]:
    """Collect ``<loc>`` text of each direct ``entry_tag`` child, ignoring namespaces."""
    locations: list[str] = []
    for entry in root:
        if _strip_namespace(entry.tag) != entry_tag:
            continue
        for child in entry:
            if _strip_namespace(child.tag) == "loc" and child.text and child.text.strip():
                locations.append(child.text.strip())
                break
    return locations


def _strip_namespace(tag: str) -> str:
    """Remove XML namespace from tag name."""
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag if isinstance(tag, str) else ""
