"""HTML link extraction for the crawler."""

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup

LOGGER = logging.getLogger(__name__)

# Elements whose href is a link candidate
LINK_TAGS = ("a", "link", "area")

IGNORED_SCHEMES = ("javascript:", "mailto:", "tel:", "data:")


def is_valid_link(href: str) -> bool:
    """
    Check if an href should be followed.

    Empty values, fragment-only references and javascript/mailto/tel/data
    URIs are rejected.
    """
    if not href or href.startswith("#"):
        return False
    return not href.lower().startswith(IGNORED_SCHEMES)


def resolve_link(href: str, base_url: str) -> str | None:
    """Resolve a possibly relative reference against a base URL."""
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def extract_links(html: str, page_url: str) -> list[str]:
    """
    Extract absolute link candidates from an HTML page.

    Elements are visited in document order. A ``<base href>`` changes the
    resolution base for the links that follow it, not for earlier ones.
    The result is neither deduplicated nor filtered by domain.

    Args:
        html: Page markup.
        page_url: URL the page was fetched from.

    Returns:
        List of absolute URLs; empty if the markup cannot be parsed.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        LOGGER.debug("Failed to parse HTML from %s: %s", page_url, e)
        return []

    links: list[str] = []
    base_href = page_url

    for tag in soup.find_all(("base", *LINK_TAGS)):
        href = tag.get("href")
        if not isinstance(href, str) or not href:
            continue

        if tag.name == "base":
            resolved_base = resolve_link(href.strip(), page_url)
            if resolved_base:
                base_href = resolved_base
            continue

        href = href.strip()
        if not is_valid_link(href):
            continue

        absolute = resolve_link(href, base_href)
        if absolute:
            links.append(absolute)

    return links
