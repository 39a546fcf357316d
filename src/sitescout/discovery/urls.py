"""Seed URL normalisation and the shared domain/robots admission filter."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit

from sitescout.exceptions import InvalidInputError
from sitescout.utils import strip_www

LOGGER = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


def normalise_seed_url(raw_url: str, correlation_id: str | None = None) -> SplitResult:
    """
    Validate and canonicalise a seed address.

    Partial addresses such as ``example.com`` get an ``https://`` scheme.

    Args:
        raw_url: User-supplied address.
        correlation_id: Optional correlation ID attached to raised errors.

    Returns:
        Parsed absolute URL.

    Raises:
        InvalidInputError: If the address is empty, uses a scheme other than
            http/https, or has no host.
    """
    raw_url = (raw_url or "").strip()
    if not raw_url:
        raise InvalidInputError("URL cannot be empty", field="url", correlation_id=correlation_id)

    if "://" not in raw_url:
        raw_url = f"https://{raw_url}"

    try:
        parsed = urlsplit(raw_url)
    except ValueError as e:
        raise InvalidInputError(
            f"Invalid URL: {e}",
            field="url",
            value=raw_url,
            correlation_id=correlation_id,
        ) from e

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise InvalidInputError(
            f"Unsupported protocol: {parsed.scheme or '(none)'}",
            field="url",
            value=raw_url,
            correlation_id=correlation_id,
        )

    if not parsed.hostname:
        raise InvalidInputError("Missing host", field="url", value=raw_url, correlation_id=correlation_id)

    return parsed


def host_of(url: str) -> str | None:
    """Return the lowercased host (netloc) of a URL, or None if it cannot be parsed."""
    try:
        return urlsplit(url).netloc.lower()
    except ValueError:
        return None


@dataclass
class UrlFilter:
    """
    Admission predicate shared by the sitemap pipeline and the crawler.

    A URL is admitted when its host matches the canonical host (ignoring one
    leading ``www.`` label) and its path does not start with any disallowed
    prefix.

    Attributes:
        canonical_host: Host of the canonical base URL.
        disallowed_prefixes: Path prefixes collected from robots.txt.
    """

    canonical_host: str
    disallowed_prefixes: set[str] = field(default_factory=set)

    def is_same_domain(self, url: str) -> bool:
        host = host_of(url)
        if host is None:
            return False
        return strip_www(host) == strip_www(self.canonical_host.lower())

    def is_disallowed(self, url: str) -> bool:
        try:
            path = urlsplit(url).path
        except ValueError:
            return False
        return any(path.startswith(prefix) for prefix in self.disallowed_prefixes)

    def admits(self, url: str) -> bool:
        return self.is_same_domain(url) and not self.is_disallowed(url)

    def filter(self, urls: Iterable[str]) -> list[str]:
        """Return the admitted URLs, preserving order."""
        return [url for url in urls if self.admits(url)]
