"""Data models for sitescout."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "sitescout-urlextractor/1.0"
DEFAULT_MAX_URLS = 1000
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_CRAWL_DELAY_MS = 100

SOURCE_SITEMAP = "sitemap"
SOURCE_CRAWL = "crawl"


class ExtractionRequest(BaseModel):
    """Parameters for a single URL extraction.

    Usage:
        request = ExtractionRequest(url="example.com", max_urls=50)
        result = await ExtractService().extract(request)
    """

    model_config = ConfigDict(extra="forbid")

    # Seed address; scheme is optional ("example.com" becomes "https://example.com")
    url: str

    max_urls: int = Field(default=DEFAULT_MAX_URLS, ge=1, le=10000)
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=600)
    user_agent: str = DEFAULT_USER_AGENT
    crawl_delay_ms: int = Field(default=DEFAULT_CRAWL_DELAY_MS, ge=0, le=5000)

    # Crawl even when sitemaps already produced URLs
    force_crawl: bool = False

    # Test-only escape hatch: allows loopback and private targets
    disable_ssrf_protection: bool = Field(default=False, exclude=True)


class ExtractionResult(BaseModel):
    """Result of an extraction.

    ``urls`` is backed by a set during discovery, so its order is not stable
    across runs.
    """

    base_url: str
    urls: list[str] = Field(default_factory=list)
    total_urls: int = 0
    robots_txt_found: bool = False
    sitemap_found: bool = False
    sources: dict[str, int] = Field(default_factory=dict)


class PageCategory(str, Enum):
    """Standard page types recognised by the categorizer."""

    HOME = "home"
    CONTACT = "contact"
    ABOUT = "about"
    PRODUCTS = "products"
    BLOG = "blog"
    FAQ = "faq"
    PRIVACY = "privacy"
    LOGIN = "login"
    CART = "cart"
