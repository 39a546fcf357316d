"""Extraction service: discovers the same-domain URLs of a website.

Sitemaps are preferred; a polite breadth-first crawl is used when they yield
nothing (or when forced). One extraction owns one ExtractionState and one
HTTP client, and issues its requests strictly one at a time.
"""

import asyncio
import contextlib
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import SplitResult, urlunsplit

import httpx

from sitescout.discovery.fetch import ACCEPT_ENCODING, FETCH_ERRORS, MAX_BODY_SIZE, fetch_capped
from sitescout.discovery.links import extract_links
from sitescout.discovery.redirects import MAX_REDIRECTS, resolve_canonical_url
from sitescout.discovery.robots import fetch_robots
from sitescout.discovery.safety import ensure_safe_target
from sitescout.discovery.sitemap import (
    DEFAULT_SITEMAP_PATH,
    SitemapDocument,
    SitemapIndex,
    UrlSet,
    fetch_sitemap,
    parse_sitemap_document,
)
from sitescout.discovery.urls import UrlFilter, normalise_seed_url
from sitescout.exceptions import generate_correlation_id
from sitescout.models import SOURCE_CRAWL, SOURCE_SITEMAP, ExtractionRequest, ExtractionResult
from sitescout.telemetry import (
    COUNTER_URLS_BY_SOURCE,
    COUNTER_URLS_EXTRACTED,
    SPAN_EXTRACT,
    NullTelemetry,
    ProgressCallback,
    Telemetry,
)
from sitescout.utils import log_with_correlation, origin_of

LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0

# Crawl progress is reported every 5% of max_urls
PROGRESS_STEPS = 20

CANCEL_WATCHER_TASK = "sitescout-cancel-watcher"


@dataclass
class ExtractionState:
    """
    Mutable state of one extraction. Created per call and never shared.

    Attributes:
        base: Canonical base URL (replaced once redirects are resolved).
        max_urls: Cap on the discovered set.
        crawl_delay_ms: Effective delay between crawled pages.
        correlation_id: Correlation ID for log lines of this extraction.
        url_filter: Domain/robots admission filter.
        urls: Discovered URLs; never grows beyond ``max_urls``.
        pending_sitemaps: Sitemap URLs waiting to be fetched.
        robots_found: True if robots.txt was fetched successfully.
        sitemap_count: URLs contributed by sitemaps.
        crawl_count: URLs contributed by crawling.
    """

    base: SplitResult
    max_urls: int
    crawl_delay_ms: int
    correlation_id: str
    url_filter: UrlFilter
    urls: set[str] = field(default_factory=set)
    pending_sitemaps: deque[str] = field(default_factory=deque)
    robots_found: bool = False
    sitemap_count: int = 0
    crawl_count: int = 0
    progress: ProgressCallback | None = None
    cancel: asyncio.Event | None = None
    deadline: asyncio.Timeout | None = None

    @property
    def base_url(self) -> str:
        return urlunsplit(self.base)

    @property
    def is_full(self) -> bool:
        return len(self.urls) >= self.max_urls

    def rebase(self, base: SplitResult) -> None:
        """Adopt a new canonical base URL and match the filter to its host."""
        self.base = base
        self.url_filter.canonical_host = base.netloc

    def should_stop(self) -> bool:
        """Check for external cancellation or an expired deadline."""
        if self.cancel is not None and self.cancel.is_set():
            return True
        if self.deadline is not None:
            when = self.deadline.when()
            return when is not None and asyncio.get_running_loop().time() >= when
        return False

    def report(self, phase: str, current: int | None = None) -> None:
        if self.progress is not None:
            self.progress(len(self.urls) if current is None else current, phase)


class ExtractService:
    """Discover the URLs of a website from its sitemaps, or by crawling.

    Usage:
        service = ExtractService()
        result = await service.extract(ExtractionRequest(url="example.com", max_urls=200))
        for url in result.urls:
            print(url)

    With progress and cancellation:
        cancel = asyncio.Event()
        result = await service.extract(
            request,
            progress=lambda count, phase: print(phase, count),
            cancel=cancel,
        )
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_body_size: int = MAX_BODY_SIZE,
    ):
        """Initialize extract service.

        Args:
            transport: Optional httpx transport (tests use httpx.MockTransport)
            request_timeout: Timeout for each individual request (seconds)
            max_body_size: Cap on bytes read from any response body
        """
        self._transport = transport
        self._request_timeout = request_timeout
        self._max_body_size = max_body_size

    async def extract(
        self,
        request: ExtractionRequest,
        *,
        telemetry: Telemetry | None = None,
        progress: ProgressCallback | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ExtractionResult:
        """
        Run one extraction.

        Hitting the timeout or setting ``cancel`` after the seed has been
        validated is not an error: whatever was discovered so far is returned.

        Args:
            request: Extraction parameters.
            telemetry: Optional telemetry sink.
            progress: Optional callback receiving ``(url_count, phase)``.
            cancel: Optional event; setting it stops the extraction promptly.

        Returns:
            ExtractionResult with the discovered URLs.

        Raises:
            InvalidInputError: If the seed URL is invalid.
            UnsafeTargetError: If the seed targets private or local network space.
        """
        telemetry = telemetry or NullTelemetry()
        correlation_id = generate_correlation_id()

        base = normalise_seed_url(request.url, correlation_id)
        if not request.disable_ssrf_protection:
            await ensure_safe_target(base, correlation_id)

        state = ExtractionState(
            base=base,
            max_urls=request.max_urls,
            crawl_delay_ms=request.crawl_delay_ms,
            correlation_id=correlation_id,
            url_filter=UrlFilter(canonical_host=base.netloc),
            progress=progress,
            cancel=cancel,
        )

        with telemetry.span(SPAN_EXTRACT, url=state.base_url, max_urls=request.max_urls):
            state.report("initializing", 0)

            async with self._create_client(request.user_agent) as client:
                try:
                    async with asyncio.timeout(request.timeout_seconds) as deadline:
                        state.deadline = deadline
                        watcher = None
                        if cancel is not None:
                            watcher = asyncio.create_task(
                                _expire_on_cancel(cancel, deadline), name=CANCEL_WATCHER_TASK
                            )
                        try:
                            await self._run(client, state, request, telemetry)
                        finally:
                            if watcher is not None:
                                watcher.cancel()
                                with contextlib.suppress(asyncio.CancelledError):
                                    await watcher
                except TimeoutError:
                    reason = "cancelled" if cancel is not None and cancel.is_set() else "timed out"
                    self._log(
                        state,
                        telemetry,
                        logging.WARNING,
                        f"Extraction {reason}, returning partial result",
                        urls_found=len(state.urls),
                    )

            result = self._aggregate(state)
            state.report("complete", result.total_urls)

            self._log(
                state,
                telemetry,
                logging.INFO,
                "URL extraction complete",
                total_urls=result.total_urls,
                robots_found=result.robots_txt_found,
                sitemap_found=result.sitemap_found,
            )
            self._record_metrics(telemetry, result)

        return result

    def _create_client(self, user_agent: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            timeout=self._request_timeout,
            headers={"User-Agent": user_agent, "Accept-Encoding": ACCEPT_ENCODING},
        )

    async def _run(
        self,
        client: httpx.AsyncClient,
        state: ExtractionState,
        request: ExtractionRequest,
        telemetry: Telemetry,
    ) -> None:
        await self._resolve_canonical(client, state, telemetry)

        state.report("analyzing_robots_txt", 0)
        await self._analyze_robots(client, state, request.user_agent, telemetry)

        state.report("extracting_sitemaps")
        self._log(state, telemetry, logging.INFO, "Extracting URLs from sitemaps")
        await self._extract_from_sitemaps(client, state)
        if state.sitemap_count:
            self._log(state, telemetry, logging.INFO, "Sitemap extraction complete", urls_found=state.sitemap_count)

        if request.force_crawl or (not state.sitemap_count and not state.urls):
            self._log(
                state,
                telemetry,
                logging.INFO,
                "Starting recursive crawling",
                forced=request.force_crawl,
                fallback=not state.sitemap_count,
            )
            state.report("crawling")
            await self._crawl(client, state)
            if state.crawl_count:
                self._log(state, telemetry, logging.INFO, "Crawling complete", urls_found=state.crawl_count)

    async def _resolve_canonical(
        self,
        client: httpx.AsyncClient,
        state: ExtractionState,
        telemetry: Telemetry,
    ) -> None:
        self._log(state, telemetry, logging.INFO, "Following redirects to canonical URL", url=state.base_url)
        try:
            canonical = await resolve_canonical_url(client, state.base)
        except FETCH_ERRORS as e:
            self._log(
                state,
                telemetry,
                logging.WARNING,
                "Failed to follow redirects, using original URL",
                url=state.base_url,
                error=str(e),
            )
            return

        state.rebase(canonical)
        self._log(state, telemetry, logging.INFO, "Canonical URL determined", canonical_url=state.base_url)

    async def _analyze_robots(
        self,
        client: httpx.AsyncClient,
        state: ExtractionState,
        user_agent: str,
        telemetry: Telemetry,
    ) -> None:
        self._log(state, telemetry, logging.INFO, "Analyzing robots.txt")
        robots = await fetch_robots(client, state.base, user_agent)
        if robots is None:
            return

        state.robots_found = True
        state.url_filter.disallowed_prefixes.update(robots.disallow_patterns)
        state.pending_sitemaps.extend(robots.sitemaps)
        if robots.crawl_delay_ms is not None and robots.crawl_delay_ms > state.crawl_delay_ms:
            state.crawl_delay_ms = robots.crawl_delay_ms

        self._log(
            state,
            telemetry,
            logging.INFO,
            "robots.txt found",
            disallowed_paths=len(state.url_filter.disallowed_prefixes),
            sitemaps=len(robots.sitemaps),
            crawl_delay_ms=robots.crawl_delay_ms or 0,
        )

    async def _extract_from_sitemaps(self, client: httpx.AsyncClient, state: ExtractionState) -> None:
        """Work through the sitemap queue, following sitemap indexes."""
        if not state.pending_sitemaps:
            state.pending_sitemaps.append(origin_of(state.base.scheme, state.base.netloc) + DEFAULT_SITEMAP_PATH)

        processed: set[str] = set()

        while state.pending_sitemaps and not state.is_full:
            if state.should_stop():
                LOGGER.debug("Sitemap extraction stopped early")
                break

            sitemap_url = state.pending_sitemaps.popleft()
            if sitemap_url in processed:
                continue
            processed.add(sitemap_url)

            document = await self._load_sitemap(client, sitemap_url)
            state.report("extracting_sitemaps")

            if isinstance(document, SitemapIndex):
                LOGGER.debug("Sitemap index %s lists %d sitemaps", sitemap_url, len(document.sitemaps))
                state.pending_sitemaps.extend(loc for loc in document.sitemaps if loc not in processed)
                continue

            for loc in document.urls:
                if state.is_full:
                    break
                if state.url_filter.admits(loc):
                    state.urls.add(loc)
                    state.sitemap_count += 1

    async def _load_sitemap(self, client: httpx.AsyncClient, sitemap_url: str) -> SitemapDocument:
        try:
            content = await fetch_sitemap(client, sitemap_url, self._max_body_size)
        except FETCH_ERRORS as e:
            LOGGER.debug("Failed to fetch sitemap %s: %s", sitemap_url, e)
            return UrlSet()

        if content is None:
            return UrlSet()
        return parse_sitemap_document(content)

    async def _crawl(self, client: httpx.AsyncClient, state: ExtractionState) -> None:
        """Breadth-first crawl from the base URL."""
        start_url = state.base_url
        to_visit: deque[str] = deque([start_url])
        queued: set[str] = {start_url}
        step = max(1, state.max_urls // PROGRESS_STEPS)

        while to_visit and not state.is_full:
            if state.should_stop():
                LOGGER.debug("Crawl stopped early with %d URLs queued", len(to_visit))
                break

            current_url = to_visit.popleft()
            if current_url in state.urls:
                continue
            if not state.url_filter.admits(current_url):
                continue

            state.urls.add(current_url)
            state.crawl_count += 1
            if len(state.urls) % step == 0:
                state.report("crawling")

            if state.crawl_delay_ms > 0:
                await asyncio.sleep(state.crawl_delay_ms / 1000)

            for link in await self._fetch_links(client, current_url):
                if state.is_full:
                    break
                if link in queued or link in state.urls:
                    continue
                if state.url_filter.admits(link):
                    to_visit.append(link)
                    queued.add(link)

    async def _fetch_links(self, client: httpx.AsyncClient, page_url: str) -> list[str]:
        try:
            fetched = await fetch_capped(client, page_url, self._max_body_size, require_html=True)
        except FETCH_ERRORS as e:
            LOGGER.debug("Failed to fetch %s: %s", page_url, e)
            return []

        if not fetched.ok or not fetched.is_html:
            return []

        html = fetched.content.decode("utf-8", errors="replace")
        return extract_links(html, fetched.url)

    def _aggregate(self, state: ExtractionState) -> ExtractionResult:
        urls = list(state.urls)
        sources: dict[str, int] = {}
        if state.sitemap_count:
            sources[SOURCE_SITEMAP] = state.sitemap_count
        if state.crawl_count:
            sources[SOURCE_CRAWL] = state.crawl_count

        return ExtractionResult(
            base_url=state.base_url,
            urls=urls,
            total_urls=len(urls),
            robots_txt_found=state.robots_found,
            sitemap_found=state.sitemap_count > 0,
            sources=sources,
        )

    def _record_metrics(self, telemetry: Telemetry, result: ExtractionResult) -> None:
        telemetry.add(COUNTER_URLS_EXTRACTED, result.total_urls, base_url=result.base_url)
        for source, count in result.sources.items():
            telemetry.add(COUNTER_URLS_BY_SOURCE, count, source=source, base_url=result.base_url)

    def _log(
        self,
        state: ExtractionState,
        telemetry: Telemetry,
        level: int,
        message: str,
        **fields: Any,
    ) -> None:
        log_with_correlation(LOGGER, level, message, state.correlation_id, **fields)
        telemetry.event(level, message, correlation_id=state.correlation_id, **fields)


async def _expire_on_cancel(cancel: asyncio.Event, deadline: asyncio.Timeout) -> None:
    """Move the deadline to now once ``cancel`` is set."""
    await cancel.wait()
    deadline.reschedule(asyncio.get_running_loop().time())
