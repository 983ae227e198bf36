"""
SiteGraph Crawl Orchestrator

Bounded breadth-first crawl of one site:
- One in-flight render at a time, separated by a politeness delay
- Depth bound (max_depth) and page bound (max_pages) both enforced
- Visited-map and frontier dedup on canonical URLs
- Per-page failures degrade that page to Broken; the crawl continues
- Only Healthy pages are expanded; Redirect targets are not followed

Each InternalLinkCrawler owns its frontier and page map, so independent
crawls can run concurrently without sharing state.
"""

import asyncio
import logging
import time
from collections import deque
from contextlib import asynccontextmanager
from enum import Enum

from sitegraph.core.exceptions import (
    InvalidUrl,
    NoPagesCrawled,
    RenderError,
    RendererUnavailable,
)
from sitegraph.models.page import (
    BrokenPage,
    HealthyPage,
    PageOutcome,
    PageRecord,
    RedirectPage,
)
from sitegraph.schemas.options import CrawlOptions
from sitegraph.services.extractor import extract_page_facts
from sitegraph.services.renderer import (
    PageRenderer,
    RenderedPage,
    create_renderer,
    render_with_timeout,
)
from sitegraph.services.url_utils import (
    get_domain,
    is_internal,
    normalize_url,
    validate_start_url,
)

logger = logging.getLogger(__name__)


class CrawlState(str, Enum):
    INIT = "init"
    CRAWLING = "crawling"
    DONE = "done"


class CrawlFrontier:
    """FIFO of ``(url, depth)`` pairs with membership tracking.

    A URL is accepted only while it is not already queued; callers check
    the visited map themselves.
    """

    def __init__(self):
        self._queue: deque[tuple[str, int]] = deque()
        self._queued: set[str] = set()

    def push(self, url: str, depth: int) -> bool:
        if url in self._queued:
            return False
        self._queue.append((url, depth))
        self._queued.add(url)
        return True

    def pop(self) -> tuple[str, int]:
        url, depth = self._queue.popleft()
        self._queued.discard(url)
        return url, depth

    def __contains__(self, url: str) -> bool:
        return url in self._queued

    def __len__(self) -> int:
        return len(self._queue)


def classify_rendered_page(rendered: RenderedPage, page_url: str) -> PageOutcome:
    """Turn a renderer result into a Healthy, Broken or Redirect outcome."""
    status_code = rendered.status_code
    elapsed_ms = rendered.elapsed_ms

    if 300 <= status_code < 400:
        if not rendered.redirect_location:
            return BrokenPage(status_code, elapsed_ms, "Redirect without Location header")
        try:
            location = normalize_url(rendered.redirect_location, base=page_url)
        except InvalidUrl:
            return BrokenPage(status_code, elapsed_ms, f"Malformed redirect: {rendered.redirect_location!r}")
        return RedirectPage(status_code, elapsed_ms, location)

    if not 200 <= status_code < 300:
        return BrokenPage(status_code, elapsed_ms, f"HTTP {status_code}")

    facts = extract_page_facts(rendered.content, page_url)
    size_kb = round(len(rendered.content) / 1024)
    return HealthyPage(status_code, elapsed_ms, size_kb, facts)


class InternalLinkCrawler:
    """Breadth-first crawler building the page map of one site."""

    def __init__(
        self,
        start_url: str,
        options: CrawlOptions | None = None,
        renderer: PageRenderer | None = None,
    ):
        self.start_url = validate_start_url(start_url)
        self.domain = get_domain(self.start_url)
        self.options = options or CrawlOptions()
        self.renderer = renderer or create_renderer(headless=self.options.headless)

        self.state = CrawlState.INIT
        self.frontier = CrawlFrontier()
        self.pages: dict[str, PageRecord] = {}
        self.elapsed_ms: int = 0

    async def crawl(self) -> dict[str, PageRecord]:
        """Run the crawl and return the page map keyed by canonical URL.

        Raises:
            RendererUnavailable: the renderer could not be started
            NoPagesCrawled: the start URL itself failed to render
        """
        if self.state is not CrawlState.INIT:
            raise RuntimeError("Crawler instances are single-use")

        logger.info(
            f"Starting crawl of {self.start_url} "
            f"(max depth {self.options.max_depth}, max {self.options.max_pages} pages)"
        )
        start_time = time.monotonic()

        try:
            async with self._renderer_session() as renderer:
                self.state = CrawlState.CRAWLING
                self.frontier.push(self.start_url, 0)
                await self._run_loop(renderer, start_time)
        finally:
            self.state = CrawlState.DONE
            self.elapsed_ms = int((time.monotonic() - start_time) * 1000)

        self._check_start_page()

        logger.info(f"Crawl complete: {len(self.pages)} pages in {self.elapsed_ms / 1000:.2f}s")
        return self.pages

    async def _run_loop(self, renderer: PageRenderer, start_time: float):
        delay_ms = self.options.effective_delay_ms
        deadline = self.options.deadline_seconds

        while len(self.frontier) > 0 and len(self.pages) < self.options.max_pages:
            if deadline is not None and time.monotonic() - start_time >= deadline:
                logger.warning(f"Crawl deadline of {deadline}s reached, stopping with {len(self.pages)} pages")
                break

            url, depth = self.frontier.pop()
            if depth > self.options.max_depth:
                continue

            try:
                url = normalize_url(url)
            except InvalidUrl:
                continue
            if url in self.pages:
                continue

            if delay_ms > 0:
                await asyncio.sleep(delay_ms / 1000)

            logger.debug(f"Crawling {len(self.pages) + 1}/{self.options.max_pages} (depth {depth}): {url}")
            record = await self._visit(renderer, url, depth)
            self.pages[url] = record

            if record.is_healthy:
                self._enqueue_links(record)

    async def _visit(self, renderer: PageRenderer, url: str, depth: int) -> PageRecord:
        """Render one page. Failures are recorded as Broken, never raised."""
        start_time = time.monotonic()
        try:
            rendered = await render_with_timeout(renderer, url, self.options.page_timeout_ms)
            outcome = classify_rendered_page(rendered, url)
        except RenderError as e:
            logger.warning(f"Render failed, recording as broken: {e}")
            outcome = BrokenPage(0, int((time.monotonic() - start_time) * 1000), str(e))
        except Exception as e:
            logger.error(f"Error crawling {url}: {e}")
            outcome = BrokenPage(0, int((time.monotonic() - start_time) * 1000), str(e))

        outgoing: frozenset[str] = frozenset()
        if isinstance(outcome, HealthyPage):
            outgoing = frozenset(self._internal_links(outcome))

        return PageRecord(url=url, depth=depth, outcome=outcome, outgoing_links=outgoing)

    def _internal_links(self, outcome: HealthyPage) -> list[str]:
        return [link for link in outcome.facts.outgoing_hrefs if is_internal(self.domain, link)]

    def _enqueue_links(self, record: PageRecord):
        next_depth = record.depth + 1
        if next_depth > self.options.max_depth:
            return

        # Document order keeps the crawl deterministic under the page bound
        for link in self._internal_links(record.outcome):
            if link in self.pages or link in self.frontier:
                continue
            self.frontier.push(link, next_depth)

    def _check_start_page(self):
        start_page = self.pages.get(self.start_url)
        if start_page is None:
            raise NoPagesCrawled(self.start_url)
        outcome = start_page.outcome
        if isinstance(outcome, BrokenPage) and outcome.status_code == 0:
            raise NoPagesCrawled(self.start_url, outcome.error)

    @asynccontextmanager
    async def _renderer_session(self):
        """Acquire the renderer; release it on every exit path."""
        try:
            await self.renderer.start()
        except Exception as e:
            logger.error(f"Renderer failed to start: {e}")
            try:
                await self.renderer.stop()
            except Exception as stop_error:
                logger.warning(f"Renderer cleanup after failed start raised: {stop_error}")
            raise RendererUnavailable(f"Page renderer could not be started: {e}") from e

        try:
            yield self.renderer
        finally:
            await self.renderer.stop()
