"""
SiteGraph Page Renderers

A renderer fetches one URL and reports what the server answered for that
exact URL (first hop, so redirects are visible) together with the rendered
HTML. Two implementations:
- PlaywrightRenderer: headless browser, JS executed before HTML is captured
- HttpRenderer: plain httpx GET without redirect following
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from sitegraph.config import settings
from sitegraph.core.exceptions import NetworkError, RenderTimeout

logger = logging.getLogger(__name__)


@dataclass
class RenderedPage:
    """Result of rendering a page."""
    url: str
    final_url: str
    status_code: int
    content: str
    elapsed_ms: int
    redirect_location: str | None = None


@dataclass
class BrowserConfig:
    """Configuration for the headless browser."""
    browser_type: str = settings.BROWSER_TYPE
    headless: bool = settings.BROWSER_HEADLESS
    wait_until: str = settings.BROWSER_WAIT_UNTIL
    viewport_width: int = settings.BROWSER_VIEWPORT_WIDTH
    viewport_height: int = settings.BROWSER_VIEWPORT_HEIGHT
    user_agent: str = settings.USER_AGENT
    ignore_https_errors: bool = settings.BROWSER_IGNORE_HTTPS_ERRORS
    block_resources: list[str] = field(default_factory=lambda: ["font", "media", "image"])


class PageRenderer(ABC):
    """Interface of the page-rendering capability used by the crawler.

    Acquire with ``async with renderer:`` (or ``start()``/``stop()``).
    ``stop()`` must be safe to call after a failed or partial ``start()``.
    """

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def start(self):
        """Acquire underlying resources."""

    async def stop(self):
        """Release underlying resources."""

    @abstractmethod
    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        """Render ``url``.

        Raises:
            RenderTimeout: page did not load within ``timeout_ms``
            NetworkError: any other fetch/render failure
        """


class PlaywrightRenderer(PageRenderer):
    """Headless browser renderer using Playwright."""

    def __init__(self, config: BrowserConfig | None = None):
        self.config = config or BrowserConfig()
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._playwright = None

    async def start(self):
        """Start the browser instance."""
        if self._browser is not None:
            return

        logger.info(f"Starting Playwright {self.config.browser_type} browser")
        self._playwright = await async_playwright().start()

        browser_launcher = getattr(self._playwright, self.config.browser_type)
        self._browser = await browser_launcher.launch(
            headless=self.config.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]
            if self.config.browser_type == "chromium" else None,
        )

        self._context = await self._browser.new_context(
            viewport={"width": self.config.viewport_width, "height": self.config.viewport_height},
            user_agent=self.config.user_agent,
            ignore_https_errors=self.config.ignore_https_errors,
            java_script_enabled=True,
        )

        logger.info("Playwright browser started successfully")

    async def stop(self):
        """Stop the browser instance."""
        try:
            if self._context:
                await self._context.close()
            if self._browser:
                await self._browser.close()
            if self._playwright:
                await self._playwright.stop()
        finally:
            self._context = None
            self._browser = None
            self._playwright = None

        logger.info("Playwright browser stopped")

    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        if self._context is None:
            await self.start()

        page: Page | None = None
        start_time = time.time()

        try:
            page = await self._context.new_page()

            if self.config.block_resources:
                await page.route("**/*", self._handle_route)

            response = await page.goto(url, timeout=timeout_ms, wait_until=self.config.wait_until)
            elapsed_ms = int((time.time() - start_time) * 1000)

            if response is None:
                raise NetworkError(url, "No response received")

            # Walk back to the first hop so a redirect on the requested URL is reported
            request = response.request
            while request.redirected_from is not None:
                request = request.redirected_from
            first_response = await request.response()

            if first_response is not None and first_response is not response:
                return RenderedPage(
                    url=url,
                    final_url=page.url,
                    status_code=first_response.status,
                    content="",
                    elapsed_ms=elapsed_ms,
                    redirect_location=first_response.headers.get("location"),
                )

            html = await page.content()
            return RenderedPage(
                url=url,
                final_url=page.url,
                status_code=response.status,
                content=html,
                elapsed_ms=elapsed_ms,
            )

        except PlaywrightTimeout as e:
            logger.warning(f"Timeout rendering {url}")
            raise RenderTimeout(url, timeout_ms) from e
        except PlaywrightError as e:
            logger.warning(f"Error rendering {url}: {e}")
            raise NetworkError(url, str(e)) from e

        finally:
            if page:
                await page.close()

    async def _handle_route(self, route):
        """Handle resource blocking."""
        if route.request.resource_type in self.config.block_resources:
            await route.abort()
        else:
            await route.continue_()


class HttpRenderer(PageRenderer):
    """Plain HTTP renderer. No JavaScript; redirects are not followed."""

    def __init__(
        self,
        user_agent: str = settings.USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self):
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            follow_redirects=False,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def stop(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        if self._client is None:
            await self.start()

        start_time = time.time()
        try:
            response = await self._client.get(url, timeout=timeout_ms / 1000)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout: {url}")
            raise RenderTimeout(url, timeout_ms) from e
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching {url}: {e}")
            raise NetworkError(url, str(e)) from e
        elapsed_ms = int((time.time() - start_time) * 1000)

        content_type = response.headers.get("content-type", "")
        content = response.text if "html" in content_type.lower() else ""

        return RenderedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            content=content,
            elapsed_ms=elapsed_ms,
            redirect_location=response.headers.get("location") if response.is_redirect else None,
        )


def create_renderer(kind: str | None = None, headless: bool | None = None) -> PageRenderer:
    """Build the configured renderer ("playwright" or "http")."""
    kind = (kind or settings.RENDERER).lower()
    if kind == "http":
        return HttpRenderer()
    if kind == "playwright":
        config = BrowserConfig()
        if headless is not None:
            config.headless = headless
        return PlaywrightRenderer(config)
    raise ValueError(f"Unknown renderer: {kind}")


async def render_with_timeout(renderer: PageRenderer, url: str, timeout_ms: int) -> RenderedPage:
    """Render with a hard asyncio deadline on top of the renderer's own timeout."""
    try:
        # Grace period lets the renderer raise its own timeout first
        return await asyncio.wait_for(renderer.render(url, timeout_ms), timeout=timeout_ms / 1000 + 5)
    except asyncio.TimeoutError as e:
        raise RenderTimeout(url, timeout_ms) from e
