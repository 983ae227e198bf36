"""
Custom exceptions for SiteGraph.
"""


class SiteGraphError(Exception):
    """Base class for all analyzer errors."""

    code = "SITEGRAPH_ERROR"

    def __init__(self, detail: str = "Internal link analysis failed"):
        super().__init__(detail)
        self.detail = detail


class InvalidUrl(SiteGraphError):
    """URL could not be parsed or is not an http(s) URL."""

    code = "INVALID_URL"

    def __init__(self, url: str = "", detail: str | None = None):
        super().__init__(
            detail or f"Invalid URL: {url!r}. Must include protocol (http:// or https://)"
        )
        self.url = url


class UnresolvableDomain(SiteGraphError):
    """URL parsed but yields no hostname."""

    code = "UNRESOLVABLE_DOMAIN"

    def __init__(self, url: str = ""):
        super().__init__(f"Could not extract domain from URL: {url!r}")
        self.url = url


class NoPagesCrawled(SiteGraphError):
    """The start URL itself could not be rendered."""

    code = "NO_PAGES_CRAWLED"

    def __init__(self, url: str = "", reason: str = ""):
        detail = f"No pages could be crawled from {url}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)
        self.url = url
        self.reason = reason


class RendererUnavailable(SiteGraphError):
    """The page renderer failed to initialize."""

    code = "RENDERER_UNAVAILABLE"

    def __init__(self, detail: str = "Page renderer could not be started"):
        super().__init__(detail)


class RenderError(SiteGraphError):
    """A single page failed to render. Recovered locally by the crawler."""

    code = "RENDER_ERROR"

    def __init__(self, url: str = "", detail: str = "Render failed"):
        super().__init__(f"{detail}: {url}" if url else detail)
        self.url = url


class RenderTimeout(RenderError):
    """Page did not finish loading within the page timeout."""

    code = "RENDER_TIMEOUT"

    def __init__(self, url: str = "", timeout_ms: int = 0):
        super().__init__(url, f"Timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class NetworkError(RenderError):
    """Connection-level failure while fetching a page."""

    code = "NETWORK_ERROR"

    def __init__(self, url: str = "", detail: str = "Network error"):
        super().__init__(url, detail)
