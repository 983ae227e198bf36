"""
Pytest configuration and fixtures for SiteGraph tests.
"""
import pytest

from sitegraph.schemas.options import CrawlOptions
from sitegraph.services.renderer import PageRenderer, RenderedPage

BASE_URL = "https://example.com"


# ============================================================================
# Fake Renderer
# ============================================================================

class FakeRenderer(PageRenderer):
    """In-memory renderer serving a prepared site.

    URLs missing from ``site`` answer 404. Values that are exceptions are
    raised from ``render``.
    """

    def __init__(self, site: dict, fail_start: Exception | None = None):
        self.site = site
        self.fail_start = fail_start
        self.calls: list[str] = []
        self.start_calls = 0
        self.stop_calls = 0

    async def start(self):
        self.start_calls += 1
        if self.fail_start is not None:
            raise self.fail_start

    async def stop(self):
        self.stop_calls += 1

    async def render(self, url: str, timeout_ms: int) -> RenderedPage:
        self.calls.append(url)
        result = self.site.get(url)
        if result is None:
            return RenderedPage(url=url, final_url=url, status_code=404, content="<html><body>Not found</body></html>", elapsed_ms=5)
        if isinstance(result, Exception):
            raise result
        return result


def make_html(links=(), title="Page", meta_description=True, h1_count=1, body_text="Some content") -> str:
    anchors = "\n".join(f'<a href="{href}">link</a>' for href in links)
    meta = '<meta name="description" content="A description.">' if meta_description else ""
    headings = "\n".join("<h1>Heading</h1>" for _ in range(h1_count))
    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>{title}</title>
        {meta}
    </head>
    <body>
        {headings}
        <p>{body_text}</p>
        {anchors}
    </body>
    </html>
    """


def make_page(url: str, links=(), status_code: int = 200, elapsed_ms: int = 100, **html_kwargs) -> RenderedPage:
    return RenderedPage(
        url=url,
        final_url=url,
        status_code=status_code,
        content=make_html(links, **html_kwargs),
        elapsed_ms=elapsed_ms,
    )


def make_redirect(url: str, location: str | None, status_code: int = 302) -> RenderedPage:
    return RenderedPage(
        url=url,
        final_url=url,
        status_code=status_code,
        content="",
        elapsed_ms=20,
        redirect_location=location,
    )


def make_site(graph: dict[str, list[str]]) -> dict[str, RenderedPage]:
    """Build a healthy site from ``{path: [linked paths]}``."""
    return {
        f"{BASE_URL}{path}": make_page(f"{BASE_URL}{path}", [f"{BASE_URL}{link}" for link in links])
        for path, links in graph.items()
    }


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def fake_renderer():
    """Factory for FakeRenderer instances."""
    def _make(site: dict, fail_start: Exception | None = None) -> FakeRenderer:
        return FakeRenderer(site, fail_start=fail_start)
    return _make


@pytest.fixture
def page_factory():
    return make_page


@pytest.fixture
def redirect_factory():
    return make_redirect


@pytest.fixture
def site_factory():
    return make_site


@pytest.fixture
def html_factory():
    return make_html


@pytest.fixture
def fast_options() -> CrawlOptions:
    """Options without politeness delay."""
    return CrawlOptions(max_depth=3, max_pages=30, per_page_delay_ms=0, page_timeout_ms=1000)


@pytest.fixture
def sample_html_page() -> str:
    """Sample HTML page for extractor tests."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>Test Page Title</title>
        <meta name="description" content="This is a test page description for SEO testing.">
        <link rel="canonical" href="https://example.com/test-page">
    </head>
    <body>
        <h1>Main Heading</h1>
        <p>This is some test content for the page.</p>
        <h2>Secondary Heading</h2>
        <p>More content here with enough words to pass thin content checks.</p>
        <a href="/about">About Us</a>
        <a href="/about/">About Us Again</a>
        <a href="services?ref=nav#top">Services</a>
        <a href="https://blog.example.com/post">Blog</a>
        <a href="https://external.com">External Link</a>
        <a href="#section">Jump</a>
        <a href="mailto:hello@example.com">Mail</a>
        <a href="tel:+123456">Call</a>
        <a href="javascript:void(0)">Menu</a>
        <a href="">Empty</a>
        <a>No href</a>
        <img src="/image.jpg" alt="Test Image">
    </body>
    </html>
    """
