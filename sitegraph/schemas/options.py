"""
Crawl option schemas.
"""
from pydantic import Field

from sitegraph.config import settings
from sitegraph.schemas.common import BaseSchema


class CrawlOptions(BaseSchema):
    """Per-crawl bounds and pacing."""

    max_depth: int = Field(default=settings.CRAWL_MAX_DEPTH, ge=0, le=20)
    max_pages: int = Field(default=settings.CRAWL_MAX_PAGES, ge=1, le=10000)
    per_page_delay_ms: int = Field(default=settings.CRAWL_DELAY_MS, ge=0, le=60000)
    page_timeout_ms: int = Field(default=settings.CRAWL_PAGE_TIMEOUT_MS, ge=100, le=300000)
    fast: bool = False
    headless: bool = settings.BROWSER_HEADLESS
    deadline_seconds: float | None = Field(default=None, gt=0)

    @property
    def effective_delay_ms(self) -> int:
        if self.fast:
            return min(self.per_page_delay_ms, settings.CRAWL_FAST_DELAY_MS)
        return self.per_page_delay_ms
