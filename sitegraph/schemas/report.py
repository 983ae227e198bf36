"""
Internal link report schemas.

The JSON shape consumed downstream uses camelCase keys; dump with
``report.model_dump(by_alias=True)`` or ``report.model_dump_json(by_alias=True)``.
"""
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import Field

from sitegraph.models.page import PageStatus
from sitegraph.schemas.common import BaseSchema

T = TypeVar("T")


class LinkStats(BaseSchema):
    """A classified internal link."""

    url: str
    status: PageStatus
    source_page: str
    depth: int


class LinkDistributionEntry(BaseSchema):
    page: str
    incoming: int
    outgoing: int
    depth: int


class PerformanceStats(BaseSchema):
    """Average over all pages; fastest/slowest over healthy pages only."""

    average_load_time: int = 0
    fastest_page: str | None = None
    slowest_page: str | None = None


class LinkStatsByDepth(BaseSchema):
    broken: dict[int, int] = {}
    redirect: dict[int, int] = {}
    healthy: dict[int, int] = {}


class ScoreBreakdown(BaseSchema):
    orphan_penalty: float = 0.0
    broken_penalty: float = 0.0
    redirect_penalty: float = 0.0
    link_balance_penalty: float = 0.0
    depth_penalty: float = 0.0
    performance_penalty: float = 0.0
    incoming_penalty: float = 0.0
    score: int = 100
    category: str = "Excellent"

    @property
    def total_penalty(self) -> float:
        return (
            self.orphan_penalty
            + self.broken_penalty
            + self.redirect_penalty
            + self.link_balance_penalty
            + self.depth_penalty
            + self.performance_penalty
            + self.incoming_penalty
        )


class SEOReport(BaseSchema):
    """Internal link structure report."""

    start_url: str
    total_pages: int
    total_internal_links: int
    orphan_pages: list[str] = []
    broken_links: list[LinkStats] = []
    redirect_links: list[LinkStats] = []
    healthy_links: list[LinkStats] = []
    link_distribution: list[LinkDistributionEntry] = []
    depth_analysis: dict[int, int] = {}
    performance: PerformanceStats = PerformanceStats()
    score: int = Field(ge=0, le=100)
    score_category: str
    score_breakdown: ScoreBreakdown
    link_stats_by_depth: LinkStatsByDepth = LinkStatsByDepth()
    js_heavy_pages: list[str] = []
    generated_at: datetime
    crawl_duration_ms: int = 0


class AnalysisSuccess(BaseSchema, Generic[T]):
    success: bool = True
    url: str
    timestamp: datetime
    processing_time: str
    data: T


class AnalysisError(BaseSchema):
    success: bool = False
    error: str
    code: str | None = None
    processing_time: str
    timestamp: datetime


AnalysisResult = AnalysisSuccess[SEOReport] | AnalysisError
