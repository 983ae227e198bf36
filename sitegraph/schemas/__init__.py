"""
Pydantic schemas for SiteGraph.
"""
from sitegraph.schemas.common import BaseSchema
from sitegraph.schemas.options import CrawlOptions
from sitegraph.schemas.report import (
    LinkStats,
    LinkDistributionEntry,
    PerformanceStats,
    LinkStatsByDepth,
    ScoreBreakdown,
    SEOReport,
    AnalysisSuccess,
    AnalysisError,
    AnalysisResult,
)

__all__ = [
    "BaseSchema",
    "CrawlOptions",
    "LinkStats",
    "LinkDistributionEntry",
    "PerformanceStats",
    "LinkStatsByDepth",
    "ScoreBreakdown",
    "SEOReport",
    "AnalysisSuccess",
    "AnalysisError",
    "AnalysisResult",
]
