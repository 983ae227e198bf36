"""
Crawl data model for SiteGraph.
"""
from sitegraph.models.page import (
    DIRECT_ACCESS,
    PageStatus,
    PageFacts,
    HealthyPage,
    BrokenPage,
    RedirectPage,
    PageOutcome,
    PageRecord,
    LinkEdge,
)

__all__ = [
    "DIRECT_ACCESS",
    "PageStatus",
    "PageFacts",
    "HealthyPage",
    "BrokenPage",
    "RedirectPage",
    "PageOutcome",
    "PageRecord",
    "LinkEdge",
]
