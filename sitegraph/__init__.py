"""
SiteGraph: internal link structure analysis for websites.
"""
from sitegraph.core.exceptions import (
    SiteGraphError,
    InvalidUrl,
    UnresolvableDomain,
    NoPagesCrawled,
    RendererUnavailable,
)
from sitegraph.schemas.options import CrawlOptions
from sitegraph.schemas.report import SEOReport
from sitegraph.services.analyzer import analyze_internal_links, crawl

__version__ = "0.1.0"

__all__ = [
    "SiteGraphError",
    "InvalidUrl",
    "UnresolvableDomain",
    "NoPagesCrawled",
    "RendererUnavailable",
    "CrawlOptions",
    "SEOReport",
    "analyze_internal_links",
    "crawl",
]
