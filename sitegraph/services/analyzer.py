"""
SiteGraph Analyzer

Entry points tying the pipeline together:
    crawl -> link graph -> classification -> metrics -> score -> report
"""

import logging
import time
from datetime import datetime, timezone

from sitegraph.core.exceptions import SiteGraphError
from sitegraph.models.page import LinkEdge, PageRecord
from sitegraph.schemas.options import CrawlOptions
from sitegraph.schemas.report import (
    AnalysisError,
    AnalysisResult,
    AnalysisSuccess,
    LinkStats,
    SEOReport,
)
from sitegraph.services.crawler import InternalLinkCrawler
from sitegraph.services.link_graph import build_link_graph, classify_links
from sitegraph.services.metrics import (
    calculate_depth_analysis,
    calculate_link_distribution,
    calculate_links_by_depth,
    calculate_performance,
    count_internal_links,
)
from sitegraph.services.renderer import PageRenderer
from sitegraph.services.scoring import ScoreInputs, calculate_score

logger = logging.getLogger(__name__)


def _link_stats(edges: list[LinkEdge]) -> list[LinkStats]:
    return [
        LinkStats(url=edge.url, status=edge.status, source_page=edge.source_page, depth=edge.depth)
        for edge in edges
    ]


def assemble_report(
    pages: dict[str, PageRecord],
    start_url: str,
    crawl_duration_ms: int = 0,
) -> SEOReport:
    """Build the report from a completed page map.

    Mutates ``incoming_links``/``is_orphan`` on the records (graph pass).
    """
    build_link_graph(pages, start_url)
    links = classify_links(pages)

    link_distribution = calculate_link_distribution(pages)
    depth_analysis = calculate_depth_analysis(pages)
    performance = calculate_performance(pages)
    orphan_pages = [page.url for page in pages.values() if page.is_orphan]

    breakdown = calculate_score(ScoreInputs.from_metrics(
        total_pages=len(pages),
        orphan_count=len(orphan_pages),
        broken_count=len(links.broken),
        redirect_count=len(links.redirect),
        link_distribution=link_distribution,
        depth_analysis=depth_analysis,
        performance=performance,
    ))

    return SEOReport(
        start_url=start_url,
        total_pages=len(pages),
        total_internal_links=count_internal_links(pages),
        orphan_pages=orphan_pages,
        broken_links=_link_stats(links.broken),
        redirect_links=_link_stats(links.redirect),
        healthy_links=_link_stats(links.healthy),
        link_distribution=link_distribution,
        depth_analysis=depth_analysis,
        performance=performance,
        score=breakdown.score,
        score_category=breakdown.category,
        score_breakdown=breakdown,
        link_stats_by_depth=calculate_links_by_depth(links),
        js_heavy_pages=[
            page.url for page in pages.values()
            if page.facts is not None and page.facts.requires_javascript
        ],
        generated_at=datetime.now(timezone.utc),
        crawl_duration_ms=crawl_duration_ms,
    )


async def crawl(
    start_url: str,
    options: CrawlOptions | None = None,
    renderer: PageRenderer | None = None,
) -> SEOReport:
    """Crawl ``start_url`` and return its internal link report.

    Raises:
        InvalidUrl / UnresolvableDomain: start URL unusable
        RendererUnavailable: renderer failed to initialize
        NoPagesCrawled: start URL failed to render
    """
    crawler = InternalLinkCrawler(start_url, options=options, renderer=renderer)
    pages = await crawler.crawl()

    logger.info(f"Analyzing link structure of {len(pages)} pages")
    report = assemble_report(pages, crawler.start_url, crawl_duration_ms=crawler.elapsed_ms)
    logger.info(f"Results: {report.total_pages} pages, SEO score: {report.score}/100 ({report.score_category})")
    return report


async def analyze_internal_links(
    url: str,
    options: CrawlOptions | None = None,
    renderer: PageRenderer | None = None,
) -> AnalysisResult:
    """Run ``crawl`` and wrap the outcome in a success or error envelope."""
    start_time = time.monotonic()
    logger.info(f"Starting internal link analysis for: {url}")

    try:
        report = await crawl(url, options=options, renderer=renderer)
    except SiteGraphError as e:
        processing_time = int((time.monotonic() - start_time) * 1000)
        logger.error(f"Analysis of {url} failed after {processing_time}ms: {e.detail}")
        return AnalysisError(
            error=e.detail,
            code=e.code,
            processing_time=f"{processing_time}ms",
            timestamp=datetime.now(timezone.utc),
        )

    processing_time = int((time.monotonic() - start_time) * 1000)
    logger.info(f"Analysis complete in {processing_time}ms")
    return AnalysisSuccess[SEOReport](
        url=url,
        timestamp=datetime.now(timezone.utc),
        processing_time=f"{processing_time}ms",
        data=report,
    )
