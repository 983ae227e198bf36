"""
Aggregate metrics over a completed page map.
"""

from collections import defaultdict

from sitegraph.models.page import LinkEdge, PageRecord
from sitegraph.schemas.report import (
    LinkDistributionEntry,
    LinkStatsByDepth,
    PerformanceStats,
)
from sitegraph.services.link_graph import ClassifiedLinks


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def calculate_link_distribution(pages: dict[str, PageRecord]) -> list[LinkDistributionEntry]:
    return [
        LinkDistributionEntry(
            page=url,
            incoming=len(page.incoming_links),
            outgoing=len(page.outgoing_links),
            depth=page.depth,
        )
        for url, page in pages.items()
    ]


def calculate_depth_analysis(pages: dict[str, PageRecord]) -> dict[int, int]:
    depth_analysis: dict[int, int] = defaultdict(int)
    for page in pages.values():
        depth_analysis[page.depth] += 1
    return dict(sorted(depth_analysis.items()))


def calculate_performance(pages: dict[str, PageRecord]) -> PerformanceStats:
    """Load-time statistics.

    The average covers every visited page, Broken ones included, so failed
    renders pull it down. Fastest and slowest only consider Healthy pages.
    """
    if not pages:
        return PerformanceStats()

    total_load_time = sum(page.load_time_ms for page in pages.values())
    healthy = [page for page in pages.values() if page.is_healthy]

    fastest = min(healthy, key=lambda p: p.load_time_ms, default=None)
    slowest = max(healthy, key=lambda p: p.load_time_ms, default=None)

    return PerformanceStats(
        average_load_time=round_half_up(total_load_time / len(pages)),
        fastest_page=fastest.url if fastest else None,
        slowest_page=slowest.url if slowest else None,
    )


def group_links_by_depth(edges: list[LinkEdge]) -> dict[int, int]:
    grouped: dict[int, int] = defaultdict(int)
    for edge in edges:
        grouped[edge.depth] += 1
    return dict(sorted(grouped.items()))


def calculate_links_by_depth(links: ClassifiedLinks) -> LinkStatsByDepth:
    return LinkStatsByDepth(
        broken=group_links_by_depth(links.broken),
        redirect=group_links_by_depth(links.redirect),
        healthy=group_links_by_depth(links.healthy),
    )


def count_internal_links(pages: dict[str, PageRecord]) -> int:
    return sum(len(page.outgoing_links) for page in pages.values())
