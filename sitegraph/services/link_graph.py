"""
Post-crawl link graph pass and edge classification.
"""

import logging
from dataclasses import dataclass, field

from sitegraph.models.page import DIRECT_ACCESS, LinkEdge, PageRecord, PageStatus

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedLinks:
    broken: list[LinkEdge] = field(default_factory=list)
    redirect: list[LinkEdge] = field(default_factory=list)
    healthy: list[LinkEdge] = field(default_factory=list)


def build_link_graph(pages: dict[str, PageRecord], start_url: str) -> None:
    """Fill ``incoming_links`` and ``is_orphan`` on every page.

    Needs the complete page map: a link only counts as incoming when its
    target was visited. The start page is never an orphan.
    """
    for page in pages.values():
        page.incoming_links.clear()

    for page in pages.values():
        for target_url in page.outgoing_links:
            if target_url == page.url:
                continue
            target = pages.get(target_url)
            if target is not None:
                target.incoming_links.add(page.url)

    orphans = 0
    for page in pages.values():
        page.is_orphan = len(page.incoming_links) == 0 and page.url != start_url
        orphans += page.is_orphan

    logger.debug(f"Link graph built: {len(pages)} pages, {orphans} orphans")


def dedupe_links(edges: list[LinkEdge]) -> list[LinkEdge]:
    """Drop repeated ``(url, source_page)`` edges, keeping the first."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for edge in edges:
        if edge.dedup_key in seen:
            continue
        seen.add(edge.dedup_key)
        unique.append(edge)
    return unique


def classify_links(pages: dict[str, PageRecord]) -> ClassifiedLinks:
    """Sort every discovered edge into broken, redirect and healthy lists.

    Each visited page first contributes a "direct access" edge with its own
    status. Then for each outgoing link: target not visited or Broken is a
    broken edge, Redirect a redirect edge, anything else healthy.
    """
    result = ClassifiedLinks()
    buckets = {
        PageStatus.BROKEN: result.broken,
        PageStatus.REDIRECT: result.redirect,
        PageStatus.HEALTHY: result.healthy,
    }

    for page in pages.values():
        buckets[page.status].append(LinkEdge(
            url=page.url, status=page.status, source_page=DIRECT_ACCESS, depth=page.depth,
        ))

    for page in pages.values():
        for target_url in sorted(page.outgoing_links):
            target = pages.get(target_url)
            status = PageStatus.BROKEN if target is None else target.status
            buckets[status].append(LinkEdge(
                url=target_url, status=status, source_page=page.url, depth=page.depth,
            ))

    result.broken = dedupe_links(result.broken)
    result.redirect = dedupe_links(result.redirect)
    result.healthy = dedupe_links(result.healthy)
    return result
