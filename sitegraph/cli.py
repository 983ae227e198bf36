"""
Command-line interface: crawl a site and print its internal link report.
"""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from sitegraph.config import settings
from sitegraph.core.exceptions import SiteGraphError
from sitegraph.schemas.options import CrawlOptions
from sitegraph.schemas.report import SEOReport
from sitegraph.services.analyzer import crawl
from sitegraph.services.renderer import create_renderer
from sitegraph.services.url_utils import truncate_url


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def performance_rating(load_time_ms: int, slow_label: str = "Poor") -> str:
    if load_time_ms < 1000:
        return "Excellent"
    if load_time_ms < 2000:
        return "Good"
    if load_time_ms < 3000:
        return "Fair"
    return slow_label


def average_depth(links) -> str:
    if not links:
        return "0"
    return f"{sum(link.depth for link in links) / len(links):.1f}"


def format_table(head: list[str], rows: list[list], widths: list[int]) -> str:
    def fmt(cells):
        return " | ".join(str(cell).ljust(width)[:width] for cell, width in zip(cells, widths))

    separator = "-+-".join("-" * width for width in widths)
    return "\n".join([fmt(head), separator] + [fmt(row) for row in rows])


def render_report(report: SEOReport) -> str:
    lines = [
        "=" * 80,
        "INTERNAL LINK ANALYSIS REPORT".center(80),
        "=" * 80,
        "",
        f"SEO Score: {report.score}/100 ({report.score_category})",
        "",
    ]

    lines.append(format_table(
        ["Metric", "Value", "Status"],
        [
            ["Total Pages", report.total_pages, "info"],
            ["Internal Links", report.total_internal_links, "info"],
            ["Orphan Pages", len(report.orphan_pages), "Good" if not report.orphan_pages else "Needs Fix"],
            ["Broken Links", len(report.broken_links), "Good" if not report.broken_links else "Critical"],
            ["Redirect Links", len(report.redirect_links), "Good" if not report.redirect_links else "Warning"],
            ["Healthy Links", len(report.healthy_links), "Excellent"],
            ["Avg Load Time", f"{report.performance.average_load_time}ms",
             performance_rating(report.performance.average_load_time)],
        ],
        [28, 18, 12],
    ))
    lines.append("")

    lines.append("Top 10 Pages by Incoming Links:")
    top_pages = sorted(report.link_distribution, key=lambda entry: entry.incoming, reverse=True)[:10]
    lines.append(format_table(
        ["Page URL", "Incoming", "Outgoing", "Depth"],
        [[truncate_url(entry.page, 43), entry.incoming, entry.outgoing, f"L{entry.depth}"] for entry in top_pages],
        [45, 10, 10, 6],
    ))
    lines.append("")

    lines.append("Page Depth Distribution:")
    depth_rows = []
    for depth, count in sorted(report.depth_analysis.items()):
        percentage = count / max(report.total_pages, 1) * 100
        at_depth = [entry for entry in report.link_distribution if entry.depth == depth]
        avg_incoming = sum(entry.incoming for entry in at_depth) / max(len(at_depth), 1)
        strength = "Strong" if avg_incoming >= 3 else "Weak" if avg_incoming >= 1 else "Poor"
        depth_rows.append([f"Level {depth}", count, f"{percentage:.1f}%", strength])
    lines.append(format_table(["Depth Level", "Page Count", "Percentage", "Link Status"], depth_rows, [12, 10, 10, 11]))
    lines.append("")

    lines.append("Internal Link Status Overview:")
    status_rows = []
    buckets = [
        ("Healthy", report.healthy_links),
        ("Broken", report.broken_links),
        ("Redirect", report.redirect_links),
    ]
    total_links = sum(len(links) for _, links in buckets)
    if total_links > 0:
        for label, links in buckets:
            status_rows.append([label, len(links), f"{len(links) / total_links * 100:.1f}%", average_depth(links)])
    lines.append(format_table(["Status", "Count", "Percentage", "Avg Depth"], status_rows, [13, 13, 18, 13]))
    lines.append("")

    performance = report.performance
    lines.append("Performance Overview:")
    lines.append(format_table(
        ["Metric", "Value", "Rating"],
        [
            ["Average Load Time", f"{performance.average_load_time}ms",
             performance_rating(performance.average_load_time, slow_label="Needs Work")],
            ["Fastest Page", truncate_url(performance.fastest_page or "n/a", 30), "Fastest"],
            ["Slowest Page", truncate_url(performance.slowest_page or "n/a", 30), "Slowest"],
        ],
        [23, 30, 18],
    ))
    lines.append("")

    if report.orphan_pages or report.broken_links:
        lines.append("CRITICAL ISSUES FOUND:")
        for url in report.orphan_pages[:3]:
            lines.append(f"  orphan: {truncate_url(url, 60)}")
        if len(report.orphan_pages) > 3:
            lines.append(f"  ... and {len(report.orphan_pages) - 3} more orphan pages")
        for link in report.broken_links[:3]:
            lines.append(f"  broken: {truncate_url(link.url, 50)} (source: {truncate_url(link.source_page, 40)})")
        if len(report.broken_links) > 3:
            lines.append(f"  ... and {len(report.broken_links) - 3} more broken links")
        lines.append("")

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze a website's internal link structure.")
    parser.add_argument("url", help="Start URL including protocol (http:// or https://)")
    parser.add_argument("--version", action="version", version=f"{settings.PROJECT_NAME} {settings.VERSION}")
    parser.add_argument("--max-depth", type=int, default=settings.CRAWL_MAX_DEPTH, help="Maximum click depth")
    parser.add_argument("--max-pages", type=int, default=settings.CRAWL_MAX_PAGES, help="Maximum pages to visit")
    parser.add_argument("--timeout", type=int, default=settings.CRAWL_PAGE_TIMEOUT_MS, help="Per-page timeout in ms")
    parser.add_argument("--fast", action="store_true", help="Use a shorter politeness delay")
    parser.add_argument(
        "--renderer",
        choices=["playwright", "http"],
        default=settings.RENDERER,
        help="Page renderer: headless browser or plain HTTP",
    )
    parser.add_argument("--visible", action="store_true", help="Run the browser with a visible window")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.LOG_LEVEL,
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level if args.log_level in LOG_LEVELS else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = CrawlOptions(
            max_depth=args.max_depth,
            max_pages=args.max_pages,
            page_timeout_ms=args.timeout,
            fast=args.fast,
            headless=not args.visible,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        parser.error(f"invalid crawl options: {problems}")
    renderer = create_renderer(args.renderer, headless=options.headless)

    try:
        report = asyncio.run(crawl(args.url, options=options, renderer=renderer))
    except SiteGraphError as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(by_alias=True, indent=2))
    else:
        print(render_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
