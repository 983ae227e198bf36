"""
End-to-end tests for report assembly and the analysis entry points.
"""
import json

import pytest

from sitegraph.core.exceptions import NoPagesCrawled, RenderTimeout
from sitegraph.models.page import DIRECT_ACCESS, PageStatus
from sitegraph.schemas.options import CrawlOptions
from sitegraph.schemas.report import AnalysisError, AnalysisSuccess
from sitegraph.services.analyzer import analyze_internal_links, crawl

BASE = "https://example.com"


@pytest.fixture
def options():
    return CrawlOptions(max_depth=3, max_pages=30, per_page_delay_ms=0, page_timeout_ms=1000)


class TestCrawlScenarios:
    """Test reports produced for small known sites."""

    @pytest.mark.asyncio
    async def test_single_isolated_page(self, fake_renderer, site_factory, options):
        report = await crawl(BASE, options=options, renderer=fake_renderer(site_factory({"": []})))

        assert report.total_pages == 1
        assert report.total_internal_links == 0
        assert report.orphan_pages == []
        assert report.broken_links == []
        assert [link.source_page for link in report.healthy_links] == [DIRECT_ACCESS]
        assert report.depth_analysis == {0: 1}
        # Dead-end page (15) and no incoming links (4)
        assert report.score == 81
        assert report.score_category == "Good"

    @pytest.mark.asyncio
    async def test_linear_chain(self, fake_renderer, site_factory, options):
        site = site_factory({"": ["/a"], "/a": ["/b"], "/b": [], "/c": []})
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))

        assert report.total_pages == 3
        assert report.depth_analysis == {0: 1, 1: 1, 2: 1}
        assert report.orphan_pages == []
        assert f"{BASE}/c" not in [entry.page for entry in report.link_distribution]
        assert all(link.url != f"{BASE}/c" for link in report.healthy_links + report.broken_links)

    @pytest.mark.asyncio
    async def test_broken_link_reported(self, fake_renderer, site_factory, options):
        site = site_factory({"": ["/missing"]})
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))

        broken = {(link.url, link.source_page) for link in report.broken_links}
        assert (f"{BASE}/missing", BASE) in broken
        assert (f"{BASE}/missing", DIRECT_ACCESS) in broken
        assert report.score_breakdown.broken_penalty > 0
        assert report.score < 100

    @pytest.mark.asyncio
    async def test_page_bound_respected(self, fake_renderer, site_factory, options):
        graph = {"": [f"/p{i}" for i in range(1, 60)]}
        graph.update({f"/p{i}": [""] for i in range(1, 60)})
        report = await crawl(BASE, options=options, renderer=fake_renderer(site_factory(graph)))

        assert report.total_pages == 30
        assert sum(report.depth_analysis.values()) == 30

    @pytest.mark.asyncio
    async def test_redirect_link_reported(self, fake_renderer, redirect_factory, site_factory, options):
        site = site_factory({"": ["/old", "/new"], "/new": [""]})
        site[f"{BASE}/old"] = redirect_factory(f"{BASE}/old", "/new")
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))

        redirects = {(link.url, link.source_page) for link in report.redirect_links}
        assert (f"{BASE}/old", BASE) in redirects
        assert all(link.status is PageStatus.REDIRECT for link in report.redirect_links)
        assert report.score_breakdown.redirect_penalty > 0
        # Target discovered independently at its own depth
        new_entry = next(e for e in report.link_distribution if e.page == f"{BASE}/new")
        assert new_entry.depth == 1

    @pytest.mark.asyncio
    async def test_orphan_never_includes_start(self, fake_renderer, site_factory, options):
        site = site_factory({"": ["/a"], "/a": []})
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))
        assert BASE not in report.orphan_pages

    @pytest.mark.asyncio
    async def test_performance_summary(self, fake_renderer, page_factory, options):
        site = {
            BASE: page_factory(BASE, links=["/slow"], elapsed_ms=200),
            f"{BASE}/slow": page_factory(f"{BASE}/slow", elapsed_ms=4000),
        }
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))

        assert report.performance.average_load_time == 2100
        assert report.performance.fastest_page == BASE
        assert report.performance.slowest_page == f"{BASE}/slow"

    @pytest.mark.asyncio
    async def test_js_heavy_pages_listed(self, fake_renderer, page_factory, site_factory, options):
        site = site_factory({"": ["/app"]})
        site[f"{BASE}/app"] = page_factory(f"{BASE}/app", body_text='<div id="root"></div>')
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))
        assert report.js_heavy_pages == [f"{BASE}/app"]

    @pytest.mark.asyncio
    async def test_start_failure_raises(self, fake_renderer, options):
        with pytest.raises(NoPagesCrawled):
            await crawl(BASE, options=options, renderer=fake_renderer({BASE: RenderTimeout(BASE, 1000)}))


class TestReportSerialization:
    """Test the camelCase JSON shape."""

    @pytest.mark.asyncio
    async def test_camel_case_keys(self, fake_renderer, site_factory, options):
        site = site_factory({"": ["/a", "/missing"], "/a": []})
        report = await crawl(BASE, options=options, renderer=fake_renderer(site))
        data = json.loads(report.model_dump_json(by_alias=True))

        for key in (
            "startUrl", "totalPages", "totalInternalLinks", "orphanPages", "brokenLinks",
            "redirectLinks", "healthyLinks", "linkDistribution", "depthAnalysis",
            "performance", "score", "scoreCategory", "scoreBreakdown",
        ):
            assert key in data
        assert data["brokenLinks"][0]["sourcePage"]
        assert data["brokenLinks"][0]["status"] == "broken"
        assert data["performance"]["averageLoadTime"] >= 0
        assert "fastestPage" in data["performance"]
        assert data["depthAnalysis"] == {"0": 1, "1": 2}


class TestAnalyzeInternalLinks:
    """Test the success/error envelope."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, fake_renderer, site_factory, options):
        result = await analyze_internal_links(
            BASE, options=options, renderer=fake_renderer(site_factory({"": []})),
        )

        assert isinstance(result, AnalysisSuccess)
        assert result.success is True
        assert result.url == BASE
        assert result.processing_time.endswith("ms")
        assert result.data.total_pages == 1

    @pytest.mark.asyncio
    async def test_invalid_url_envelope(self, fake_renderer, options):
        result = await analyze_internal_links("example.com", options=options, renderer=fake_renderer({}))

        assert isinstance(result, AnalysisError)
        assert result.success is False
        assert result.code == "INVALID_URL"
        assert "example.com" in result.error

    @pytest.mark.asyncio
    async def test_unresolvable_domain_envelope(self, fake_renderer, options):
        result = await analyze_internal_links("https:///about", options=options, renderer=fake_renderer({}))

        assert isinstance(result, AnalysisError)
        assert result.code == "UNRESOLVABLE_DOMAIN"

    @pytest.mark.asyncio
    async def test_no_pages_envelope(self, fake_renderer, options):
        renderer = fake_renderer({BASE: RenderTimeout(BASE, 1000)})
        result = await analyze_internal_links(BASE, options=options, renderer=renderer)

        assert isinstance(result, AnalysisError)
        assert result.code == "NO_PAGES_CRAWLED"

    @pytest.mark.asyncio
    async def test_renderer_unavailable_envelope(self, fake_renderer, options):
        renderer = fake_renderer({}, fail_start=RuntimeError("no browser"))
        result = await analyze_internal_links(BASE, options=options, renderer=renderer)

        assert isinstance(result, AnalysisError)
        assert result.code == "RENDERER_UNAVAILABLE"
        assert renderer.stop_calls == 1

    @pytest.mark.asyncio
    async def test_error_envelope_serializes(self, fake_renderer, options):
        result = await analyze_internal_links("ftp://example.com", options=options, renderer=fake_renderer({}))
        data = result.model_dump(by_alias=True)
        assert data["success"] is False
        assert "processingTime" in data
