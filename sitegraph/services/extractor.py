"""
Page fact extraction from rendered HTML.
"""

import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from sitegraph.core.exceptions import InvalidUrl, UnresolvableDomain
from sitegraph.models.page import PageFacts
from sitegraph.services.url_utils import ALLOWED_SCHEMES, get_domain, is_internal, normalize_url

logger = logging.getLogger(__name__)

NON_NAVIGABLE_PREFIXES = ("#", "javascript:", "mailto:", "tel:", "data:")

INFINITE_SCROLL_MARKERS = (
    "infinite-scroll",
    "infinite_scroll",
    "infinitescroll",
    "load-more",
    "data-infinite",
)


def is_navigable_href(href: str | None) -> bool:
    if not href or not href.strip():
        return False
    return not href.strip().lower().startswith(NON_NAVIGABLE_PREFIXES)


def resolve_link_base(soup: BeautifulSoup, page_url: str) -> str:
    """URL that relative hrefs resolve against: ``<base href>`` if usable, else the page URL."""
    base_tag = soup.find("base", href=True)
    if not base_tag:
        return page_url

    base_href = base_tag["href"].strip()
    if not base_href:
        return page_url
    try:
        resolved = urljoin(page_url, base_href)
        if urlparse(resolved).scheme.lower() not in ALLOWED_SCHEMES:
            return page_url
    except ValueError:
        logger.debug(f"Ignoring unparsable <base href> on {page_url}: {base_href!r}")
        return page_url
    return resolved


def extract_page_facts(html: str, page_url: str) -> PageFacts:
    """Extract title, meta description presence, H1 count and links.

    Hrefs are resolved against the document's ``<base href>`` when present,
    otherwise against ``page_url``. Fragment-only and
    non-navigable hrefs are dropped, as are hrefs that do not normalize.
    """
    soup = BeautifulSoup(html or "", "lxml")

    title = ""
    title_tag = soup.find("title")
    if title_tag:
        title = title_tag.get_text(strip=True)

    meta_desc_tag = soup.find("meta", attrs={"name": "description"})
    has_meta_description = bool(meta_desc_tag and (meta_desc_tag.get("content") or "").strip())

    h1_count = len(soup.find_all("h1"))

    try:
        domain = get_domain(page_url)
    except UnresolvableDomain:
        domain = ""

    link_base = resolve_link_base(soup, page_url)

    outgoing: list[str] = []
    seen: set[str] = set()
    external_count = 0
    for a in soup.find_all("a", href=True):
        href = a.get("href", "")
        if not is_navigable_href(href):
            continue

        try:
            full_url = normalize_url(href, base=link_base)
        except InvalidUrl:
            logger.debug(f"Discarding unparsable href on {page_url}: {href!r}")
            continue

        if full_url in seen:
            continue
        seen.add(full_url)
        outgoing.append(full_url)

        if not is_internal(domain, full_url):
            external_count += 1

    return PageFacts(
        title=title,
        has_meta_description=has_meta_description,
        h1_count=h1_count,
        outgoing_hrefs=tuple(outgoing),
        external_link_count=external_count,
        requires_javascript=detect_javascript_content(soup),
    )


def detect_javascript_content(html: str | BeautifulSoup) -> bool:
    """Detect whether a page relies on JS-driven content.

    Presence detection only: SPA root containers with little server-rendered
    text, loading placeholders, and infinite-scroll markers.
    """
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html or "", "lxml")

    body = soup.find("body")
    body_text = body.get_text(strip=True) if body else ""
    scripts = soup.find_all("script", src=True)

    if len(body_text) < 300 and len(scripts) > 5:
        return True

    root_div = soup.find(id="root") or soup.find(id="app") or soup.find(id="__next") or soup.find(id="__nuxt")
    if root_div and len(root_div.get_text(strip=True)) < 100:
        return True

    for tag in soup.find_all(True):
        classes = " ".join(tag.get("class") or []).lower()
        tag_id = (tag.get("id") or "").lower()
        if any(marker in classes or marker in tag_id for marker in INFINITE_SCROLL_MARKERS):
            return True
        if any(attr.startswith("data-infinite") for attr in tag.attrs):
            return True

    return False
