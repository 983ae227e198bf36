"""
Crawl-time data model: page outcomes, page records and link edges.
"""

from dataclasses import dataclass, field
from enum import Enum

DIRECT_ACCESS = "direct access"


class PageStatus(str, Enum):
    HEALTHY = "healthy"
    BROKEN = "broken"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class PageFacts:
    """Structured facts extracted from a rendered page."""
    title: str = ""
    has_meta_description: bool = False
    h1_count: int = 0
    outgoing_hrefs: tuple[str, ...] = ()
    external_link_count: int = 0
    requires_javascript: bool = False


@dataclass(frozen=True)
class HealthyPage:
    status_code: int
    load_time_ms: int
    size_kb: int
    facts: PageFacts
    status: PageStatus = field(default=PageStatus.HEALTHY, init=False)


@dataclass(frozen=True)
class BrokenPage:
    status_code: int
    load_time_ms: int
    error: str = ""
    status: PageStatus = field(default=PageStatus.BROKEN, init=False)


@dataclass(frozen=True)
class RedirectPage:
    status_code: int
    load_time_ms: int
    location: str
    status: PageStatus = field(default=PageStatus.REDIRECT, init=False)


PageOutcome = HealthyPage | BrokenPage | RedirectPage


@dataclass
class PageRecord:
    """One visited page, keyed by its canonical URL.

    ``outcome`` and ``depth`` are fixed at render time. Only
    ``incoming_links`` and ``is_orphan`` change, during the post-crawl
    graph pass.
    """
    url: str
    depth: int
    outcome: PageOutcome
    outgoing_links: frozenset[str] = frozenset()
    incoming_links: set[str] = field(default_factory=set)
    is_orphan: bool = False

    @property
    def status(self) -> PageStatus:
        return self.outcome.status

    @property
    def status_code(self) -> int:
        return self.outcome.status_code

    @property
    def load_time_ms(self) -> int:
        return self.outcome.load_time_ms

    @property
    def size_kb(self) -> int:
        if isinstance(self.outcome, HealthyPage):
            return self.outcome.size_kb
        return 0

    @property
    def facts(self) -> PageFacts | None:
        if isinstance(self.outcome, HealthyPage):
            return self.outcome.facts
        return None

    @property
    def title(self) -> str:
        return self.facts.title if self.facts else ""

    @property
    def has_meta_description(self) -> bool:
        return self.facts.has_meta_description if self.facts else False

    @property
    def h1_count(self) -> int:
        return self.facts.h1_count if self.facts else 0

    @property
    def redirect_target(self) -> str | None:
        if isinstance(self.outcome, RedirectPage):
            return self.outcome.location
        return None

    @property
    def is_healthy(self) -> bool:
        return self.status is PageStatus.HEALTHY


@dataclass(frozen=True)
class LinkEdge:
    """A discovered internal link from ``source_page`` to ``url``.

    ``depth`` is the depth of the source page (or of the page itself for
    direct-access edges).
    """
    url: str
    status: PageStatus
    source_page: str
    depth: int

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.url, self.source_page)
