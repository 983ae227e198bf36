"""
Internal linking health score (0-100).

Starts at 100 and subtracts capped penalties:

| Penalty       | Formula                                   | Cap |
|---------------|-------------------------------------------|-----|
| Orphans       | orphan ratio x 100                        | 25  |
| Broken links  | broken ratio x 50                         | 20  |
| Redirects     | redirect ratio x 30                       | 15  |
| Link balance  | unbalanced ratio x 30                     | 15  |
| Depth         | (max depth - 4) x 3, when max depth > 4   | 10  |
| Performance   | (avg ms - 3000) / 100, when avg > 3000    | 10  |
| Incoming      | (2 - avg incoming) x 2, when avg < 2      | 5   |

Ratios are relative to the total page count. A page is unbalanced when it
has no outgoing links or more than three times the average.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from sitegraph.schemas.report import (
    LinkDistributionEntry,
    PerformanceStats,
    ScoreBreakdown,
)
from sitegraph.services.metrics import round_half_up

SCORE_CATEGORIES = [
    (90, "Excellent"),
    (80, "Good"),
    (70, "Fair"),
    (60, "Poor"),
]

DEPTH_THRESHOLD = 4
LOAD_TIME_THRESHOLD_MS = 3000
MIN_AVG_INCOMING = 2


@dataclass(frozen=True)
class ScoreInputs:
    total_pages: int
    orphan_count: int = 0
    broken_count: int = 0
    redirect_count: int = 0
    outgoing_counts: Sequence[int] = ()
    incoming_counts: Sequence[int] = ()
    max_depth_seen: int = 0
    average_load_time_ms: float = 0

    @classmethod
    def from_metrics(
        cls,
        total_pages: int,
        orphan_count: int,
        broken_count: int,
        redirect_count: int,
        link_distribution: list[LinkDistributionEntry],
        depth_analysis: dict[int, int],
        performance: PerformanceStats,
    ) -> "ScoreInputs":
        return cls(
            total_pages=total_pages,
            orphan_count=orphan_count,
            broken_count=broken_count,
            redirect_count=redirect_count,
            outgoing_counts=tuple(entry.outgoing for entry in link_distribution),
            incoming_counts=tuple(entry.incoming for entry in link_distribution),
            max_depth_seen=max(depth_analysis, default=0),
            average_load_time_ms=performance.average_load_time,
        )


def score_category(score: int) -> str:
    for threshold, category in SCORE_CATEGORIES:
        if score >= threshold:
            return category
    return "Critical"


def calculate_score(inputs: ScoreInputs) -> ScoreBreakdown:
    """Compute the score and each penalty. Pure and deterministic."""
    page_count = max(inputs.total_pages, 1)

    orphan_penalty = min(inputs.orphan_count / page_count * 100, 25)
    broken_penalty = min(inputs.broken_count / page_count * 50, 20)
    redirect_penalty = min(inputs.redirect_count / page_count * 30, 15)

    link_balance_penalty = 0.0
    if inputs.outgoing_counts:
        avg_outgoing = sum(inputs.outgoing_counts) / len(inputs.outgoing_counts)
        unbalanced = sum(
            1 for outgoing in inputs.outgoing_counts
            if outgoing > avg_outgoing * 3 or outgoing == 0
        )
        link_balance_penalty = min(unbalanced / len(inputs.outgoing_counts) * 30, 15)

    depth_penalty = 0.0
    if inputs.max_depth_seen > DEPTH_THRESHOLD:
        depth_penalty = min((inputs.max_depth_seen - DEPTH_THRESHOLD) * 3, 10)

    performance_penalty = 0.0
    if inputs.average_load_time_ms > LOAD_TIME_THRESHOLD_MS:
        performance_penalty = min((inputs.average_load_time_ms - LOAD_TIME_THRESHOLD_MS) / 100, 10)

    incoming_penalty = 0.0
    if inputs.incoming_counts:
        avg_incoming = sum(inputs.incoming_counts) / len(inputs.incoming_counts)
        if avg_incoming < MIN_AVG_INCOMING:
            incoming_penalty = min((MIN_AVG_INCOMING - avg_incoming) * 2, 5)

    breakdown = ScoreBreakdown(
        orphan_penalty=orphan_penalty,
        broken_penalty=broken_penalty,
        redirect_penalty=redirect_penalty,
        link_balance_penalty=link_balance_penalty,
        depth_penalty=depth_penalty,
        performance_penalty=performance_penalty,
        incoming_penalty=incoming_penalty,
    )
    score = max(0, min(100, round_half_up(100 - breakdown.total_penalty)))
    breakdown.score = score
    breakdown.category = score_category(score)
    return breakdown
