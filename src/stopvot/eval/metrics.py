"""Summary statistics over VOT result rows."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from statistics import mean, median

from stopvot.models import VotResultRow


@dataclass(frozen=True)
class SegmentSummary:
    """VOT and closure statistics for one target segment."""

    segment: str
    count: int
    vot_mean_ms: float
    vot_median_ms: float
    vot_p10_ms: float
    vot_p90_ms: float
    prevoiced_rate: float
    clo_count: int
    clo_mean_ms: float | None


def summarize_results(rows: list[VotResultRow]) -> dict[str, SegmentSummary]:
    """Group rows by segment label, in order of first appearance."""
    grouped: dict[str, list[VotResultRow]] = defaultdict(list)
    for row in rows:
        grouped[row.segment].append(row)

    summaries: dict[str, SegmentSummary] = {}
    for segment, segment_rows in grouped.items():
        vots = [row.vot_ms for row in segment_rows]
        closures = [row.clo_ms for row in segment_rows if row.clo_ms is not None]
        summaries[segment] = SegmentSummary(
            segment=segment,
            count=len(segment_rows),
            vot_mean_ms=round(mean(vots), 3),
            vot_median_ms=round(median(vots), 3),
            vot_p10_ms=round(_percentile(vots, 10.0), 3),
            vot_p90_ms=round(_percentile(vots, 90.0), 3),
            prevoiced_rate=round(_rate_below_zero(vots), 4),
            clo_count=len(closures),
            clo_mean_ms=round(mean(closures), 3) if closures else None,
        )
    return summaries


def summaries_to_dict(summaries: dict[str, SegmentSummary]) -> dict[str, dict[str, object]]:
    return {segment: asdict(summary) for segment, summary in summaries.items()}


def _percentile(values: list[float], pct: float) -> float:
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    if len(sorted_vals) == 1:
        return sorted_vals[0]

    rank = (pct / 100.0) * (len(sorted_vals) - 1)
    lower = int(rank)
    upper = min(lower + 1, len(sorted_vals) - 1)
    weight = rank - lower
    return sorted_vals[lower] * (1.0 - weight) + sorted_vals[upper] * weight


def _rate_below_zero(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(1 for value in values if value < 0) / len(values)
