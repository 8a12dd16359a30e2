"""Build the VOT and CLO tiers added to annotated TextGrids."""

from __future__ import annotations

from collections.abc import Sequence

from stopvot.engine import VotDecision
from stopvot.timeline import Interval

VOT_TIER = "VOT"
CLO_TIER = "CLO"


def vot_intervals(decisions: Sequence[VotDecision]) -> list[Interval]:
    """`VOT` or `mVOT` intervals, labeled by the sign of the measurement."""
    intervals: list[Interval] = []
    for decision in decisions:
        begin, end = decision.vot.ordered
        if end <= begin:
            continue
        label = "mVOT" if decision.is_prevoiced else "VOT"
        intervals.append(Interval(start=begin, end=end, label=label))
    return intervals


def clo_intervals(decisions: Sequence[VotDecision]) -> list[Interval]:
    """`CLO` intervals for closures with a positive duration."""
    return [
        Interval(start=decision.closure.begin, end=decision.closure.end, label="CLO")
        for decision in decisions
        if decision.closure is not None and decision.clo_ms is not None
    ]


def annotation_tiers(
    decisions: Sequence[VotDecision],
    *,
    emit_vot_tier: bool,
    emit_clo_tier: bool,
) -> dict[str, list[Interval]]:
    tiers: dict[str, list[Interval]] = {}
    if emit_vot_tier:
        tiers[VOT_TIER] = vot_intervals(decisions)
    if emit_clo_tier:
        tiers[CLO_TIER] = clo_intervals(decisions)
    return tiers
