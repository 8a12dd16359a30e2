"""Timeline model: interval tiers and annotation documents."""

from stopvot.timeline.tier import (
    TIME_EPSILON,
    AnnotationDocument,
    Interval,
    Tier,
    TierKind,
    same_time,
)

__all__ = [
    "TIME_EPSILON",
    "AnnotationDocument",
    "Interval",
    "Tier",
    "TierKind",
    "same_time",
]
