"""Interval tiers and time lookups over hand-labeled annotation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

TierKind = Literal["interval", "point"]

TIME_EPSILON = 1e-9


def same_time(a: float, b: float) -> bool:
    """Compare two boundary times with a sub-nanosecond tolerance."""
    return abs(a - b) <= TIME_EPSILON


@dataclass(frozen=True)
class Interval:
    """Labeled time span `[start, end)` in seconds."""

    start: float
    end: float
    label: str = ""

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValueError(f"interval start must precede end, got [{self.start}, {self.end}]")

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2.0

    @property
    def text(self) -> str:
        return self.label.strip()


@dataclass(frozen=True)
class Tier:
    """Ordered, contiguous run of intervals.

    Point tiers keep their name and kind only; the engine never reads their
    content and rejects them wherever an interval tier is required.
    """

    name: str
    intervals: tuple[Interval, ...] = ()
    kind: TierKind = "interval"

    def __post_init__(self) -> None:
        for previous, current in zip(self.intervals, self.intervals[1:]):
            if not same_time(previous.end, current.start):
                raise ValueError(
                    f"tier {self.name!r} is not contiguous at {previous.end} / {current.start}"
                )

    def __len__(self) -> int:
        return len(self.intervals)

    def __getitem__(self, index: int) -> Interval:
        return self.intervals[index]

    @property
    def is_interval_tier(self) -> bool:
        return self.kind == "interval"

    @property
    def start(self) -> float:
        return self.intervals[0].start if self.intervals else 0.0

    @property
    def end(self) -> float:
        return self.intervals[-1].end if self.intervals else 0.0

    def labels(self, first: int, last: int) -> list[str]:
        """Stripped labels of the inclusive index range `[first, last]`."""
        return [interval.text for interval in self.intervals[first : last + 1]]

    def index_at(self, time: float) -> int | None:
        """Index of the interval with `start <= time < end`."""
        if not self.intervals or time < self.start - TIME_EPSILON:
            return None
        if time > self.end + TIME_EPSILON:
            return None
        for index, interval in enumerate(self.intervals):
            if time < interval.end and not same_time(time, interval.end):
                return index
        return len(self.intervals) - 1

    def index_at_or_before(self, time: float) -> int | None:
        """Index of the interval owning `time` from the left (`start < time <= end`)."""
        if not self.intervals or time < self.start - TIME_EPSILON:
            return None
        if time > self.end + TIME_EPSILON:
            return None
        for index, interval in enumerate(self.intervals):
            if time <= interval.end or same_time(time, interval.end):
                return index
        return len(self.intervals) - 1

    def interval_at(self, time: float) -> Interval | None:
        index = self.index_at(time)
        return None if index is None else self.intervals[index]

    def span_indices(self, start: float, end: float) -> tuple[int, int] | None:
        """Inclusive index range of the intervals lying inside `[start, end]`.

        The first interval is skipped when it began before `start` and the
        last one when it runs past `end`, so a slightly misaligned word span
        still resolves to the exact sub-range it covers.
        """
        first = self.index_at(start)
        last = self.index_at_or_before(end)
        if first is None or last is None:
            return None
        if not same_time(self.intervals[first].start, start):
            first += 1
        if not same_time(self.intervals[last].end, end):
            last -= 1
        if first > last:
            return None
        return first, last


@dataclass(frozen=True)
class AnnotationDocument:
    """One annotated recording: its tiers, addressed by 1-based number."""

    name: str
    tiers: tuple[Tier, ...]
    source_path: Path | None = field(default=None, compare=False)

    def has_tier(self, number: int) -> bool:
        return 1 <= number <= len(self.tiers)

    def tier(self, number: int) -> Tier:
        if not self.has_tier(number):
            raise IndexError(f"{self.name} has {len(self.tiers)} tiers, no tier {number}")
        return self.tiers[number - 1]
