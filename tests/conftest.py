from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from praatio import textgrid

from stopvot.timeline import AnnotationDocument, Interval, Tier

Entry = tuple[float, float, str]

# "apa" with a prevoiced /p/: 60 ms voiced + 20 ms voiceless closure.
WORD_ENTRIES: list[Entry] = [(0.1, 0.5, "apa")]
SEGMENT_ENTRIES: list[Entry] = [(0.1, 0.2, "a"), (0.2, 0.35, "p"), (0.35, 0.5, "a")]
PHONE_ENTRIES: list[Entry] = [
    (0.1, 0.2, "V"),
    (0.2, 0.26, "VDCLO"),
    (0.26, 0.28, "VLCLO"),
    (0.28, 0.29, "REL"),
    (0.29, 0.35, "ASP"),
    (0.35, 0.5, "V"),
]
SOURCE_ENTRIES: list[Entry] = [(0.0, 1.0, "speaker1")]


def build_tier(name: str, entries: Sequence[Entry], *, end: float = 1.0) -> Tier:
    """Fill gaps with unlabeled intervals the way praatio reads them back."""
    intervals: list[Interval] = []
    cursor = 0.0
    for start, stop, label in entries:
        if start > cursor:
            intervals.append(Interval(cursor, start, ""))
        intervals.append(Interval(start, stop, label))
        cursor = stop
    if cursor < end:
        intervals.append(Interval(cursor, end, ""))
    return Tier(name=name, intervals=tuple(intervals))


@pytest.fixture
def tier_builder() -> Callable[..., Tier]:
    return build_tier


@pytest.fixture
def stop_document() -> AnnotationDocument:
    return AnnotationDocument(
        name="apa",
        tiers=(
            build_tier("word", WORD_ENTRIES),
            build_tier("segment", SEGMENT_ENTRIES),
            build_tier("phone", PHONE_ENTRIES),
            build_tier("source", SOURCE_ENTRIES),
        ),
    )


@pytest.fixture
def make_textgrid(tmp_path: Path) -> Callable[..., Path]:
    """Write a TextGrid from `(name, entries)` or `(name, points, "point")` tuples."""

    def _make(name: str, tiers: Sequence[tuple], *, max_time: float = 1.0) -> Path:
        tg = textgrid.Textgrid()
        for tier_def in tiers:
            if len(tier_def) == 3 and tier_def[2] == "point":
                tier = textgrid.PointTier(tier_def[0], list(tier_def[1]), 0.0, max_time)
            else:
                tier = textgrid.IntervalTier(tier_def[0], list(tier_def[1]), 0.0, max_time)
            tg.addTier(tier)
        path = tmp_path / f"{name}.TextGrid"
        tg.save(str(path), format="long_textgrid", includeBlankSpaces=True)
        return path

    return _make


@pytest.fixture
def stop_textgrid(make_textgrid: Callable[..., Path]) -> Path:
    return make_textgrid(
        "apa",
        [
            ("word", WORD_ENTRIES),
            ("segment", SEGMENT_ENTRIES),
            ("phone", PHONE_ENTRIES),
            ("source", SOURCE_ENTRIES),
        ],
    )
