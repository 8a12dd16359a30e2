"""Flanking vowel detection on the Phone tier."""

from __future__ import annotations

from dataclasses import dataclass

from stopvot.engine.templates import VOWEL
from stopvot.errors import InteriorVowelError
from stopvot.timeline import Tier


@dataclass(frozen=True)
class FlankingVowel:
    """Segment-tier identity of a vowel marked `V` on the Phone tier."""

    label: str
    duration_sec: float

    @property
    def duration_ms(self) -> float:
        return self.duration_sec * 1000.0


@dataclass(frozen=True)
class FlankingVowels:
    pre: FlankingVowel | None = None
    post: FlankingVowel | None = None

    @property
    def count(self) -> int:
        return (self.pre is not None) + (self.post is not None)


def vowel_positions(labels: list[str]) -> list[int]:
    """Positions of `V` in a phone label run."""
    return [position for position, label in enumerate(labels) if label == VOWEL]


def resolve_flanking_vowels(
    phone_tier: Tier,
    first: int,
    last: int,
    segment_tier: Tier,
) -> FlankingVowels:
    """Find the pre/post vowels of the phone range `[first, last]`.

    A `V` is only legal as the first or the last interval of the range.
    Each vowel's midpoint is looked up on the Segment tier, whose label
    names the actual phoneme.
    """
    labels = phone_tier.labels(first, last)
    pre: FlankingVowel | None = None
    post: FlankingVowel | None = None
    for position in vowel_positions(labels):
        index = first + position
        if position == 0:
            pre = _segment_vowel(phone_tier, index, segment_tier)
        elif position == len(labels) - 1:
            post = _segment_vowel(phone_tier, index, segment_tier)
        else:
            interval = phone_tier[index]
            raise InteriorVowelError(
                f"'V' at interior position {position + 1} of phone sequence "
                f"at {interval.start:.3f}-{interval.end:.3f}s"
            )
    return FlankingVowels(pre=pre, post=post)


def _segment_vowel(phone_tier: Tier, index: int, segment_tier: Tier) -> FlankingVowel | None:
    segment = segment_tier.interval_at(phone_tier[index].midpoint)
    if segment is None:
        return None
    return FlankingVowel(label=segment.text, duration_sec=segment.duration)
