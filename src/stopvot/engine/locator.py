"""Locate closure, release and aspiration intervals in a phone range."""

from __future__ import annotations

from dataclasses import dataclass

from stopvot.engine.templates import ASP, REL, VDCLO, VLCLO
from stopvot.timeline import Interval, Tier


@dataclass(frozen=True)
class StopComponents:
    """Phone intervals making up one stop. Only the release is mandatory."""

    rel: Interval
    vdclo: Interval | None = None
    vlclo: Interval | None = None
    asp: Interval | None = None


def find_label(tier: Tier, first: int, last: int, label: str) -> int | None:
    """Absolute index of the first interval in `[first, last]` carrying `label`."""
    for index in range(first, last + 1):
        if tier[index].text == label:
            return index
    return None


def locate_components(phone_tier: Tier, first: int, last: int) -> StopComponents | None:
    """Return the stop's components, or `None` when no release is labeled."""
    rel_index = find_label(phone_tier, first, last, REL)
    if rel_index is None:
        return None

    def optional(label: str) -> Interval | None:
        index = find_label(phone_tier, first, last, label)
        return None if index is None else phone_tier[index]

    return StopComponents(
        rel=phone_tier[rel_index],
        vdclo=optional(VDCLO),
        vlclo=optional(VLCLO),
        asp=optional(ASP),
    )
