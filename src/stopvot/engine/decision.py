"""VOT and closure boundary resolution.

Every VOT is measured from the release onset (`begin`) to the onset of
voicing (`end`), so `end - begin` is negative for prevoiced stops and
positive for voicing-lag stops. Precedence, first match wins:

1. voiced and voiceless closure both labeled
   a. voiced share of the closure above `percent_voicing`: voicing starts
      at the voiced closure (negative VOT)
   b. otherwise voicing starts after aspiration, or after the release
2. only the voiced closure labeled: voicing starts at the voiced closure
3. no voiced closure: voicing starts after aspiration, or after the release
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from stopvot.engine.locator import StopComponents

VotBranch = Literal["prevoiced", "partially_voiced", "fully_voiced", "voiceless"]

# Smallest closure that still shows as nonzero at one decimal of ms.
MIN_REPORTED_CLO_MS = 0.05


@dataclass(frozen=True)
class BoundaryPair:
    """Two time points in seconds; `duration_sec` keeps the sign of `end - begin`."""

    begin: float
    end: float

    @property
    def duration_sec(self) -> float:
        return self.end - self.begin

    @property
    def duration_ms(self) -> float:
        return self.duration_sec * 1000.0

    @property
    def ordered(self) -> tuple[float, float]:
        return min(self.begin, self.end), max(self.begin, self.end)


@dataclass(frozen=True)
class VotDecision:
    vot: BoundaryPair
    closure: BoundaryPair | None
    branch: VotBranch

    @property
    def vot_ms(self) -> float:
        return self.vot.duration_ms

    @property
    def clo_ms(self) -> float | None:
        """Closure duration, `None` when no closure was labeled or it rounds to zero."""
        if self.closure is None or self.closure.duration_ms < MIN_REPORTED_CLO_MS:
            return None
        return self.closure.duration_ms

    @property
    def is_prevoiced(self) -> bool:
        return self.vot.duration_sec < 0


def voiced_fraction_exceeds(vdclo_sec: float, vlclo_sec: float, percent_voicing: float) -> bool:
    return vdclo_sec > (vdclo_sec + vlclo_sec) * percent_voicing / 100.0


def decide(components: StopComponents, percent_voicing: float) -> VotDecision:
    """Resolve VOT and closure boundaries for one stop."""
    if not 0.0 <= percent_voicing <= 100.0:
        raise ValueError(f"percent_voicing must be within [0, 100], got {percent_voicing}")

    rel = components.rel
    vdclo = components.vdclo
    vlclo = components.vlclo

    branch: VotBranch
    if vdclo is not None and vlclo is not None:
        if voiced_fraction_exceeds(vdclo.duration, vlclo.duration, percent_voicing):
            vot = BoundaryPair(begin=rel.start, end=vdclo.start)
            branch = "prevoiced"
        else:
            vot = _lag_vot(components)
            branch = "partially_voiced"
    elif vdclo is not None:
        vot = BoundaryPair(begin=rel.start, end=vdclo.start)
        branch = "fully_voiced"
    else:
        vot = _lag_vot(components)
        branch = "voiceless"

    return VotDecision(vot=vot, closure=_closure(components), branch=branch)


def _lag_vot(components: StopComponents) -> BoundaryPair:
    rel = components.rel
    if components.asp is not None:
        return BoundaryPair(begin=rel.start, end=components.asp.end)
    return BoundaryPair(begin=rel.start, end=rel.end)


def _closure(components: StopComponents) -> BoundaryPair | None:
    closure_start = components.vdclo or components.vlclo
    if closure_start is None:
        return None
    return BoundaryPair(begin=closure_start.start, end=components.rel.start)
