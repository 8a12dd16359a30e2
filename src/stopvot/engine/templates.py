"""Permitted phone templates and sequence matching."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

VOWEL = "V"
VDCLO = "VDCLO"
VLCLO = "VLCLO"
REL = "REL"
ASP = "ASP"

PHONE_LABELS = frozenset({VOWEL, VDCLO, VLCLO, REL, ASP})


class PhoneTemplate(Enum):
    """The 8 closure/release/aspiration sequences a stop may be labeled with."""

    VDCLO_VLCLO_REL_ASP = (VDCLO, VLCLO, REL, ASP)
    VDCLO_VLCLO_REL = (VDCLO, VLCLO, REL)
    VDCLO_REL_ASP = (VDCLO, REL, ASP)
    VDCLO_REL = (VDCLO, REL)
    VLCLO_REL_ASP = (VLCLO, REL, ASP)
    VLCLO_REL = (VLCLO, REL)
    REL_ASP = (REL, ASP)
    REL_ONLY = (REL,)

    @property
    def labels(self) -> tuple[str, ...]:
        return self.value

    def occurs_in(self, labels: Sequence[str]) -> bool:
        """True when the template appears as a contiguous run of `labels`."""
        width = len(self.value)
        return any(
            tuple(labels[offset : offset + width]) == self.value
            for offset in range(len(labels) - width + 1)
        )


def matching_templates(labels: Sequence[str]) -> list[PhoneTemplate]:
    """All templates found in a word's phone labels, in declaration order."""
    return [template for template in PhoneTemplate if template.occurs_in(labels)]


def matches_any(labels: Sequence[str]) -> bool:
    return any(template.occurs_in(labels) for template in PhoneTemplate)


def label_sequence(labels: Sequence[str]) -> str:
    """Comma-led rendering of a label run, e.g. `,VDCLO,REL,ASP`."""
    return "".join(f",{label}" for label in labels)
