"""Shared data models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_SEGMENTS = ("b", "d", "g", "p", "t", "k")

SkipReason = Literal["no_template", "no_target_segment", "no_release"]

CSV_HEADER = (
    "Filename",
    "Source",
    "Word",
    "V_pre",
    "V_pre_dur",
    "Segment",
    "V_post",
    "V_post_dur",
    "VOT_beg",
    "VOT_end",
    "VOT",
    "CLO",
)

MISSING = "NA"
CLO_NOT_MEASURED = "-999"


class HealthResponse(BaseModel):
    """Response payload for the API health endpoint."""

    status: Literal["ok"]
    version: str
    env: str


class VotRequest(BaseModel):
    """Analysis settings: tier numbers, voicing threshold, target segments."""

    word_tier: int = Field(default=1, ge=1)
    segment_tier: int = Field(default=2, ge=1)
    phone_tier: int = Field(default=3, ge=1)
    source_tier: int = Field(default=0, ge=0)
    percent_voicing: float = Field(default=50.0, ge=0.0, le=100.0)
    segments: list[str] = Field(default_factory=lambda: list(DEFAULT_SEGMENTS), min_length=1)
    emit_vot_tier: bool = True
    emit_clo_tier: bool = True

    @field_validator("segments")
    @classmethod
    def _strip_segments(cls, value: list[str]) -> list[str]:
        stripped = [segment.strip() for segment in value if segment.strip()]
        if not stripped:
            raise ValueError("segments must contain at least one non-empty label")
        return stripped


class VotResultRow(BaseModel):
    """One measured stop. Durations in milliseconds, time points in seconds."""

    filename: str
    source: str | None = None
    word: str = Field(min_length=1)
    v_pre: str | None = None
    v_pre_dur_ms: float | None = None
    segment: str = Field(min_length=1)
    v_post: str | None = None
    v_post_dur_ms: float | None = None
    vot_beg_sec: float
    vot_end_sec: float
    vot_ms: float
    clo_ms: float | None = Field(default=None, gt=0.0)

    @property
    def vot_label(self) -> Literal["VOT", "mVOT"]:
        return "mVOT" if self.vot_ms < 0 else "VOT"

    def to_record(self) -> list[str]:
        """Render the row for the result table, sentinels included."""
        return [
            self.filename,
            _text(self.source),
            self.word,
            _text(self.v_pre),
            _ms(self.v_pre_dur_ms),
            self.segment,
            _text(self.v_post),
            _ms(self.v_post_dur_ms),
            f"{self.vot_beg_sec:.3f}",
            f"{self.vot_end_sec:.3f}",
            f"{self.vot_ms:.1f}",
            _clo(self.clo_ms),
        ]


class SkippedWord(BaseModel):
    """A labeled word that produced no result row."""

    word: str
    start_sec: float
    end_sec: float
    reason: SkipReason


class VotResponse(BaseModel):
    """Per-document analysis output."""

    filename: str
    rows: list[VotResultRow]
    skipped: list[SkippedWord]


class AnalyzeRequest(BaseModel):
    """HTTP payload: one TextGrid on the server's filesystem plus settings."""

    textgrid_path: str = Field(min_length=1)
    settings: VotRequest = Field(default_factory=VotRequest)


def _text(value: str | None) -> str:
    return MISSING if value is None else value


def _ms(value: float | None) -> str:
    return MISSING if value is None else f"{value:.1f}"


def _clo(value: float | None) -> str:
    if value is None or round(value, 1) <= 0:
        return CLO_NOT_MEASURED
    return f"{value:.1f}"
