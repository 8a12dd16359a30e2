"""VOT analysis pipeline: per word, per document, and batch.

A structural error in one document is returned on its `DocumentOutcome`
rather than raised; the batch driver stops at the first such outcome so
that no rows or tiers are written for the failing document or any later
one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from stopvot.core.annotate import annotation_tiers
from stopvot.engine import (
    PHONE_LABELS,
    FlankingVowels,
    VotDecision,
    decide,
    label_sequence,
    locate_components,
    matches_any,
    resolve_flanking_vowels,
)
from stopvot.errors import (
    BoundaryMismatchError,
    MissingTierError,
    PointTierError,
    StructuralError,
)
from stopvot.io import (
    annotated_path,
    append_results,
    read_textgrid,
    start_results,
    write_annotated_textgrid,
    write_json,
)
from stopvot.models import SkipReason, SkippedWord, VotRequest, VotResponse, VotResultRow
from stopvot.timeline import AnnotationDocument, Interval, Tier, same_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordMeasurement:
    row: VotResultRow
    decision: VotDecision


@dataclass(frozen=True)
class DocumentTiers:
    """The tiers one analysis reads, resolved from configured tier numbers."""

    word: Tier
    segment: Tier
    phone: Tier
    source: Tier | None = None


@dataclass(frozen=True)
class DocumentOutcome:
    """Measurements and skips for one document, or the error that stopped it."""

    filename: str
    measurements: list[WordMeasurement] = field(default_factory=list)
    skipped: list[SkippedWord] = field(default_factory=list)
    error: StructuralError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rows(self) -> list[VotResultRow]:
        return [measurement.row for measurement in self.measurements]

    @property
    def decisions(self) -> list[VotDecision]:
        return [measurement.decision for measurement in self.measurements]

    def to_response(self) -> VotResponse:
        return VotResponse(filename=self.filename, rows=self.rows, skipped=self.skipped)


@dataclass
class BatchReport:
    results_path: Path
    documents: list[DocumentOutcome] = field(default_factory=list)
    annotated_paths: list[Path] = field(default_factory=list)
    json_paths: list[Path] = field(default_factory=list)
    rows_written: int = 0
    error: StructuralError | None = None

    @property
    def halted(self) -> bool:
        return self.error is not None


def resolve_tiers(document: AnnotationDocument, request: VotRequest) -> DocumentTiers:
    """Look up the configured tiers, rejecting missing and point tiers."""

    def required(number: int, role: str) -> Tier:
        if not document.has_tier(number):
            raise MissingTierError(
                f"{role} tier {number} does not exist ({len(document.tiers)} tiers)",
                filename=document.name,
            )
        tier = document.tier(number)
        if not tier.is_interval_tier:
            raise PointTierError(
                f"{role} tier {number} ({tier.name!r}) is a point tier",
                filename=document.name,
            )
        return tier

    source = required(request.source_tier, "source") if request.source_tier else None
    return DocumentTiers(
        word=required(request.word_tier, "word"),
        segment=required(request.segment_tier, "segment"),
        phone=required(request.phone_tier, "phone"),
        source=source,
    )


def check_containment(word: Interval, tier: Tier) -> None:
    """Fail when a labeled interval of `tier` straddles a boundary of `word`."""
    first = tier.index_at(word.start)
    last = tier.index_at_or_before(word.end)
    if first is None or last is None:
        raise BoundaryMismatchError(
            f"word {word.text!r} ({word.start:.3f}-{word.end:.3f}s) "
            f"extends beyond tier {tier.name!r}"
        )
    for index in {first, last}:
        interval = tier[index]
        if not interval.text:
            continue
        starts_before = interval.start < word.start and not same_time(interval.start, word.start)
        ends_after = interval.end > word.end and not same_time(interval.end, word.end)
        if starts_before or ends_after:
            raise BoundaryMismatchError(
                f"word {word.text!r} ({word.start:.3f}-{word.end:.3f}s) cuts through "
                f"{tier.name!r} interval {interval.text!r} "
                f"({interval.start:.3f}-{interval.end:.3f}s)"
            )


def analyze_word(
    word: Interval,
    tiers: DocumentTiers,
    request: VotRequest,
    *,
    filename: str,
) -> WordMeasurement | SkippedWord:
    """Measure the stop inside one labeled word, or report why it was skipped.

    Raises `StructuralError` for annotation that cannot be trusted.
    """
    check_containment(word, tiers.segment)
    check_containment(word, tiers.phone)

    phone_range = tiers.phone.span_indices(word.start, word.end)
    if phone_range is None:
        return _skip(word, "no_template")
    first, last = phone_range
    labels = tiers.phone.labels(first, last)
    unknown = sorted({label for label in labels if label and label not in PHONE_LABELS})
    if unknown:
        logger.debug("%s: %r has unknown phone labels %s", filename, word.text, unknown)
    if not matches_any(labels):
        logger.debug(
            "%s: %r has no stop template in %s", filename, word.text, label_sequence(labels)
        )
        return _skip(word, "no_template")

    vowels = resolve_flanking_vowels(tiers.phone, first, last, tiers.segment)

    segment = _target_segment(word, tiers.segment, request.segments)
    if segment is None:
        return _skip(word, "no_target_segment")

    components = locate_components(tiers.phone, first, last)
    if components is None:
        return _skip(word, "no_release")

    decision = decide(components, request.percent_voicing)
    row = _build_row(
        filename=filename,
        source=_source_label(word, tiers.source),
        word=word,
        segment=segment,
        vowels=vowels,
        decision=decision,
    )
    return WordMeasurement(row=row, decision=decision)


def analyze_document(document: AnnotationDocument, request: VotRequest) -> DocumentOutcome:
    """Analyze every labeled word of a document."""
    measurements: list[WordMeasurement] = []
    skipped: list[SkippedWord] = []
    try:
        tiers = resolve_tiers(document, request)
        for word in tiers.word.intervals:
            if not word.text:
                continue
            result = analyze_word(word, tiers, request, filename=document.name)
            if isinstance(result, SkippedWord):
                logger.debug("%s: skipped %r (%s)", document.name, result.word, result.reason)
                skipped.append(result)
            else:
                measurements.append(result)
    except StructuralError as exc:
        if exc.filename is None:
            exc.filename = document.name
        return DocumentOutcome(filename=document.name, error=exc)

    logger.info(
        "%s: %d measured, %d skipped", document.name, len(measurements), len(skipped)
    )
    return DocumentOutcome(filename=document.name, measurements=measurements, skipped=skipped)


def analyze_textgrid(path: str | Path, request: VotRequest) -> DocumentOutcome:
    return analyze_document(read_textgrid(path), request)


def run_batch(
    textgrid_paths: Iterable[str | Path],
    request: VotRequest,
    *,
    results_path: str | Path,
    output_dir: str | Path | None = None,
    json_dir: str | Path | None = None,
    overwrite: bool = False,
) -> BatchReport:
    """Analyze documents in order, appending rows and writing annotated copies.

    With `json_dir`, each analyzed document is also written there as
    `<stem>.json`, including its skipped words.

    Stops at the first document with a structural error; rows already
    written for earlier documents stay in the result table.
    """
    report = BatchReport(results_path=start_results(results_path, overwrite=overwrite))
    emit_tiers = request.emit_vot_tier or request.emit_clo_tier

    for raw_path in textgrid_paths:
        path = Path(raw_path)
        document = read_textgrid(path)
        outcome = analyze_document(document, request)
        report.documents.append(outcome)
        if outcome.error is not None:
            logger.error("Halting batch: %s", outcome.error)
            report.error = outcome.error
            break

        report.rows_written += append_results(report.results_path, outcome.rows)
        if json_dir is not None:
            json_path = Path(json_dir) / f"{path.stem}.json"
            write_json(outcome.to_response(), json_path)
            report.json_paths.append(json_path)
        if emit_tiers:
            tiers = annotation_tiers(
                outcome.decisions,
                emit_vot_tier=request.emit_vot_tier,
                emit_clo_tier=request.emit_clo_tier,
            )
            report.annotated_paths.append(
                write_annotated_textgrid(document, tiers, annotated_path(path, output_dir))
            )

    return report


def _skip(word: Interval, reason: SkipReason) -> SkippedWord:
    return SkippedWord(word=word.text, start_sec=word.start, end_sec=word.end, reason=reason)


def _target_segment(word: Interval, segment_tier: Tier, segments: list[str]) -> str | None:
    segment_range = segment_tier.span_indices(word.start, word.end)
    if segment_range is None:
        return None
    wanted = set(segments)
    for label in segment_tier.labels(*segment_range):
        if label in wanted:
            return label
    return None


def _source_label(word: Interval, source_tier: Tier | None) -> str | None:
    if source_tier is None:
        return None
    interval = source_tier.interval_at(word.midpoint)
    return None if interval is None else interval.text


def _build_row(
    *,
    filename: str,
    source: str | None,
    word: Interval,
    segment: str,
    vowels: FlankingVowels,
    decision: VotDecision,
) -> VotResultRow:
    return VotResultRow(
        filename=filename,
        source=source,
        word=word.text,
        v_pre=vowels.pre.label if vowels.pre else None,
        v_pre_dur_ms=vowels.pre.duration_ms if vowels.pre else None,
        segment=segment,
        v_post=vowels.post.label if vowels.post else None,
        v_post_dur_ms=vowels.post.duration_ms if vowels.post else None,
        vot_beg_sec=decision.vot.begin,
        vot_end_sec=decision.vot.end,
        vot_ms=decision.vot_ms,
        clo_ms=decision.clo_ms,
    )
