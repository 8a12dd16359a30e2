import csv
import json
import logging
from pathlib import Path

import pytest

from stopvot.core import analyze_document, run_batch
from stopvot.errors import BoundaryMismatchError, InteriorVowelError, PointTierError
from stopvot.io import read_textgrid
from stopvot.models import VotRequest
from stopvot.timeline import AnnotationDocument, Tier

WORD_ENTRIES = [(0.1, 0.5, "apa")]
SEGMENT_ENTRIES = [(0.1, 0.2, "a"), (0.2, 0.35, "p"), (0.35, 0.5, "a")]
PHONE_ENTRIES = [
    (0.1, 0.2, "V"),
    (0.2, 0.26, "VDCLO"),
    (0.26, 0.28, "VLCLO"),
    (0.28, 0.29, "REL"),
    (0.29, 0.35, "ASP"),
    (0.35, 0.5, "V"),
]


def _document(tier_builder, *, words=None, segments=None, phones=None) -> AnnotationDocument:
    return AnnotationDocument(
        name="doc",
        tiers=(
            tier_builder("word", words if words is not None else WORD_ENTRIES),
            tier_builder("segment", segments if segments is not None else SEGMENT_ENTRIES),
            tier_builder("phone", phones if phones is not None else PHONE_ENTRIES),
        ),
    )


def test_analyze_document_prevoiced_row(stop_document: AnnotationDocument) -> None:
    outcome = analyze_document(stop_document, VotRequest(source_tier=4))

    assert outcome.ok
    assert outcome.skipped == []
    (row,) = outcome.rows
    assert row.filename == "apa"
    assert row.source == "speaker1"
    assert row.word == "apa"
    assert row.segment == "p"
    assert row.v_pre == "a"
    assert row.v_pre_dur_ms == pytest.approx(100.0)
    assert row.v_post == "a"
    assert row.v_post_dur_ms == pytest.approx(150.0)
    assert row.vot_ms == pytest.approx(-80.0)
    assert row.vot_label == "mVOT"
    assert row.clo_ms == pytest.approx(80.0)


def test_threshold_changes_branch(stop_document: AnnotationDocument) -> None:
    outcome = analyze_document(stop_document, VotRequest(percent_voicing=80))

    (row,) = outcome.rows
    assert row.source is None
    assert row.vot_ms == pytest.approx(70.0)
    assert row.vot_label == "VOT"


def test_burst_only_word(tier_builder) -> None:
    document = _document(
        tier_builder,
        words=[(0.1, 0.4, "ta")],
        segments=[(0.1, 0.2, "t"), (0.2, 0.4, "a")],
        phones=[(0.18, 0.2, "REL"), (0.2, 0.4, "V")],
    )

    (row,) = analyze_document(document, VotRequest()).rows

    assert row.vot_ms == pytest.approx(20.0)
    assert row.clo_ms is None
    assert row.v_pre is None
    assert row.v_post == "a"


def test_word_without_template_is_skipped(tier_builder) -> None:
    document = _document(
        tier_builder,
        words=[(0.1, 0.4, "ma")],
        segments=[(0.1, 0.2, "m"), (0.2, 0.4, "a")],
        phones=[(0.2, 0.4, "V")],
    )

    outcome = analyze_document(document, VotRequest())

    assert outcome.rows == []
    assert [skip.reason for skip in outcome.skipped] == ["no_template"]


def test_unknown_phone_labels_are_logged(tier_builder, caplog) -> None:
    document = _document(
        tier_builder,
        words=[(0.1, 0.4, "ta")],
        segments=[(0.1, 0.2, "t"), (0.2, 0.4, "a")],
        phones=[(0.1, 0.18, "VCLO"), (0.18, 0.2, "REL"), (0.2, 0.4, "V")],
    )
    caplog.set_level(logging.DEBUG, logger="stopvot.core.pipeline")

    outcome = analyze_document(document, VotRequest())

    assert len(outcome.rows) == 1
    assert "unknown phone labels ['VCLO']" in caplog.text


def test_word_without_target_segment_is_skipped(stop_document: AnnotationDocument) -> None:
    outcome = analyze_document(stop_document, VotRequest(segments=["b", "d", "g"]))

    assert outcome.ok
    assert outcome.rows == []
    assert [skip.reason for skip in outcome.skipped] == ["no_target_segment"]


def test_unlabeled_words_are_ignored(tier_builder) -> None:
    document = _document(tier_builder, words=[(0.1, 0.5, "  ")])

    outcome = analyze_document(document, VotRequest())

    assert outcome.rows == []
    assert outcome.skipped == []


def test_interior_vowel_fails_the_document(tier_builder) -> None:
    document = _document(
        tier_builder,
        phones=[(0.1, 0.28, "VLCLO"), (0.28, 0.29, "REL"), (0.29, 0.3, "V"), (0.3, 0.35, "ASP")],
    )

    outcome = analyze_document(document, VotRequest())

    assert not outcome.ok
    assert isinstance(outcome.error, InteriorVowelError)
    assert outcome.error.filename == "doc"
    assert outcome.rows == []


def test_segment_straddling_word_boundary_fails(tier_builder) -> None:
    document = _document(
        tier_builder,
        segments=[(0.05, 0.2, "a"), (0.2, 0.35, "p"), (0.35, 0.5, "a")],
    )

    outcome = analyze_document(document, VotRequest())

    assert isinstance(outcome.error, BoundaryMismatchError)
    assert "cuts through" in str(outcome.error)


def test_unlabeled_misalignment_is_tolerated(tier_builder) -> None:
    document = _document(
        tier_builder,
        words=[(0.12, 0.5, "apa")],
        segments=[(0.2, 0.35, "p"), (0.35, 0.5, "a")],
        phones=PHONE_ENTRIES[1:],
    )

    outcome = analyze_document(document, VotRequest())

    (row,) = outcome.rows
    assert row.v_pre is None
    assert row.vot_ms == pytest.approx(-80.0)


def test_point_tier_is_rejected(tier_builder) -> None:
    document = AnnotationDocument(
        name="doc",
        tiers=(
            tier_builder("word", WORD_ENTRIES),
            Tier(name="marks", kind="point"),
            tier_builder("phone", PHONE_ENTRIES),
        ),
    )

    outcome = analyze_document(document, VotRequest())

    assert isinstance(outcome.error, PointTierError)


def test_missing_tier_is_rejected(stop_document: AnnotationDocument) -> None:
    outcome = analyze_document(stop_document, VotRequest(phone_tier=9))

    assert outcome.error is not None
    assert "does not exist" in str(outcome.error)


def test_run_batch_writes_rows_and_annotated_copy(stop_textgrid: Path, tmp_path: Path) -> None:
    results = tmp_path / "results.csv"

    report = run_batch([stop_textgrid], VotRequest(), results_path=results)

    assert not report.halted
    assert report.rows_written == 1
    with results.open(encoding="utf-8", newline="") as handle:
        records = list(csv.reader(handle))
    assert records[0][:3] == ["Filename", "Source", "Word"]
    assert records[1] == [
        "apa",
        "NA",
        "apa",
        "a",
        "100.0",
        "p",
        "a",
        "150.0",
        "0.280",
        "0.200",
        "-80.0",
        "80.0",
    ]

    (annotated,) = report.annotated_paths
    assert annotated.name == "apa_vot.TextGrid"
    document = read_textgrid(annotated)
    names = [tier.name for tier in document.tiers]
    assert names == ["word", "segment", "phone", "source", "VOT", "CLO"]
    vot_labels = [interval.text for interval in document.tier(5).intervals if interval.text]
    assert vot_labels == ["mVOT"]
    clo = [interval for interval in document.tier(6).intervals if interval.text]
    assert len(clo) == 1
    assert clo[0].start == pytest.approx(0.2)
    assert clo[0].end == pytest.approx(0.28)


def test_rerun_on_annotated_output_is_stable(stop_textgrid: Path, tmp_path: Path) -> None:
    first = run_batch([stop_textgrid], VotRequest(), results_path=tmp_path / "first.csv")
    annotated = first.annotated_paths[0]
    second = run_batch(
        [annotated],
        VotRequest(),
        results_path=tmp_path / "second.csv",
        output_dir=tmp_path / "again",
    )

    original = read_textgrid(stop_textgrid)
    rerun = read_textgrid(second.annotated_paths[0])
    assert rerun.tiers[:4] == original.tiers[:4]
    assert [tier.name for tier in rerun.tiers][4:] == ["VOT", "CLO"]
    first_row = first.documents[0].rows[0]
    second_row = second.documents[0].rows[0]
    assert second_row.model_dump(exclude={"filename"}) == first_row.model_dump(exclude={"filename"})


def test_batch_halts_on_structural_error(
    make_textgrid, stop_textgrid: Path, tmp_path: Path
) -> None:
    broken = make_textgrid(
        "broken",
        [
            ("word", WORD_ENTRIES),
            ("segment", SEGMENT_ENTRIES),
            (
                "phone",
                [(0.2, 0.28, "VLCLO"), (0.28, 0.29, "REL"), (0.29, 0.3, "V"), (0.3, 0.35, "ASP")],
            ),
        ],
    )
    later = make_textgrid(
        "later",
        [("word", WORD_ENTRIES), ("segment", SEGMENT_ENTRIES), ("phone", PHONE_ENTRIES)],
    )
    results = tmp_path / "results.csv"

    report = run_batch([stop_textgrid, broken, later], VotRequest(), results_path=results)

    assert report.halted
    assert isinstance(report.error, InteriorVowelError)
    assert report.error.filename == "broken"
    assert [outcome.filename for outcome in report.documents] == ["apa", "broken"]
    assert report.rows_written == 1
    with results.open(encoding="utf-8", newline="") as handle:
        filenames = [record[0] for record in csv.reader(handle)][1:]
    assert filenames == ["apa"]
    assert not (tmp_path / "broken_vot.TextGrid").exists()
    assert not (tmp_path / "later_vot.TextGrid").exists()


def test_tiers_can_be_disabled(stop_textgrid: Path, tmp_path: Path) -> None:
    report = run_batch(
        [stop_textgrid],
        VotRequest(emit_vot_tier=False, emit_clo_tier=False),
        results_path=tmp_path / "results.csv",
    )

    assert report.annotated_paths == []
    assert report.rows_written == 1


def test_run_batch_writes_json_per_document(stop_textgrid: Path, tmp_path: Path) -> None:
    report = run_batch(
        [stop_textgrid],
        VotRequest(emit_vot_tier=False, emit_clo_tier=False),
        results_path=tmp_path / "results.csv",
        json_dir=tmp_path / "json",
    )

    assert report.json_paths == [tmp_path / "json" / "apa.json"]
    payload = json.loads(report.json_paths[0].read_text(encoding="utf-8"))
    assert payload["filename"] == "apa"
    assert payload["rows"][0]["segment"] == "p"
    assert payload["skipped"] == []
