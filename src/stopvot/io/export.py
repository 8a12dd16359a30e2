"""Result table and JSON serializers."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from stopvot.errors import ResultsExistError
from stopvot.models import CSV_HEADER, MISSING, VotResponse, VotResultRow


def to_json(response: VotResponse) -> str:
    """Serialize a per-document analysis to formatted JSON."""
    return response.model_dump_json(indent=2)


def write_json(response: VotResponse, output_path: str | Path) -> None:
    """Write per-document analysis JSON to disk."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(response) + "\n", encoding="utf-8")


def start_results(output_path: str | Path, *, overwrite: bool = False) -> Path:
    """Create the result table with its header row.

    An existing table is only replaced when `overwrite` is set.
    """
    path = Path(output_path)
    if path.exists() and not overwrite:
        raise ResultsExistError(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        csv.writer(handle).writerow(CSV_HEADER)
    return path


def append_results(output_path: str | Path, rows: Iterable[VotResultRow]) -> int:
    """Append rows in order; returns how many were written."""
    count = 0
    with Path(output_path).open("a", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        for row in rows:
            writer.writerow(row.to_record())
            count += 1
    return count


def read_results(input_path: str | Path) -> list[VotResultRow]:
    """Load a result table written by `append_results`."""
    rows: list[VotResultRow] = []
    with Path(input_path).open(encoding="utf-8", newline="") as handle:
        for record in csv.DictReader(handle):
            rows.append(
                VotResultRow(
                    filename=record["Filename"],
                    source=_optional_text(record["Source"]),
                    word=record["Word"],
                    v_pre=_optional_text(record["V_pre"]),
                    v_pre_dur_ms=_optional_float(record["V_pre_dur"]),
                    segment=record["Segment"],
                    v_post=_optional_text(record["V_post"]),
                    v_post_dur_ms=_optional_float(record["V_post_dur"]),
                    vot_beg_sec=float(record["VOT_beg"]),
                    vot_end_sec=float(record["VOT_end"]),
                    vot_ms=float(record["VOT"]),
                    clo_ms=_optional_clo(record["CLO"]),
                )
            )
    return rows


def _optional_text(value: str) -> str | None:
    return None if value == MISSING else value


def _optional_float(value: str) -> float | None:
    return None if value == MISSING else float(value)


def _optional_clo(value: str) -> float | None:
    number = float(value)
    return None if number <= 0 else number
