"""TextGrid readers and writers backed by praatio."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from praatio import textgrid

from stopvot.errors import TextGridReadError
from stopvot.timeline import AnnotationDocument, Interval, Tier

logger = logging.getLogger(__name__)

TEXTGRID_SUFFIX = ".textgrid"
ANNOTATED_SUFFIX = "_vot"


def read_textgrid(path: str | Path) -> AnnotationDocument:
    """Read a TextGrid with empty gaps kept as unlabeled intervals."""
    resolved = Path(path)
    try:
        tg = textgrid.openTextgrid(str(resolved), includeEmptyIntervals=True)
        tiers = tuple(_to_tier(tier) for tier in tg.tiers)
    except ValueError as exc:
        raise TextGridReadError(resolved, str(exc)) from exc
    return AnnotationDocument(name=resolved.stem, tiers=tiers, source_path=resolved)


def _to_tier(tier: textgrid.IntervalTier | textgrid.PointTier) -> Tier:
    if isinstance(tier, textgrid.PointTier):
        return Tier(name=tier.name, kind="point")
    intervals = tuple(
        Interval(start=entry.start, end=entry.end, label=entry.label)
        for entry in tier.entries
        if entry.end > entry.start
    )
    return Tier(name=tier.name, intervals=intervals, kind="interval")


def find_textgrids(inputs: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories into TextGrid paths, directories sorted by name.

    Annotated copies (`<stem>_vot.TextGrid`) found in a directory are left
    out; files named explicitly are always kept.
    """
    found: list[Path] = []
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            found.extend(
                sorted(
                    child
                    for child in path.iterdir()
                    if child.is_file()
                    and child.suffix.casefold() == TEXTGRID_SUFFIX
                    and not child.stem.endswith(ANNOTATED_SUFFIX)
                )
            )
        elif path.is_file():
            found.append(path)
        else:
            raise FileNotFoundError(f"no such TextGrid file or directory: {path}")
    return found


def annotated_path(source_path: Path, output_dir: str | Path | None = None) -> Path:
    """Destination for the annotated copy of `source_path`."""
    directory = Path(output_dir) if output_dir is not None else source_path.parent
    return directory / f"{source_path.stem}{ANNOTATED_SUFFIX}{source_path.suffix}"


def write_annotated_textgrid(
    document: AnnotationDocument,
    new_tiers: Mapping[str, Sequence[Interval]],
    output_path: str | Path,
) -> Path:
    """Save a copy of `document` with `new_tiers` appended.

    A tier already carrying one of the new names is replaced in place, so
    re-running on an annotated file keeps every other tier where it was.
    """
    if document.source_path is None:
        raise ValueError(f"{document.name} was not read from a file")
    path = Path(output_path)
    if path.resolve() == document.source_path.resolve():
        raise ValueError(f"refusing to overwrite input TextGrid {path}")

    tg = textgrid.openTextgrid(str(document.source_path), includeEmptyIntervals=False)
    for name, intervals in new_tiers.items():
        tier = textgrid.IntervalTier(
            name,
            [(interval.start, interval.end, interval.label) for interval in intervals],
            minT=tg.minTimestamp,
            maxT=tg.maxTimestamp,
        )
        if name in tg.tierNames:
            position = tg.tierNames.index(name)
            tg.removeTier(name)
            tg.addTier(tier, tierIndex=position)
        else:
            tg.addTier(tier)

    path.parent.mkdir(parents=True, exist_ok=True)
    tg.save(str(path), format="long_textgrid", includeBlankSpaces=True)
    logger.info("Wrote annotated TextGrid to %s", path)
    return path
