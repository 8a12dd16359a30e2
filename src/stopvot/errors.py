"""Exception taxonomy for the VOT engine."""

from __future__ import annotations

from pathlib import Path


class StopVotError(Exception):
    """Base class for stopvot errors."""


class StructuralError(StopVotError):
    """Annotation structure the engine cannot trust. Halts the whole batch."""

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}: {self.message}"
        return self.message


class PointTierError(StructuralError):
    """A point tier was given where an interval tier is required."""


class MissingTierError(StructuralError):
    """A configured tier number does not exist in the document."""


class BoundaryMismatchError(StructuralError):
    """A labeled Segment/Phone interval is not contained in its word."""


class InteriorVowelError(StructuralError):
    """A `V` label sits inside the closure/release sequence of a word."""


class ResultsExistError(StopVotError):
    """The result table already exists and overwriting was not confirmed."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"results file already exists: {path}")
        self.path = Path(path)


class TextGridReadError(StopVotError, ValueError):
    """A TextGrid file could not be parsed into contiguous tiers."""

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
