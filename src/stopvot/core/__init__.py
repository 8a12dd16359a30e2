"""Core pipeline modules."""

from stopvot.core.pipeline import (
    BatchReport,
    DocumentOutcome,
    WordMeasurement,
    analyze_document,
    analyze_textgrid,
    analyze_word,
    run_batch,
)

__all__ = [
    "BatchReport",
    "DocumentOutcome",
    "WordMeasurement",
    "analyze_document",
    "analyze_textgrid",
    "analyze_word",
    "run_batch",
]
