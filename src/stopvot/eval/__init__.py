"""Evaluation utilities."""

from stopvot.eval.metrics import SegmentSummary, summaries_to_dict, summarize_results

__all__ = ["SegmentSummary", "summaries_to_dict", "summarize_results"]
