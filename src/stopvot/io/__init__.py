"""I/O utilities."""

from stopvot.io.export import append_results, read_results, start_results, to_json, write_json
from stopvot.io.textgrid import (
    annotated_path,
    find_textgrids,
    read_textgrid,
    write_annotated_textgrid,
)

__all__ = [
    "annotated_path",
    "append_results",
    "find_textgrids",
    "read_results",
    "read_textgrid",
    "start_results",
    "to_json",
    "write_annotated_textgrid",
    "write_json",
]
