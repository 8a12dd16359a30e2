"""CLI entrypoint for stopvot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from stopvot.config import AppConfig, load_config, parse_segments
from stopvot.core import run_batch
from stopvot.eval import summaries_to_dict, summarize_results
from stopvot.io import find_textgrids, read_results
from stopvot.models import VotRequest


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="stopvot",
        description="Measure VOT and closure duration from labeled TextGrids.",
    )
    subparsers = parser.add_subparsers(dest="command")

    analyze = subparsers.add_parser("analyze", help="Measure stops in TextGrid files")
    analyze.add_argument("inputs", nargs="+", help="TextGrid files or directories of TextGrids")
    analyze.add_argument("-r", "--results", required=True, help="Result table (CSV) path")
    analyze.add_argument("--word-tier", type=int, default=1, help="Word tier number (default: 1)")
    analyze.add_argument(
        "--segment-tier", type=int, default=2, help="Segment tier number (default: 2)"
    )
    analyze.add_argument("--phone-tier", type=int, default=3, help="Phone tier number (default: 3)")
    analyze.add_argument(
        "--source-tier",
        type=int,
        default=0,
        help="Source tier number, 0 for none (default: 0)",
    )
    analyze.add_argument(
        "--percent-voicing",
        type=float,
        default=None,
        help="Voiced share of the closure above which a stop counts as prevoiced",
    )
    analyze.add_argument(
        "--segments",
        default=None,
        help="Comma-separated segment labels to measure (default: b,d,g,p,t,k)",
    )
    analyze.add_argument("--no-vot-tier", action="store_true", help="Do not add a VOT tier")
    analyze.add_argument("--no-clo-tier", action="store_true", help="Do not add a CLO tier")
    analyze.add_argument(
        "--output-dir",
        default=None,
        help="Directory for annotated TextGrids (default: next to each input)",
    )
    analyze.add_argument(
        "--json-dir",
        default=None,
        help="Also write one JSON file per TextGrid (rows and skipped words) here",
    )
    analyze.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Overwrite an existing result table without asking",
    )

    summarize = subparsers.add_parser("summarize", help="Summarize a result table per segment")
    summarize.add_argument("results", help="Result table (CSV) path")

    serve = subparsers.add_parser("serve", help="Run the stopvot HTTP API")
    serve.add_argument("--host", default=None, help="Override API host")
    serve.add_argument("--port", type=int, default=None, help="Override API port")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    config = load_config()
    logging.basicConfig(level=config.log_level, format="%(name)s %(levelname)s: %(message)s")

    if args.command == "analyze":
        return _analyze(args, config, parser)

    if args.command == "summarize":
        summaries = summarize_results(read_results(args.results))
        print(json.dumps(summaries_to_dict(summaries), indent=2))
        return 0

    if args.command == "serve":
        try:
            import uvicorn
        except ModuleNotFoundError:
            print(
                "`stopvot serve` requires uvicorn. Install project dependencies first.",
                file=sys.stderr,
            )
            return 1

        host = args.host or config.api_host
        port = args.port or config.api_port
        uvicorn.run("stopvot.api:app", host=host, port=port, reload=False)
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


def _analyze(args: argparse.Namespace, config: AppConfig, parser: argparse.ArgumentParser) -> int:
    try:
        segments = parse_segments(args.segments) if args.segments else config.segments
        request = VotRequest(
            word_tier=args.word_tier,
            segment_tier=args.segment_tier,
            phone_tier=args.phone_tier,
            source_tier=args.source_tier,
            percent_voicing=(
                args.percent_voicing
                if args.percent_voicing is not None
                else config.percent_voicing
            ),
            segments=list(segments),
            emit_vot_tier=not args.no_vot_tier,
            emit_clo_tier=not args.no_clo_tier,
        )
        paths = find_textgrids(args.inputs)
    except (ValidationError, ValueError, FileNotFoundError) as exc:
        parser.error(str(exc))
        return 2

    results_path = Path(args.results)
    overwrite = args.yes
    if results_path.exists() and not overwrite:
        if not _confirm(f"{results_path} already exists. Overwrite? [y/N] "):
            print(f"Not overwriting {results_path}.", file=sys.stderr)
            return 1
        overwrite = True

    try:
        report = run_batch(
            paths,
            request,
            results_path=results_path,
            output_dir=args.output_dir,
            json_dir=args.json_dir,
            overwrite=overwrite,
        )
    except (OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    if report.halted:
        print(f"ERROR: {report.error}", file=sys.stderr)
        print("Batch halted; fix the annotation and run again.", file=sys.stderr)
        return 1

    print(
        f"Wrote {report.rows_written} rows from {len(report.documents)} TextGrid(s) "
        f"to {report.results_path}"
    )
    return 0


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().casefold() in {"y", "yes"}


if __name__ == "__main__":
    raise SystemExit(main())
