"""CLI entry point — ``archgap analyze``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from archgap import __version__
from archgap.config import Settings
from archgap.constants import (
    EXPORT_EXTENSIONS,
    FINDING_SECTION_TITLES,
    REPORT_BASENAME,
    ExportFormat,
    Severity,
)
from archgap.logging_config import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"archgap {__version__}")
        return

    if args.command == "analyze":
        _run_analyze(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="archgap",
        description=(
            "Architecture gap analysis — security, scalability, "
            "technical debt and modernization findings for C# code."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze = sub.add_parser(
        "analyze",
        help="Analyze a C# codebase",
    )
    analyze.add_argument(
        "root",
        type=str,
        help="Root directory of the codebase",
    )
    analyze.add_argument(
        "--output-dir",
        "-o",
        default=".",
        help="Output directory (default: current directory)",
    )
    analyze.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.JSON.value,
        help=(
            "Report format (default: json; pdf needs WeasyPrint "
            "system libraries)"
        ),
    )
    analyze.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    return parser


def _run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze command."""
    from archgap.analysis.static.report import count_by_severity
    from archgap.export import export_report
    from archgap.services.analysis_service import run_analysis

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    root = Path(args.root).resolve()
    if not root.is_dir():
        print(f"Error: {root} is not a directory", file=sys.stderr)
        sys.exit(1)

    print(f"Analyzing: {root}")
    report = asyncio.run(run_analysis(root, settings=settings))

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = (
        output_dir / f"{REPORT_BASENAME}.{EXPORT_EXTENSIONS[args.format]}"
    )
    content = export_report(report, args.format)
    if isinstance(content, bytes):
        output_path.write_bytes(content)
    else:
        output_path.write_text(content, encoding="utf-8")

    # Summary
    meta = report.metadata
    print(
        f"\nDone! {meta.files_analyzed} files analyzed "
        f"({len(meta.partial_files)} partial, "
        f"{len(meta.failed_files)} failed) in {meta.duration_ms:.0f}ms"
    )
    for kind, per_severity in count_by_severity(report).items():
        total = sum(per_severity.values())
        print(
            f"  {FINDING_SECTION_TITLES[kind]}: {total} "
            f"(high {per_severity[Severity.HIGH]}, "
            f"medium {per_severity[Severity.MEDIUM]}, "
            f"low {per_severity[Severity.LOW]})"
        )
    if args.verbose:
        for fault in meta.detector_faults:
            print(f"  [fault] {fault.detector} on {fault.path}: {fault.error}")
        for skipped in meta.skipped_descriptors:
            print(f"  [skipped] {skipped.path}: {skipped.reason}")
    print(f"Output: {output_path}")


if __name__ == "__main__":
    main()
