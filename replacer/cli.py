"""Command-line interface for Excel Text Replacer."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .engine import run_merge
from .errors import AppError, BAD_SELECTOR, CONFIG_ERRORS, friendly_message
from .job import MergeJob
from .models import MergeReport
from .parsing import parse_selector

ENV_LOG_LEVEL = "EXCEL_TEXT_REPLACER_LOG_LEVEL"
PROG = "excel-text-replacer"

USAGE = (
    f"Usage:\n{PROG} -t targetExcelFilePath,targetIdColumn,targetColumn "
    "-i inputExcelFilePath,inputIdColumn,inputColumn [--dry-run] [--job job.json] [-v]\n"
    "\n"
    "-t targetExcelFilePath,targetIdColumn,targetColumn\n"
    "\tTarget Excel file path, target id column, target column (1-based number or letters).\n"
    "-i inputExcelFilePath,inputIdColumn,inputColumn\n"
    "\tInput Excel file path, input id column, input column (1-based number or letters).\n"
    "--job job.json\n\tRead target/input selectors from a JSON job file; -t/-i override it.\n"
    "--dry-run\n\tReport matches without saving the target.\n"
    "-v, --verbose\n\tDebug logging.\n"
    "\n"
    "ex.\n"
    "\n"
    f"{PROG} -t target.xlsx,1,2 -i input.xlsx,A,C"
)

# Windows-style switches accepted alongside the dash forms.
_SLASH_SWITCHES = {"/t": "-t", "/T": "-t", "/i": "-i", "/I": "-i", "/?": "-h"}

console = Console()
logger = logging.getLogger(__name__)


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as AppError instead of exiting."""

    def error(self, message: str):
        raise AppError(BAD_SELECTOR, message)


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(prog=PROG, add_help=False)
    parser.add_argument("-t", "-T", dest="target")
    parser.add_argument("-i", "-I", dest="input")
    parser.add_argument("--job")
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    return parser


def _normalize_argv(argv: List[str]) -> List[str]:
    return [_SLASH_SWITCHES.get(a, a) for a in argv]


def configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv(ENV_LOG_LEVEL, "WARNING").upper(), None)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def resolve_job(args: argparse.Namespace) -> MergeJob:
    """
    Combine --job with -t/-i. Raises AppError when either side is missing
    or malformed, before any dataset is touched.
    """
    job = None
    if args.job and not (args.target and args.input):
        job = MergeJob.load_json(args.job)

    target = parse_selector(args.target) if args.target else (job.target if job else None)
    input_ = parse_selector(args.input) if args.input else (job.input if job else None)
    if target is None or input_ is None:
        missing = "target (-t)" if target is None else "input (-i)"
        raise AppError(BAD_SELECTOR, f"Missing {missing} selector")

    commit = job.commit if job else True
    if args.dry_run:
        commit = False
    return MergeJob(target=target, input=input_, commit=commit)


def print_report(report: MergeReport) -> None:
    table = Table(title="Sheets")
    table.add_column("Role")
    table.add_column("Sheet")
    table.add_column("Used range", justify="right")
    table.add_column("Rows", justify="right")
    table.add_column("Matched", justify="right")
    table.add_column("Note")
    for r in report.results:
        table.add_row(
            r.role,
            r.sheet_name,
            f"{r.row_count}x{r.column_count}",
            str(r.rows_scanned),
            "-" if r.role == "input" else str(r.rows_matched),
            "[yellow]skipped[/yellow] " + r.message if r.skipped else "",
        )
    console.print(table)
    console.print(f"Lookup entries: {report.lookup_size}")
    console.print(f"Cells written:  {report.cells_written}")
    if report.committed:
        console.print("[green]Target saved.[/green]")
    else:
        console.print("[yellow]Dry run: target not saved.[/yellow]")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns 0 on success, 2 on usage errors, 1 on dataset failures."""
    argv = _normalize_argv(list(sys.argv[1:] if argv is None else argv))
    parser = build_parser()

    try:
        args, extra = parser.parse_known_args(argv)
    except AppError as e:
        console.print(f"[red]Error:[/red] {escape(friendly_message(e))}")
        console.print(USAGE, markup=False, highlight=False)
        return 2

    if args.help:
        console.print(USAGE, markup=False, highlight=False)
        return 0

    configure_logging(args.verbose)
    if extra:
        logger.debug("Ignoring unrecognized arguments: %s", extra)

    try:
        job = resolve_job(args)
    except AppError as e:
        console.print(f"[red]Error:[/red] {escape(friendly_message(e))}")
        console.print(USAGE, markup=False, highlight=False)
        return 2

    try:
        report = run_merge(job.target, job.input, commit=job.commit)
    except AppError as e:
        if e.code in CONFIG_ERRORS:
            console.print(f"[red]Error:[/red] {escape(friendly_message(e))}")
            console.print(USAGE, markup=False, highlight=False)
            return 2
        logger.debug("Merge failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(friendly_message(e))}")
        return 1

    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
