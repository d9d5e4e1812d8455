"""
fileman command-line interface.

Usage:
    fileman dedupe [dir] [--delete] [--dry-run] [--trash] [--report FILE]
    fileman organize [dir] [--by ext|date] [--recursive] [--dry-run]
    fileman tree [dir] [--depth N] [--dirs-first]
    fileman clean-empty [dir]
    fileman rename [dir] [--match REGEX] [--replace STR] [--ext .pdf] [--dry-run]
    fileman audit-nonpdf [dir] [--recursive]

Exit codes:
    0  success (per-file failures are reported on stderr but do not count)
    1  target directory missing or unreadable, invalid pattern, CSV report
       not written, or configuration error
    2  usage error
    3  dedupe finished with per-file failures and --strict was given
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Optional, Sequence

import structlog
from dotenv import load_dotenv

from fileman import __version__
from fileman.config.exceptions import ConfigurationError
from fileman.config.logging import configure_logging, resolve_level
from fileman.config.settings import FilemanSettings, load_settings, set_settings
from fileman.src.commands.audit_non_pdf import audit_non_pdf
from fileman.src.commands.clean_empty import clean_empty
from fileman.src.commands.dedupe import DedupeOptions, DedupeStatus, dedupe
from fileman.src.commands.dedupe.report_generator import ReportGenerator
from fileman.src.commands.organize import GROUP_MODES, organize
from fileman.src.commands.rename import rename_files
from fileman.src.commands.tree import tree
from fileman.src.core.outcome import CommandOutcome, CommandStatus
from fileman.src.core.sink import LineEmitter, Sink, console_sink

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_WARNINGS = 3


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="fileman",
        description="File organization CLI: organize, tree, clean-empty, rename, dedupe",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="YAML settings file (default: $FILEMAN_CONFIG)")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More logging on stderr (-v info, -vv debug)",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default=None,
        help="Log record format on stderr",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("dedupe", help="Find duplicate files by hash; optionally delete duplicates")
    p.add_argument("dir", nargs="?", default=".")
    p.add_argument(
        "--delete", action="store_true", help="Delete duplicates, keeping first occurrence"
    )
    p.add_argument(
        "--dry-run", action="store_true", help="Show planned deletions without deleting"
    )
    p.add_argument(
        "--trash",
        action="store_true",
        default=None,
        help="Send deleted duplicates to the OS trash instead of unlinking",
    )
    p.add_argument("--workers", type=_positive_int, help="Files hashed concurrently")
    p.add_argument("--report", metavar="FILE", help="Also write a CSV report")
    p.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit {EXIT_WARNINGS} when some files could not be hashed or deleted",
    )

    p = sub.add_parser("organize", help="Organize files by extension or date into subfolders")
    p.add_argument("dir", nargs="?", default=".")
    p.add_argument("--by", choices=GROUP_MODES, default="ext", help="Group mode: ext or date")
    p.add_argument("--recursive", action="store_true", help="Scan subdirectories recursively")
    p.add_argument("--dry-run", action="store_true", help="Show actions without moving files")

    p = sub.add_parser("tree", help="Print a directory tree view")
    p.add_argument("dir", nargs="?", default=".")
    p.add_argument("--depth", type=_positive_int, help="Max depth to display")
    p.add_argument("--dirs-first", action="store_true", help="List directories before files")

    p = sub.add_parser("clean-empty", help="Remove empty directories recursively")
    p.add_argument("dir", nargs="?", default=".")

    p = sub.add_parser("rename", help="Batch rename files by regex pattern")
    p.add_argument("dir", nargs="?", default=".")
    p.add_argument("--path", help="Directory containing files to rename (overrides dir)")
    p.add_argument("--match", default="", help="Regex pattern to match in filename")
    p.add_argument("--replace", default="", help="Replacement string")
    p.add_argument("--ext", help="Only rename files with extension (e.g., .pdf)")
    p.add_argument("--dry-run", action="store_true", help="Show actions without renaming")

    p = sub.add_parser(
        "audit-nonpdf", help="List non-.pdf files with status of same-name .pdf presence"
    )
    p.add_argument("dir", nargs="?", default=".")
    p.add_argument("--path", help="Directory to scan (overrides dir)")
    p.add_argument("--recursive", action="store_true", help="Scan subdirectories recursively")

    return parser


def _exit_code(outcome: CommandOutcome) -> int:
    return EXIT_FAILED if outcome.status == CommandStatus.failed else EXIT_OK


def run_dedupe(args: argparse.Namespace, settings: FilemanSettings, sink: Sink) -> int:
    options = DedupeOptions(
        delete=args.delete,
        dry_run=args.dry_run,
        use_trash=settings.use_trash if args.trash is None else args.trash,
        chunk_size=settings.hash_chunk_size,
        workers=args.workers or settings.hash_workers,
    )

    outcome = asyncio.run(dedupe(args.dir, options, sink))

    if outcome.status == DedupeStatus.failed:
        return EXIT_FAILED

    if args.report:
        emitter = LineEmitter(sink)
        try:
            path = ReportGenerator().generate_csv(outcome.report, args.report)
        except OSError as e:
            emitter.err(f"Report failed: {args.report} {e}")
            logger.error("dedupe_report_failed", output_path=str(args.report), error=str(e))
            return EXIT_FAILED
        emitter.err(f"Report written: {path}")

    if outcome.status == DedupeStatus.completed_with_warnings and args.strict:
        return EXIT_WARNINGS
    return EXIT_OK


def dispatch(args: argparse.Namespace, settings: FilemanSettings, sink: Sink) -> int:
    """Run the selected command and map its outcome to an exit code."""
    if args.command == "dedupe":
        return run_dedupe(args, settings, sink)

    if args.command == "organize":
        outcome = organize(
            args.dir,
            by=args.by,
            recursive=args.recursive,
            dry_run=args.dry_run,
            organized_folder=settings.organized_folder,
            sink=sink,
        )
    elif args.command == "tree":
        outcome = tree(args.dir, depth=args.depth, dirs_first=args.dirs_first, sink=sink)
    elif args.command == "clean-empty":
        outcome = clean_empty(args.dir, sink=sink)
    elif args.command == "rename":
        outcome = rename_files(
            args.path or args.dir,
            match=args.match,
            replace=args.replace,
            ext=args.ext,
            dry_run=args.dry_run,
            sink=sink,
        )
    elif args.command == "audit-nonpdf":
        outcome = audit_non_pdf(args.path or args.dir, recursive=args.recursive, sink=sink)
    else:
        raise ValueError(f"Unknown command: {args.command}")

    return _exit_code(outcome)


def main(argv: Optional[Sequence[str]] = None, sink: Sink = console_sink) -> int:
    """
    Parse arguments, set up settings and logging, run one command.

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILED
    set_settings(settings)

    default_level = os.getenv("FILEMAN_LOG_LEVEL", settings.log_level)
    log_format = args.log_format or os.getenv("FILEMAN_LOG_FORMAT", settings.log_format)
    configure_logging(
        level=resolve_level(args.verbose, default=default_level),
        json_format=log_format == "json",
        enable_colors=sys.stderr.isatty(),
    )

    logger.debug("cli_command", command=args.command, argv=list(argv or sys.argv[1:]))

    return dispatch(args, settings, sink)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    sys.exit(main())


if __name__ == "__main__":
    run()
