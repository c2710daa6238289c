#!/usr/bin/env python3

"""
File Analysis Tool

Searches a directory and its subdirectories for files with a given extension,
filters them by size, permissions and last modified time, and reports either
every matching file grouped by owner or a short summary.

Usage:
    ./fileaudit.py [filters] <directory>
"""

import argparse
import os
import sys
import time
from typing import List, Optional

from fileaudit_modules import (
    REPORT_FILENAME,
    FileAuditError,
    FilterSpec,
    InvalidDirectory,
    OwnerStats,
    ProgressTracker,
    SummaryStats,
    create_file_filter,
    display_path,
    format_bytes,
    format_summary_report,
    walk_tree,
    write_detailed_report,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileaudit",
        description=(
            "Searches for files with a specific extension in the given directory AND its subdirectories.\n"
            "Generates a report with file details and groups the files by owner.\n"
            "Sorts the owners by the total size occupied by their files.\n"
            f"Saves the report in a file named '{REPORT_FILENAME}'."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report every .log file, grouped by owner
  ./fileaudit.py -e log /var/log

  # Text files larger than 1 MiB that have not been modified for 10 days
  ./fileaudit.py -e txt -s +1048576 -m +10 /home

  # Scripts with mode exactly 755, modified in the last 3 days
  ./fileaudit.py -e sh -p 755 -m -3 /opt/scripts

  # Files writable by group or others (any of the bits)
  ./fileaudit.py -p /022 /srv

  # Summary (count, total size, largest file) instead of the full report
  ./fileaudit.py -r -e iso /data
        """,
    )

    parser.add_argument("directory", nargs="?", help="Directory to search")

    filters = parser.add_argument_group("Filters")
    filters.add_argument(
        "-e",
        "--extension",
        help="File extension to search for (e.g. txt, exact and case-sensitive). "
             "When omitted, files of every extension match.",
    )
    filters.add_argument(
        "-s",
        "--size",
        help="Filter by size in bytes. Operators: + (larger), - (smaller), = (exact). "
             "Example: +1048576, -1024, =0",
    )
    filters.add_argument(
        "-p",
        "--permissions",
        help="Filter by permissions, octal or symbolic. Prefix with - for all bits "
             "or / for any bit. Example: 755, 644, /o+w, --permissions=-u+x",
    )
    filters.add_argument(
        "-m",
        "--modified",
        help="Filter by last modified time in days. Example: +10 (older than 10 days), "
             "-3 (newer than 3 days)",
    )

    output = parser.add_argument_group("Output")
    output.add_argument(
        "-r",
        "--report",
        action="store_true",
        help="Print a summary report (total file count, total size, largest file) "
             "instead of the file analysis report",
    )
    output.add_argument(
        "-v", "--verbose", action="store_true", help="Show detailed logging"
    )

    return parser


def validate_directory_path(path: Optional[str]) -> str:
    """Check that the path is provided, exists, and is a directory."""
    if not path or not os.path.isdir(path):
        raise InvalidDirectory(path or "")
    return path


def generate_report(path: str, spec: FilterSpec, verbose: bool = False, report_file: str = REPORT_FILENAME):
    """Walk the tree once and write the per-owner file analysis report."""
    print("Generating file analysis report...")
    print(f"Directory: {display_path(path)}")
    print("")

    file_filter = create_file_filter(spec)
    progress = ProgressTracker(verbose=verbose)
    owner_stats = OwnerStats()

    for record in walk_tree(path, file_filter, progress=progress):
        owner_stats.add_file(record)

    progress.final_report()
    write_detailed_report(owner_stats, report_file)

    if verbose:
        print(
            f"[INFO] {owner_stats.total_files:,} files, {len(owner_stats.get_all_owners()):,} owners, "
            f"{format_bytes(owner_stats.total_bytes)}",
            file=sys.stderr,
        )
    print(f"File analysis report generated successfully. Saved as '{report_file}'.")
    return owner_stats


def generate_summary(path: str, spec: FilterSpec, verbose: bool = False):
    """Walk the tree once and print the summary report to stdout."""
    print("Generating summary report...")
    print(f"Directory: {display_path(path)}")
    print("")

    file_filter = create_file_filter(spec)
    progress = ProgressTracker(verbose=verbose)
    summary = SummaryStats()

    for record in walk_tree(path, file_filter, progress=progress):
        summary.add_file(record)

    progress.final_report()
    result = summary.result()
    print(format_summary_report(result), end="")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]

    # Display help if no arguments are provided
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    try:
        path = validate_directory_path(args.directory)
        spec = FilterSpec.from_strings(
            extension=args.extension,
            size=args.size,
            permissions=args.permissions,
            modified=args.modified,
        )

        if args.verbose:
            filters_text = "none, every regular file matches" if spec.is_empty() else spec
            print(f"[INFO] Filters: {filters_text}", file=sys.stderr)

        start_time = time.time()
        if args.report:
            generate_summary(path, spec, verbose=args.verbose)
        else:
            generate_report(path, spec, verbose=args.verbose)

        if args.verbose:
            print(f"[INFO] Processing time: {time.time() - start_time:.2f}s", file=sys.stderr)
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user", file=sys.stderr)
        return 130
    except FileAuditError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        if isinstance(e, InvalidDirectory):
            print("[ERROR] Please enter a valid directory path.", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
