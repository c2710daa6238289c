"""
Text rendering for the detailed and summary reports.
"""

from typing import List

from .stats import OwnerStats, SummaryResult
from .utils import display_path, format_bytes, format_mtime

REPORT_FILENAME = "file_analysis.txt"
SEPARATOR = "_" * 39


def format_detailed_report(owner_stats: OwnerStats) -> str:
    """
    Render the detailed report.

    One line per matched file in traversal order, followed by one block per
    owner with their total size and file count, largest owner first.
    """
    lines: List[str] = [
        "File Analysis Report",
        SEPARATOR,
        "Owner\tSize\tLast Modified\t\tFile Path",
    ]

    for record in owner_stats.records:
        lines.append(
            f"{record.owner}\t{record.size_bytes}\t{format_mtime(record.modified)}\t{record.path}"
        )

    lines.append(SEPARATOR)
    for owner in owner_stats.sorted_owners():
        stats = owner_stats.get_stats(owner)
        lines.append(f"Owner: {owner}")
        lines.append(f"Total Size: {stats['bytes']} bytes")
        lines.append(f"Number of Files: {stats['files']}")
        lines.append(SEPARATOR)

    return "\n".join(lines) + "\n"


def write_detailed_report(owner_stats: OwnerStats, report_file: str = REPORT_FILENAME):
    """
    Write the detailed report, overwriting any existing file.

    Paths are written back as the bytes the filesystem returned, including
    names that are not valid UTF-8.
    """
    content = format_detailed_report(owner_stats)
    with open(report_file, "w", encoding="utf-8", errors="surrogateescape") as f:
        f.write(content)


def format_summary_report(result: SummaryResult) -> str:
    if result.largest_file is not None:
        largest = (
            f"{format_bytes(result.largest_file.size_bytes)} {display_path(result.largest_file.path)}"
        )
    else:
        largest = "none"

    lines = [
        "Summary Report",
        SEPARATOR,
        f"Total File Count: {result.file_count}",
        f"Total Size: {result.total_bytes} bytes",
        f"Largest File: {largest}",
        SEPARATOR,
    ]
    return "\n".join(lines) + "\n"
