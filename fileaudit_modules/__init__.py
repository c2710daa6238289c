"""
Modular components for fileaudit.
"""

from .errors import FileAuditError, InvalidDirectory, InvalidFilter
from .filters import (
    FilterSpec,
    ModifiedFilter,
    PermissionFilter,
    SizeFilter,
    create_file_filter,
    parse_modified_filter,
    parse_permission_filter,
    parse_size_filter,
)
from .progress import ProgressTracker
from .report import (
    REPORT_FILENAME,
    format_detailed_report,
    format_summary_report,
    write_detailed_report,
)
from .stats import OwnerStats, SummaryResult, SummaryStats
from .utils import display_path, format_bytes, format_mtime, format_owner_name, format_time
from .walker import FileRecord, walk_tree

__all__ = [
    "FileAuditError",
    "InvalidDirectory",
    "InvalidFilter",
    "FilterSpec",
    "ModifiedFilter",
    "PermissionFilter",
    "SizeFilter",
    "create_file_filter",
    "parse_modified_filter",
    "parse_permission_filter",
    "parse_size_filter",
    "ProgressTracker",
    "REPORT_FILENAME",
    "format_detailed_report",
    "format_summary_report",
    "write_detailed_report",
    "OwnerStats",
    "SummaryResult",
    "SummaryStats",
    "display_path",
    "format_bytes",
    "format_mtime",
    "format_owner_name",
    "format_time",
    "FileRecord",
    "walk_tree",
]
