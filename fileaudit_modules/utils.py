"""
Formatting helpers shared by the walker, the reports and the CLI.
"""

import os
import pwd
from datetime import datetime

MTIME_FORMAT = "%Y-%m-%d %H:%M"
SIZE_UNITS = ["KB", "MB", "GB", "TB", "PB"]


def format_bytes(size: int) -> str:
    """
    Human-readable size for the summary report, base 1024.

    Examples:
        512 -> 512 bytes
        1536 -> 1.50 KB
    """
    if size < 1024:
        return f"{size} bytes"

    value = float(size)
    for unit in SIZE_UNITS:
        value /= 1024.0
        if value < 1024.0 or unit == SIZE_UNITS[-1]:
            break
    return f"{value:.2f} {unit}"


def format_time(seconds: float) -> str:
    """
    Elapsed time for progress lines.

    Examples:
        5.2 -> 5.2s
        72.3 -> 1m 12s
        3665.7 -> 1h 1m 5s
    """
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


def format_mtime(timestamp: float) -> str:
    """Format a modification timestamp in local time for report lines."""
    return datetime.fromtimestamp(timestamp).strftime(MTIME_FORMAT)


def display_path(path: str) -> str:
    """
    Path safe to print on a console.

    Names that are not valid in the filesystem encoding come back from
    os.scandir with surrogate escapes; those bytes are shown as \\xNN.
    """
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def format_owner_name(uid: int) -> str:
    """Resolve a uid to a user name, falling back to 'UID <n>' for unknown users."""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return f"UID {uid}"
