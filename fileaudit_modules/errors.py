"""
Exception types raised by fileaudit.

Validation errors are raised before any traversal begins and are turned into
an [ERROR] line and exit status 1 by the command-line entry point.
"""


class FileAuditError(Exception):
    """Base class for fatal fileaudit errors."""


class InvalidDirectory(FileAuditError):
    """Target path is missing or is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"'{path}' is not a valid directory.")


class InvalidFilter(FileAuditError, ValueError):
    """A size, modified or permissions filter could not be parsed."""
