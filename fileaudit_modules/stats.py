"""
Statistics tracking classes for fileaudit.

This module contains the aggregators behind both report styles: OwnerStats
for the detailed per-owner report and SummaryStats for the summary report.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .walker import FileRecord


class OwnerStats:
    """Track file ownership statistics for the detailed report."""

    def __init__(self):
        self.owner_data = {}  # owner -> {'bytes': int, 'files': int, 'listing': [FileRecord]}
        self.records: List[FileRecord] = []  # every record, in traversal order

    def add_file(self, record: FileRecord):
        """Add a file to the owner statistics."""
        if record.owner not in self.owner_data:
            self.owner_data[record.owner] = {"bytes": 0, "files": 0, "listing": []}

        self.owner_data[record.owner]["bytes"] += record.size_bytes
        self.owner_data[record.owner]["files"] += 1
        self.owner_data[record.owner]["listing"].append(record)
        self.records.append(record)

    def get_all_owners(self) -> List[str]:
        """Get list of all unique owners in first-seen order."""
        return list(self.owner_data.keys())

    def sorted_owners(self) -> List[str]:
        """Owners sorted by total bytes, largest first (ties keep first-seen order)."""
        return sorted(
            self.owner_data, key=lambda owner: self.owner_data[owner]["bytes"], reverse=True
        )

    def get_stats(self, owner: str) -> Dict:
        """Get statistics for a specific owner."""
        return self.owner_data[owner]

    @property
    def total_bytes(self) -> int:
        return sum(data["bytes"] for data in self.owner_data.values())

    @property
    def total_files(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class SummaryResult:
    file_count: int
    total_bytes: int
    largest_file: Optional[FileRecord]


class SummaryStats:
    """Running totals for the summary report."""

    def __init__(self):
        self.file_count = 0
        self.total_bytes = 0
        self.largest_file: Optional[FileRecord] = None

    def add_file(self, record: FileRecord):
        self.file_count += 1
        self.total_bytes += record.size_bytes
        # Strictly greater, so the first file seen wins a tie
        if self.largest_file is None or record.size_bytes > self.largest_file.size_bytes:
            self.largest_file = record

    def result(self) -> SummaryResult:
        return SummaryResult(self.file_count, self.total_bytes, self.largest_file)
