"""
Progress counters for a single tree walk.
"""

import sys
import time

from .utils import format_time


class ProgressTracker:
    """Track progress of the tree walk with periodic updates in verbose mode."""

    def __init__(self, verbose: bool = False):
        self.total_objects = 0
        self.total_dirs = 0
        self.matches = 0
        self.unreadable = 0  # Entries skipped because they could not be read
        self.start_time = time.time()
        self.verbose = verbose
        self.last_update = time.time()

    def update(self, objects: int = 0, dirs: int = 0, matches: int = 0):
        """Update progress counters."""
        self.total_objects += objects
        self.total_dirs += dirs
        self.matches += matches

        # Print progress every 0.5 seconds
        if self.verbose and time.time() - self.last_update > 0.5:
            elapsed = time.time() - self.start_time
            rate = self.total_objects / elapsed if elapsed > 0 else 0
            print(
                f"\r[PROGRESS] {self.total_objects:,} objects processed | "
                f"{self.matches:,} matches | "
                f"{rate:.1f} obj/sec | "
                f"Run time: {format_time(elapsed)}",
                end="",
                file=sys.stderr,
                flush=True,
            )
            self.last_update = time.time()

    def increment_unreadable(self):
        self.unreadable += 1

    def final_report(self):
        """Print final progress report."""
        if self.verbose:
            elapsed = time.time() - self.start_time
            rate = self.total_objects / elapsed if elapsed > 0 else 0
            print(
                f"\r[PROGRESS] FINAL: {self.total_objects:,} objects processed | "
                f"{self.total_dirs:,} dirs | "
                f"{self.matches:,} matches | "
                f"{self.unreadable:,} unreadable | "
                f"{rate:.1f} obj/sec | "
                f"Run time: {format_time(elapsed)}",
                file=sys.stderr,
            )
