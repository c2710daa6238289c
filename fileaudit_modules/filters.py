"""
Filter parsing and predicate construction.

Raw command-line filter strings are parsed once into a FilterSpec, and the
FilterSpec is compiled into a single predicate that the tree walker calls for
every regular file. Each dimension (extension, size, permissions, modified
time) is independent; a file matches only when every present dimension does.
"""

import math
import os
import re
import stat
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import InvalidFilter

SECONDS_PER_DAY = 86400

SIZE_OPERATORS = ("+", "-", "=")
MODIFIED_OPERATORS = ("+", "-")

# Permission bits for each "who" letter of a symbolic mode
_WHO_BITS = {
    "u": {"r": 0o400, "w": 0o200, "x": 0o100, "s": stat.S_ISUID, "t": 0},
    "g": {"r": 0o040, "w": 0o020, "x": 0o010, "s": stat.S_ISGID, "t": 0},
    "o": {"r": 0o004, "w": 0o002, "x": 0o001, "s": 0, "t": stat.S_ISVTX},
}
_WHO_MASK = {
    "u": stat.S_ISUID | stat.S_IRWXU,
    "g": stat.S_ISGID | stat.S_IRWXG,
    "o": stat.S_ISVTX | stat.S_IRWXO,
}
_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

_OCTAL_MODE = re.compile(r"^[0-7]{1,4}$")
_SYMBOLIC_CLAUSE = re.compile(r"^([ugoa]*)((?:[-+=][rwxXst]*)+)$")
_SYMBOLIC_ACTION = re.compile(r"([-+=])([rwxXst]*)")

FilePredicate = Callable[[str, os.stat_result], bool]


@dataclass(frozen=True)
class SizeFilter:
    op: str
    bytes: int

    def matches(self, size: int) -> bool:
        if self.op == "+":
            return size > self.bytes
        if self.op == "-":
            return size < self.bytes
        return size == self.bytes


@dataclass(frozen=True)
class ModifiedFilter:
    op: str
    days: int

    def matches(self, mtime: float, now: float) -> bool:
        """
        Compare whole days since modification, counted the way find -mtime does.

        A file modified 36 hours ago is 1 day old: it matches +0 and -2, but
        neither +1 nor -1.
        """
        age_days = math.floor((now - mtime) / SECONDS_PER_DAY)
        if self.op == "+":
            return age_days > self.days
        return age_days < self.days


@dataclass(frozen=True)
class PermissionFilter:
    """
    Permission matcher with find -perm semantics.

    kind is "exact" (MODE), "all" (-MODE) or "any" (/MODE).
    """

    kind: str
    mode: int
    text: str

    def matches(self, st_mode: int) -> bool:
        bits = stat.S_IMODE(st_mode)
        if self.kind == "all":
            return bits & self.mode == self.mode
        if self.kind == "any":
            return self.mode == 0 or bits & self.mode != 0
        return bits == self.mode


@dataclass(frozen=True)
class FilterSpec:
    """Every filter dimension for one run. None means unconstrained."""

    extension: Optional[str] = None
    size: Optional[SizeFilter] = None
    permissions: Optional[PermissionFilter] = None
    modified: Optional[ModifiedFilter] = None

    @classmethod
    def from_strings(
        cls,
        extension: Optional[str] = None,
        size: Optional[str] = None,
        permissions: Optional[str] = None,
        modified: Optional[str] = None,
    ) -> "FilterSpec":
        """Build a FilterSpec from raw command-line values, raising InvalidFilter."""
        return cls(
            extension=extension or None,
            size=parse_size_filter(size),
            permissions=parse_permission_filter(permissions),
            modified=parse_modified_filter(modified),
        )

    def is_empty(self) -> bool:
        return not (self.extension or self.size or self.permissions or self.modified)


def parse_size_filter(size_str: Optional[str]) -> Optional[SizeFilter]:
    """Parse a size filter such as '+1048576', '-100' or '=0' (plain bytes)."""
    if not size_str:
        return None

    operator = size_str[0]
    size_value = size_str[1:]

    if operator not in SIZE_OPERATORS:
        raise InvalidFilter(
            "Invalid size operator. Supported operators are +, -, and =."
        )
    if not size_value.isdecimal():
        raise InvalidFilter(
            f"Invalid size value: '{size_value}'. Sizes are plain byte counts."
        )

    return SizeFilter(operator, int(size_value))


def parse_modified_filter(modified_str: Optional[str]) -> Optional[ModifiedFilter]:
    """Parse a modified-time filter such as '+10' (older) or '-3' (newer)."""
    if not modified_str:
        return None

    operator = modified_str[0]
    days_value = modified_str[1:]

    if operator not in MODIFIED_OPERATORS:
        raise InvalidFilter(
            "Invalid modified operator. Supported operators are + and -."
        )
    if not days_value.isdecimal():
        raise InvalidFilter(
            f"Invalid modified value: '{days_value}'. Expected a number of days."
        )

    return ModifiedFilter(operator, int(days_value))


def parse_permission_filter(perm_str: Optional[str]) -> Optional[PermissionFilter]:
    """
    Parse a permissions filter.

    Accepts octal ('644', '0755') or symbolic ('u=rwx,g+rx', 'a+r') modes,
    optionally prefixed with '-' (all bits set) or '/' (any bit set).

    Args:
        perm_str: Raw mode string from the command line

    Returns:
        PermissionFilter, or None when no permissions filter was given
    """
    if not perm_str:
        return None

    kind = "exact"
    mode_str = perm_str
    if perm_str[0] == "-":
        kind, mode_str = "all", perm_str[1:]
    elif perm_str[0] == "/":
        kind, mode_str = "any", perm_str[1:]

    if _OCTAL_MODE.match(mode_str):
        mode = int(mode_str, 8)
    else:
        mode = parse_symbolic_mode(mode_str)

    return PermissionFilter(kind, mode, perm_str)


def parse_symbolic_mode(mode_str: str) -> int:
    """Evaluate a chmod-style symbolic mode against an initial mode of 000."""
    if not mode_str:
        raise InvalidFilter("Invalid permissions mode: empty mode.")

    mode = 0
    for clause in mode_str.split(","):
        match = _SYMBOLIC_CLAUSE.match(clause)
        if not match:
            raise InvalidFilter(f"Invalid permissions mode: '{mode_str}'.")

        who = match.group(1).replace("a", "ugo") or "ugo"
        for op, perms in _SYMBOLIC_ACTION.findall(match.group(2)):
            bits = 0
            for w in set(who):
                for p in perms:
                    if p == "X":
                        # Only grants execute when some execute bit is already set
                        if mode & _EXEC_BITS:
                            bits |= _WHO_BITS[w]["x"]
                    else:
                        bits |= _WHO_BITS[w][p]

            if op == "+":
                mode |= bits
            elif op == "-":
                mode &= ~bits
            else:
                for w in set(who):
                    mode &= ~_WHO_MASK[w]
                mode |= bits

    return mode


def create_file_filter(spec: FilterSpec, now: Optional[float] = None) -> FilePredicate:
    """
    Create the predicate for a FilterSpec.

    Args:
        spec: Parsed filters for this run
        now: Reference time for the modified filter (defaults to current time)

    Returns:
        Function (file name, stat result) -> True when the file matches all filters
    """
    if now is None:
        now = time.time()

    suffix = f".{spec.extension}" if spec.extension else None

    def file_filter(name: str, st: os.stat_result) -> bool:
        """Return True if the file matches all criteria."""
        if suffix is not None and not name.endswith(suffix):
            return False

        if spec.size is not None and not spec.size.matches(st.st_size):
            return False

        if spec.permissions is not None and not spec.permissions.matches(st.st_mode):
            return False

        if spec.modified is not None and not spec.modified.matches(st.st_mtime, now):
            return False

        return True

    return file_filter
