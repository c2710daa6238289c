import os

import pytest

from fileaudit_modules import walker
from fileaudit_modules.filters import FilterSpec, create_file_filter
from fileaudit_modules.progress import ProgressTracker
from fileaudit_modules.utils import format_owner_name
from fileaudit_modules.walker import FileRecord, walk_tree


def _match_all(name, st):
    return True


def _build_tree(root):
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"x" * 10)
    (root / "b.log").write_bytes(b"x" * 20)
    (root / "sub" / "c.txt").write_bytes(b"x" * 30)
    (root / "sub" / "deeper" / "d.txt").write_bytes(b"")


def test_walk_yields_every_regular_file(tmp_path):
    _build_tree(tmp_path)

    records = list(walk_tree(str(tmp_path), _match_all))

    assert [os.path.relpath(r.path, tmp_path) for r in records] == [
        "a.txt",
        "b.log",
        os.path.join("sub", "c.txt"),
        os.path.join("sub", "deeper", "d.txt"),
    ]
    assert [r.size_bytes for r in records] == [10, 20, 30, 0]
    assert all(isinstance(r, FileRecord) for r in records)


def test_walk_records_owner_and_mtime(tmp_path):
    target = tmp_path / "a.txt"
    target.write_bytes(b"abc")
    os.utime(target, (1_600_000_000, 1_600_000_000))

    (record,) = walk_tree(str(tmp_path), _match_all)

    assert record.owner == format_owner_name(os.getuid())
    assert record.modified == 1_600_000_000
    assert record.path == str(target)


def test_walk_applies_filter(tmp_path):
    _build_tree(tmp_path)
    file_filter = create_file_filter(FilterSpec.from_strings(extension="txt", size="+5"))

    records = list(walk_tree(str(tmp_path), file_filter))

    assert sorted(os.path.basename(r.path) for r in records) == ["a.txt", "c.txt"]


def test_walk_calls_filter_once_per_regular_file(tmp_path):
    _build_tree(tmp_path)
    seen = []

    def file_filter(name, st):
        seen.append(name)
        return False

    assert list(walk_tree(str(tmp_path), file_filter)) == []
    assert sorted(seen) == ["a.txt", "b.log", "c.txt", "d.txt"]


def test_walk_skips_symlinks(tmp_path):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_bytes(b"data")

    root = tmp_path / "root"
    root.mkdir()
    (root / "real.txt").write_bytes(b"data")
    os.symlink(root / "real.txt", root / "link.txt")
    os.symlink(outside, root / "linked_dir")

    records = list(walk_tree(str(root), _match_all))

    assert [os.path.basename(r.path) for r in records] == ["real.txt"]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires named pipes")
def test_walk_skips_special_files(tmp_path):
    os.mkfifo(tmp_path / "pipe.txt")
    (tmp_path / "plain.txt").write_bytes(b"")

    records = list(walk_tree(str(tmp_path), _match_all))

    assert [os.path.basename(r.path) for r in records] == ["plain.txt"]


def test_unreadable_directory_is_skipped_with_warning(tmp_path, monkeypatch, capsys):
    _build_tree(tmp_path)
    blocked = str(tmp_path / "sub")
    real_scandir = os.scandir

    def fake_scandir(path):
        if str(path) == blocked:
            raise PermissionError(13, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", fake_scandir)
    progress = ProgressTracker()

    records = list(walk_tree(str(tmp_path), _match_all, progress=progress))

    assert sorted(os.path.basename(r.path) for r in records) == ["a.txt", "b.log"]
    assert progress.unreadable == 1
    err = capsys.readouterr().err
    assert f"[WARN] Cannot read {blocked}: Permission denied" in err


def test_progress_counts(tmp_path):
    _build_tree(tmp_path)
    file_filter = create_file_filter(FilterSpec(extension="txt"))
    progress = ProgressTracker()

    list(walk_tree(str(tmp_path), file_filter, progress=progress))

    assert progress.matches == 3
    assert progress.total_dirs == 3
    # a.txt, b.log, sub, c.txt, deeper, d.txt
    assert progress.total_objects == 6


def test_unknown_uid_reported_as_number(tmp_path, monkeypatch):
    (tmp_path / "a.txt").write_bytes(b"")

    def missing(uid):
        raise KeyError(uid)

    monkeypatch.setattr("fileaudit_modules.utils.pwd.getpwuid", missing)

    (record,) = walk_tree(str(tmp_path), _match_all)

    assert record.owner == f"UID {os.getuid()}"


def test_walk_handles_trees_deeper_than_recursion_limit(tmp_path):
    depth = 1100
    deepest = str(tmp_path)
    for _ in range(depth):
        deepest = os.path.join(deepest, "d")
        os.mkdir(deepest)
    with open(os.path.join(deepest, "x.txt"), "wb") as f:
        f.write(b"abc")
    progress = ProgressTracker()

    try:
        records = list(walk_tree(str(tmp_path), _match_all, progress=progress))
    finally:
        # Remove bottom-up so cleanup does not recurse once per level
        os.remove(os.path.join(deepest, "x.txt"))
        while deepest != str(tmp_path):
            os.rmdir(deepest)
            deepest = os.path.dirname(deepest)

    expected = os.path.join(str(tmp_path), *["d"] * depth, "x.txt")
    assert [r.path for r in records] == [expected]
    assert progress.total_dirs == depth + 1


def test_walk_order_is_depth_first_by_name(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "a.txt").write_bytes(b"")
    (tmp_path / "b" / "inner.txt").write_bytes(b"")
    (tmp_path / "c.txt").write_bytes(b"")

    records = list(walk_tree(str(tmp_path), _match_all))

    assert [os.path.relpath(r.path, tmp_path) for r in records] == [
        "a.txt",
        os.path.join("b", "inner.txt"),
        "c.txt",
    ]


class _StatFailingEntry:
    """DirEntry stand-in whose stat() is refused."""

    def __init__(self, entry):
        self._entry = entry
        self.name = entry.name
        self.path = entry.path

    def __getattr__(self, attr):
        return getattr(self._entry, attr)

    def stat(self, follow_symlinks=True):
        raise PermissionError(13, "Permission denied", self.path)


def test_unreadable_file_is_skipped_with_warning(tmp_path, monkeypatch, capsys):
    _build_tree(tmp_path)
    real_scandir = os.scandir

    class _Listing:
        def __init__(self, path):
            with real_scandir(path) as it:
                self._entries = list(it)

        def __enter__(self):
            return iter(
                _StatFailingEntry(e) if e.name == "b.log" else e for e in self._entries
            )

        def __exit__(self, *exc):
            return False

    monkeypatch.setattr(walker.os, "scandir", _Listing)
    progress = ProgressTracker()

    records = list(walk_tree(str(tmp_path), _match_all, progress=progress))

    assert sorted(os.path.basename(r.path) for r in records) == ["a.txt", "c.txt", "d.txt"]
    assert progress.unreadable == 1
    err = capsys.readouterr().err
    assert f"[WARN] Cannot read {tmp_path / 'b.log'}: Permission denied" in err
