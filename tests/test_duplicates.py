import time
import pytest
from pathlib import Path
from file_sweeper.models import FileCollection, FileRecord, FileType, ScanMode
from file_sweeper.scanning.filesystem import TreeScanner
from file_sweeper.scanning.hasher import FileHasher
from file_sweeper.selection.duplicates import (
    DuplicateFinder, KeepPolicy, newest_representatives, oldest_representatives,
    redundant, representatives,
)
from conftest import rel_paths, set_times, write_files


@pytest.fixture
def dup_tree(tree):
    write_files(tree, {
        "letters/a.txt": "aaa",
        "letters/upper/A.txt": "aaa",
        "numbers/1.txt": "111",
    })
    return tree


def scan_files(root):
    return TreeScanner().scan(root, ScanMode.FILE)


def make_record(path, size=3, mtime=0.0):
    return FileRecord(path=Path(path), size=size, mtime=mtime, atime=0.0, type=FileType.FILE)


def test_find_duplicate_groups(dup_tree):
    groups = DuplicateFinder().find_duplicate_groups(scan_files(dup_tree))
    assert len(groups) == 1
    assert rel_paths(groups[0], dup_tree) == ["letters/a.txt", "letters/upper/A.txt"]


def test_find_duplicate_groups_parallel_hashing(dup_tree):
    write_files(dup_tree, {"empty/b.txt": "bbb", "empty/c.txt": "bbb"})
    groups = DuplicateFinder(max_workers=4).find_duplicate_groups(scan_files(dup_tree))
    assert [rel_paths(g, dup_tree) for g in groups] == [
        ["empty/b.txt", "empty/c.txt"],
        ["letters/a.txt", "letters/upper/A.txt"],
    ]


def test_unique_sizes_are_never_hashed(dup_tree, monkeypatch):
    write_files(dup_tree, {"numbers/1.txt": "1111"})
    hashed = []
    real = FileHasher.compute_hash

    def spy(self, path):
        hashed.append(path)
        return real(self, path)

    monkeypatch.setattr(FileHasher, "compute_hash", spy)
    DuplicateFinder().find_duplicate_groups(scan_files(dup_tree))
    assert sorted(p.name for p in hashed) == ["A.txt", "a.txt"]


def test_unreadable_files_are_not_duplicates(dup_tree):
    files = scan_files(dup_tree)
    (dup_tree / "letters" / "a.txt").unlink()
    assert DuplicateFinder().find_duplicate_groups(files) == []


def test_newest_and_oldest_representatives(dup_tree):
    now = time.time()
    set_times(dup_tree / "letters" / "a.txt", mtime_ago=10, now=now)
    set_times(dup_tree / "letters" / "upper" / "A.txt", mtime_ago=1, now=now)
    files = scan_files(dup_tree)

    newest = newest_representatives(files)
    assert rel_paths(newest, dup_tree) == ["letters/upper/A.txt"]

    oldest = oldest_representatives(files)
    assert rel_paths(oldest, dup_tree) == ["letters/a.txt"]
    assert all(r.is_duplicate for r in oldest)


def test_keep_oldest_policy():
    group = FileCollection([make_record("/x/a", mtime=1), make_record("/x/b", mtime=5), make_record("/x/c", mtime=3)])
    assert [r.path.name for r in representatives([group], KeepPolicy.OLDEST)] == ["a"]
    assert [r.path.name for r in redundant([group], KeepPolicy.OLDEST)] == ["b", "c"]


def test_mtime_tie_keeps_lowest_path():
    group = FileCollection([make_record("/x/b", mtime=5), make_record("/x/a", mtime=5)])
    assert representatives([group], KeepPolicy.NEWEST)[0].path == Path("/x/a")
    assert representatives([group], KeepPolicy.OLDEST)[0].path == Path("/x/a")
    assert [r.path for r in redundant([group])] == [Path("/x/b")]


def test_redundant_leaves_group_records_unmarked():
    group = FileCollection([make_record("/x/a", mtime=1), make_record("/x/b", mtime=2)])
    marked = redundant([group])
    assert marked[0].is_duplicate
    assert not any(r.is_duplicate for r in group)
