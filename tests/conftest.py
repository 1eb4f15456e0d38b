import os
import time
import pytest
from pathlib import Path

DIR_PATHS = ["empty", "letters", "letters/upper", "numbers"]
FILE_PATHS = ["letters/a.txt", "letters/upper/A.txt", "numbers/1.txt"]


@pytest.fixture
def tree(tmp_path):
    """Builds the sample tree of empty files and returns its root."""
    root = tmp_path / "src"
    root.mkdir()
    for d in DIR_PATHS:
        (root / d).mkdir()
    for f in FILE_PATHS:
        (root / f).touch()
    return root


def write_files(root: Path, contents: dict):
    for rel, text in contents.items():
        (root / rel).write_text(text)


def set_times(path: Path, atime_ago: float = 0, mtime_ago: float = 0, now: float = None):
    """Sets access/modification times relative to now (seconds in the past)."""
    now = time.time() if now is None else now
    os.utime(path, (now - atime_ago, now - mtime_ago))


def rel_paths(records, root: Path):
    return sorted(str(r.path.relative_to(root)) for r in records)
