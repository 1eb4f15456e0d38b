from dataclasses import dataclass
from enum import Enum, IntFlag
from pathlib import Path
from typing import Iterable, List, Optional, Set


class FileType(str, Enum):
    FILE = 'file'
    DIRECTORY = 'directory'
    SYMLINK = 'symlink'


class ScanMode(IntFlag):
    """Which entry types a scan returns."""
    FILE = 1
    DIRECTORY = 2
    SYMLINK = 4
    ANY = FILE | DIRECTORY | SYMLINK

    def includes(self, ftype: FileType) -> bool:
        return bool(self & _MODE_FOR_TYPE[ftype])


_MODE_FOR_TYPE = {
    FileType.FILE: ScanMode.FILE,
    FileType.DIRECTORY: ScanMode.DIRECTORY,
    FileType.SYMLINK: ScanMode.SYMLINK,
}


@dataclass(frozen=True)
class FileRecord:
    """
    Snapshot of one filesystem entry, taken once at scan time.

    `is_duplicate` and `rank` are annotations added later in the pipeline;
    they are applied with dataclasses.replace() so the scanned record itself
    never changes.
    """
    path: Path              # absolute; the only identity of a record
    size: int
    mtime: float
    atime: float
    type: FileType

    is_duplicate: bool = False
    rank: Optional[int] = None

    @property
    def path_key(self) -> str:
        """String form of the path, used for lexical ordering."""
        return str(self.path)


class FileCollection(list):
    """
    Ordered sequence of FileRecords with set-like helpers keyed on path.

    Order reflects scan/iteration order unless explicitly sorted.
    """

    def paths(self) -> Set[Path]:
        return {record.path for record in self}

    def contains(self, item) -> bool:
        """Membership by path; accepts a FileRecord or anything path-like."""
        path = item.path if isinstance(item, FileRecord) else Path(item)
        return any(record.path == path for record in self)

    __contains__ = contains

    def difference(self, other: Iterable[FileRecord]) -> "FileCollection":
        """All records in this collection whose path is absent from other."""
        other_paths = {record.path for record in other}
        return FileCollection(r for r in self if r.path not in other_paths)

    def total_size(self) -> int:
        return sum(record.size for record in self)

    def sorted_by_path(self) -> "FileCollection":
        return FileCollection(sorted(self, key=lambda r: r.path_key))

    def of_type(self, mode: ScanMode) -> "FileCollection":
        return FileCollection(r for r in self if mode.includes(r.type))

    def __getitem__(self, item):
        result = super().__getitem__(item)
        if isinstance(item, slice):
            return FileCollection(result)
        return result

    def __add__(self, other: List[FileRecord]) -> "FileCollection":
        return FileCollection(list.__add__(self, other))
