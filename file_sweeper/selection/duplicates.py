import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..exceptions import FileHashError
from ..models import FileCollection, FileRecord
from ..scanning.hasher import FileHasher


class KeepPolicy(str, Enum):
    """Which member of a duplicate group stays behind."""
    NEWEST = 'newest'
    OLDEST = 'oldest'


class DuplicateFinder:
    def __init__(self, max_workers: int = 1):
        self.hasher = FileHasher()
        self.max_workers = max(1, max_workers)

    def find_duplicate_groups(self, files: Iterable[FileRecord]) -> List[FileCollection]:
        """
        Groups files with identical content.

        Files are bucketed by size first; only files sharing a size with at
        least one other file are hashed. Each returned group has two or more
        members, sorted by path, and groups are ordered by their first path.
        """
        # --- Step 1: Size buckets ---
        by_size: Dict[int, List[FileRecord]] = defaultdict(list)
        for record in files:
            by_size[record.size].append(record)

        candidates = [r for group in by_size.values() if len(group) > 1 for r in group]
        if not candidates:
            return []

        logging.debug(f"Hashing {len(candidates)} same-size candidates...")

        # --- Step 2: Content hashes ---
        digests = self._hash_all(candidates)

        by_hash: Dict[str, List[FileRecord]] = defaultdict(list)
        for record, digest in zip(candidates, digests):
            if digest is not None:
                by_hash[digest].append(record)

        groups = [
            FileCollection(group).sorted_by_path()
            for group in by_hash.values() if len(group) > 1
        ]
        groups.sort(key=lambda g: g[0].path_key)

        logging.info(f"Found {len(groups)} duplicate groups.")
        return groups

    def _hash_all(self, candidates: List[FileRecord]) -> List[Optional[str]]:
        """Hashes each candidate; one result slot per input, None on failure."""
        if self.max_workers <= 1:
            return [self._safe_hash(r) for r in candidates]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self._safe_hash, candidates))

    def _safe_hash(self, record: FileRecord) -> Optional[str]:
        try:
            return self.hasher.compute_hash(record.path)
        except FileHashError as e:
            # Unreadable files are simply not duplicates
            logging.debug(str(e))
            return None


def _kept_member(group: FileCollection, keep: KeepPolicy) -> FileRecord:
    """
    Picks the member of a group that stays.

    Ties on mtime go to the lowest path so the choice is reproducible.
    """
    if keep == KeepPolicy.NEWEST:
        return min(group, key=lambda r: (-r.mtime, r.path_key))
    return min(group, key=lambda r: (r.mtime, r.path_key))


def representatives(groups: List[FileCollection], keep: KeepPolicy = KeepPolicy.NEWEST) -> FileCollection:
    """The single kept record of each group."""
    return FileCollection(_kept_member(group, keep) for group in groups)


def redundant(groups: List[FileCollection], keep: KeepPolicy = KeepPolicy.NEWEST) -> FileCollection:
    """Every record except the kept one in each group, marked as duplicates."""
    output = FileCollection()
    for group in groups:
        kept = _kept_member(group, keep)
        output.extend(replace(r, is_duplicate=True) for r in group if r.path != kept.path)
    return output


def newest_representatives(files: Iterable[FileRecord], finder: Optional[DuplicateFinder] = None) -> FileCollection:
    """The most recently modified file of each duplicate group."""
    finder = finder or DuplicateFinder()
    return representatives(finder.find_duplicate_groups(files), KeepPolicy.NEWEST)


def oldest_representatives(files: Iterable[FileRecord], finder: Optional[DuplicateFinder] = None) -> FileCollection:
    """All duplicates except the most recently modified file of each group."""
    finder = finder or DuplicateFinder()
    return redundant(finder.find_duplicate_groups(files), KeepPolicy.NEWEST)
