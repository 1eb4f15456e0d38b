"""
Budgeted selection of stale files.

Files are ranked by last access time divided by size, so big files that
have not been touched for a long time come first, then taken greedily until
the byte budget runs out.
"""
import logging
import math
import time
from typing import Iterable, Optional

from ..models import FileCollection, FileRecord


def priority(record: FileRecord) -> float:
    """Lower is more eligible. Empty files get infinity."""
    if record.size == 0:
        return math.inf
    # Whole seconds divided by bytes, truncated toward zero
    seconds = math.floor(record.atime)
    quotient = abs(seconds) // record.size
    return quotient if seconds >= 0 else -quotient


def prioritize(files: Iterable[FileRecord]) -> FileCollection:
    """
    Sorts files by priority.

    Sorting by path first and then (stably) by priority gives one canonical
    order for a given set of files, whatever order they were scanned in.
    """
    by_path = sorted(files, key=lambda r: r.path_key)
    return FileCollection(sorted(by_path, key=priority))


def filter_files(files: Iterable[FileRecord],
                 budget: int,
                 min_staleness: float,
                 now: Optional[float] = None) -> FileCollection:
    """
    Selects the most eligible files that fit within budget bytes.

    A file is never selected if it is empty or was accessed less than
    min_staleness seconds before now. The walk is a first-fit greedy pass:
    a file that does not fit is skipped, and a later, smaller one may still
    be taken.
    """
    now = time.time() if now is None else now
    max_atime = now - min_staleness
    remaining = budget
    output = FileCollection()

    for record in prioritize(files):
        if record.size == 0 or record.atime > max_atime:
            continue

        if remaining - record.size >= 0:
            output.append(record)
            remaining -= record.size

    logging.debug(f"Priority filter selected {len(output)} files "
                  f"({budget - remaining} of {budget} bytes)")
    return output
