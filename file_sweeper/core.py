import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from .exclude import ExcludeMatcher
from .models import FileCollection, FileRecord, ScanMode
from .organization.mover import FileMover
from .scanning.filesystem import TreeScanner
from .selection.duplicates import DuplicateFinder, KeepPolicy, redundant
from .selection.prioritize import filter_files


class FileSweeperApp:
    def __init__(self, max_workers: Optional[int] = None):
        self.scanner = TreeScanner(max_workers=max_workers)
        self.finder = DuplicateFinder(max_workers=self.scanner.max_workers)

    def select(self,
               root: Path,
               budget: int,
               min_staleness: float,
               exclude: Optional[ExcludeMatcher] = None,
               deduplicate: bool = True,
               keep: KeepPolicy = KeepPolicy.NEWEST,
               deduct_duplicates: bool = True,
               now: Optional[float] = None) -> FileCollection:
        """
        Chooses the files under root that should be cleaned up.
        1. Scan (files only)
        2. Exclude (patterns)
        3. Deduplicate (redundant copies go first, optionally out of the budget)
        4. Filter (stale files by priority, within the budget)
        5. Rank

        Any error scanning the root propagates: acting on a partial view of
        the tree is not safe when the result may be moved away.
        """
        root = Path(os.path.abspath(root))

        # --- Step 1: Scanning ---
        files = self.scanner.scan(root, ScanMode.FILE)

        # --- Step 2: Exclusion ---
        if exclude is not None and exclude.patterns:
            before = len(files)
            files = FileCollection(r for r in files if not exclude.matches(r.path, root))
            logging.info(f"Excluded {before - len(files)} files by pattern.")

        # --- Step 3: Duplicates ---
        duplicates = FileCollection()
        if deduplicate:
            groups = self.finder.find_duplicate_groups(files)
            duplicates = redundant(groups, keep)
            duplicates.sort(key=lambda r: (-r.size, r.path_key))
            files = files.difference(duplicates)

            if deduct_duplicates:
                budget = max(0, budget - duplicates.total_size())

        # --- Step 4: Priority Filter ---
        selected = filter_files(files, budget, min_staleness, now=now)

        logging.info(f"Selected {len(duplicates)} duplicates and {len(selected)} stale files.")

        # --- Step 5: Ranking ---
        return assign_ranks(duplicates + selected)

    def move(self,
             selection: Iterable[FileRecord],
             src_root: Path,
             dest_root: Path,
             preserve_structure: bool = True,
             dry_run: bool = False) -> int:
        mover = FileMover()
        return mover.move_files(selection, src_root, dest_root,
                                preserve_structure=preserve_structure, dry_run=dry_run)


def assign_ranks(files: Iterable[FileRecord]) -> FileCollection:
    """
    Numbers records from 1 in their current order.

    The rank travels with each record, so it survives later subsetting or
    reordering of the collection.
    """
    return FileCollection(replace(record, rank=i) for i, record in enumerate(files, start=1))
