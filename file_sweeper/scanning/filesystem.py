import os
import logging
import queue
import stat
from pathlib import Path
from typing import List, Optional
from concurrent.futures import ThreadPoolExecutor

from .. import config
from ..exceptions import ScanError
from ..models import FileCollection, FileRecord, FileType, ScanMode

# Put on the job queue to stop a worker, and on the result queue by a worker
# once it has stopped.
_STOP = object()
_WORKER_DONE = object()


class TreeScanner:
    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max(1, max_workers or config.DEFAULT_WORKERS)

    def scan(self, root: Path, mode: ScanMode = ScanMode.ANY) -> FileCollection:
        """
        Returns a record for every entry beneath root whose type is in mode.

        The tree is walked breadth-first, one generation of directories at a
        time: a pool of workers lists every directory of the current
        generation, and the subdirectories they find become the next one.
        Unreadable directories are skipped. Only a failure to stat the root
        itself is an error.
        """
        root = Path(os.path.abspath(root))
        try:
            root_stat = os.stat(root)
        except OSError as e:
            raise ScanError(f"Cannot scan {root}: {e}") from e

        if not stat.S_ISDIR(root_stat.st_mode):
            logging.warning(f"Scan root is not a directory: {root}")
            return FileCollection()

        logging.info(f"Scanning {root} ({self.max_workers} workers)...")

        discovered = FileCollection()
        generation: List[Path] = [root]
        depth = 0

        # One extra thread feeds the job queue while the workers drain it
        with ThreadPoolExecutor(max_workers=self.max_workers + 1) as executor:
            while generation:
                entries = self._scan_generation(executor, generation)
                discovered.extend(entries)
                generation = [e.path for e in entries if e.type == FileType.DIRECTORY]
                depth += 1
                logging.debug(f"Generation {depth}: {len(entries)} entries, "
                              f"{len(generation)} directories")

        logging.info(f"Scan complete. Found {len(discovered)} entries.")

        # Type filtering uses the type captured at discovery; never re-stat
        return discovered.of_type(mode)

    def _scan_generation(self, executor: ThreadPoolExecutor, directories: List[Path]) -> List[FileRecord]:
        """Lists every directory in one generation and waits for all workers."""
        jobs: queue.Queue = queue.Queue(maxsize=config.SCAN_QUEUE_SIZE)
        results: queue.Queue = queue.Queue(maxsize=config.SCAN_QUEUE_SIZE)

        feeder = executor.submit(self._feed, directories, jobs)
        workers = [executor.submit(self._list_worker, jobs, results)
                   for _ in range(self.max_workers)]

        entries: List[FileRecord] = []
        finished = 0
        while finished < len(workers):
            item = results.get()
            if item is _WORKER_DONE:
                finished += 1
            else:
                entries.append(item)

        # Surface anything unexpected raised inside the pool
        feeder.result()
        for future in workers:
            future.result()

        return entries

    def _feed(self, directories: List[Path], jobs: queue.Queue):
        for directory in directories:
            jobs.put(directory)
        for _ in range(self.max_workers):
            jobs.put(_STOP)

    def _list_worker(self, jobs: queue.Queue, results: queue.Queue):
        try:
            while True:
                directory = jobs.get()
                if directory is _STOP:
                    break
                try:
                    records = self._list_directory(directory)
                except Exception as e:
                    logging.error(f"Failed to process directory {directory}: {e}")
                    continue
                for record in records:
                    results.put(record)
        finally:
            results.put(_WORKER_DONE)

    def _list_directory(self, directory: Path) -> List[FileRecord]:
        """Lists one directory, capturing metadata with one lstat per entry."""
        try:
            with os.scandir(directory) as it:
                dir_entries = list(it)
        except OSError as e:
            logging.warning(f"Cannot list directory {directory}: {e}")
            return []

        records = []
        for entry in dir_entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                # Entry vanished or is unreadable since the listing
                logging.debug(f"Skipping {entry.path}: {e}")
                continue

            ftype = self._classify(st.st_mode)
            if ftype is None:
                continue

            records.append(FileRecord(
                path=Path(entry.path),
                size=st.st_size,
                mtime=st.st_mtime,
                atime=st.st_atime,
                type=ftype,
            ))
        return records

    def _classify(self, mode: int) -> Optional[FileType]:
        if stat.S_ISLNK(mode):
            return FileType.SYMLINK
        if stat.S_ISDIR(mode):
            return FileType.DIRECTORY
        if stat.S_ISREG(mode):
            return FileType.FILE
        # FIFOs, sockets, devices
        return None
