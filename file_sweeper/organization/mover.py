import os
import shutil
import logging
from pathlib import Path
from typing import Iterable
from tqdm import tqdm

from .. import config
from ..exceptions import FileOperationError
from ..models import FileRecord


class FileMover:
    def move_files(self,
                   files: Iterable[FileRecord],
                   src_root: Path,
                   dest_root: Path,
                   preserve_structure: bool = True,
                   dry_run: bool = False) -> int:
        """
        Moves each file from under src_root into dest_root.

        With preserve_structure the path relative to src_root is kept,
        otherwise files land directly in dest_root. Stops at the first
        failure, including a destination that already exists; files moved
        before that stay where they were moved to.

        Returns the number of files moved.
        """
        files = list(files)
        src_root = Path(os.path.abspath(src_root))
        dest_root = Path(os.path.abspath(dest_root))

        if not files:
            logging.info("No files need moving.")
            return 0

        logging.info(f"Moving {len(files)} files to {dest_root} (DryRun={dry_run})...")

        moved = 0
        for record in tqdm(files, desc="Moving", disable=dry_run):
            dest = self._destination(record.path, src_root, dest_root, preserve_structure)

            if dry_run:
                logging.info(f"[DRY RUN] Move {record.path} -> {dest}")
                continue

            self._move_file(record.path, dest)
            moved += 1

        return moved

    def _destination(self, src: Path, src_root: Path, dest_root: Path, preserve_structure: bool) -> Path:
        if not preserve_structure:
            return dest_root / src.name
        try:
            return dest_root / src.relative_to(src_root)
        except ValueError as e:
            raise FileOperationError(f"{src} is not inside {src_root}") from e

    def _move_file(self, src: Path, dest: Path):
        """
        Copies src to dest, keeping mode and timestamps, then removes src.

        The destination is created exclusively, so an existing file is
        never overwritten.
        """
        try:
            dest.parent.mkdir(mode=config.NEW_DIR_MODE, parents=True, exist_ok=True)
            with open(src, 'rb') as fsrc, open(dest, 'xb') as fdest:
                shutil.copyfileobj(fsrc, fdest)
            shutil.copystat(src, dest)
            os.remove(src)
        except FileExistsError as e:
            raise FileOperationError(f"Destination already exists: {dest}") from e
        except OSError as e:
            raise FileOperationError(f"Failed to move {src} -> {dest}: {e}") from e

        logging.debug(f"Moved {src} -> {dest}")
