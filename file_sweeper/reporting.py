import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from . import config
from .models import FileRecord
from .parse import format_size


class ReportGenerator:
    headers = ["#", "Size", "Last Access", "Duplicate", "Path"]

    def format_table(self, files: Iterable[FileRecord]) -> str:
        """
        Formats rank, size, last access time, duplicate flag and path as
        aligned columns.
        """
        rows = [self.headers] + [self._row(record) for record in files]
        widths = [max(len(row[i]) for row in rows) for i in range(len(self.headers) - 1)]
        pad = " " * config.LIST_PADDING

        lines = []
        for row in rows:
            cells = [cell.ljust(width) for cell, width in zip(row, widths)]
            lines.append(pad.join(cells + [row[-1]]))
        return "\n".join(lines)

    def format_paths(self, files: Iterable[FileRecord]) -> str:
        return "\n".join(str(record.path) for record in files)

    def write_csv(self, files: Iterable[FileRecord], output_csv: Path):
        """Writes the table to a CSV file, with the exact byte size added."""
        count = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.headers + ["Bytes"])
            for record in files:
                writer.writerow(self._row(record) + [record.size])
                count += 1

        logging.info(f"Report complete: {count} files written to {output_csv}")

    def _row(self, record: FileRecord) -> List[str]:
        return [
            str(record.rank) if record.rank is not None else "",
            format_size(record.size),
            datetime.fromtimestamp(record.atime).strftime(config.TIME_FORMAT),
            "Yes" if record.is_duplicate else "No",
            str(record.path),
        ]
