import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    def compute_hash(self, path: Path) -> str:
        """
        Computes the SHA-256 fingerprint of the file's full content.

        Only called for files that share a size with another candidate, so
        the full read is paid just where a duplicate is possible.
        """
        try:
            return self._full_sha256(path)
        except OSError as e:
            # File might have been moved/deleted or be unreadable
            raise FileHashError(f"Cannot hash {path}: {e}") from e

    def _full_sha256(self, path: Path) -> str:
        """Reads entire file. High I/O cost."""
        h = hashlib.sha256()
        with open(path, 'rb') as f:
            while chunk := f.read(config.HASH_CHUNK_SIZE):
                h.update(chunk)
        return h.hexdigest()
