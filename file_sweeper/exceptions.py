"""
Custom exception hierarchy for the file sweeper.

Fatal errors (an unreadable scan root, a failed move) propagate up to the
CLI. Per-entry failures during scanning and hashing are logged and skipped
where they happen, so these types mostly mark the points where a run stops.
"""


class FileSweeperError(Exception):
    """Base exception for all file sweeper errors."""
    pass


class ScanError(FileSweeperError):
    """Raised when the root of a scan cannot be read."""
    pass


class FileHashError(FileSweeperError):
    """Raised when file hashing fails."""
    pass


class FileOperationError(FileSweeperError):
    """Raised when moving a file fails."""
    pass


class InputError(FileSweeperError, ValueError):
    """Raised when a size, duration or number range cannot be parsed."""
    pass
