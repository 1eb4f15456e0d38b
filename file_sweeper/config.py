"""
Configuration constants for the file sweeper.
"""
import os

# --- Scanning ---
# Default worker count for directory listing (one per available CPU)
DEFAULT_WORKERS = os.cpu_count() or 1
# Bound on the job/result queues shared by the scan workers
SCAN_QUEUE_SIZE = 100

# --- Hashing & Performance ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Moving ---
NEW_DIR_MODE = 0o700

# --- Reporting ---
TIME_FORMAT = "%b %d %Y %H:%M"
LIST_PADDING = 2  # spaces between table columns

# --- Input Parsing ---
# Size prefixes map to an exponent of the base (1024 for K/KiB, 1000 for KB)
SIZE_PREFIXES = {'k': 1, 'm': 2, 'g': 3, 't': 4, 'p': 5, 'e': 6, 'z': 7, 'y': 8}
SIZE_FORMAT_UNITS = ['KiB', 'MiB', 'GiB', 'TiB', 'PiB', 'EiB', 'ZiB', 'YiB']
SIZE_FORMAT_BASE = 1024

HOUR = 60 * 60
DAY = HOUR * 24
MONTH = DAY * 30
YEAR = MONTH * 12
DURATION_UNITS = {'h': HOUR, 'd': DAY, 'm': MONTH, 'y': YEAR}

# Lines in an exclude file matching this are ignored
COMMENT_PATTERN = r'^\s*#'
