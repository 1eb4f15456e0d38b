"""
Parsing of human-readable sizes, durations and number ranges.
"""
import re
from typing import List

from . import config
from .exceptions import InputError

SIZE_PATTERN = re.compile(r'^([0-9]+)\s*(?:([KMGTPEZY])(B|iB)?|(B))?$', re.IGNORECASE)
DURATION_PATTERN = re.compile(r'([0-9]+)\s*([hdmy])', re.IGNORECASE)

RANGE_SEPARATOR = ','
RANGE_SPECIFIER = '-'


def parse_size(text: str) -> int:
    """
    Parses a file size like '10GiB', '500MB' or '2k' into bytes.

    A bare prefix or 'iB' is binary (powers of 1024); 'B' after a prefix is
    metric (powers of 1000). A plain number, or a number followed by 'B', is
    a byte count.
    """
    match = SIZE_PATTERN.match(text.strip())
    if not match:
        raise InputError(f"the string '{text}' is not a valid file size")

    num, prefix, unit, _ = match.groups()
    if prefix is None:
        return int(num)

    base = 1000 if (unit or '').lower() == 'b' else 1024
    return int(num) * base ** config.SIZE_PREFIXES[prefix.lower()]


def parse_duration(text: str) -> int:
    """
    Parses a duration like '1y6m' or '2d 12h' into seconds.

    Units are h (hours), d (days), m (30-day months) and y (12 months); all
    components found are summed.
    """
    matches = DURATION_PATTERN.findall(text)
    if not matches:
        raise InputError(f"the string '{text}' is not a valid time duration")

    return sum(int(value) * config.DURATION_UNITS[unit.lower()] for value, unit in matches)


def format_size(num_bytes: int) -> str:
    if num_bytes < config.SIZE_FORMAT_BASE:
        return f"{num_bytes}B"

    output = float(num_bytes)
    index = -1
    while output >= config.SIZE_FORMAT_BASE and index < len(config.SIZE_FORMAT_UNITS) - 1:
        output /= config.SIZE_FORMAT_BASE
        index += 1

    return f"{output:.1f}{config.SIZE_FORMAT_UNITS[index]}"


def parse_number_ranges(text: str) -> List[int]:
    """Parses comma-separated numbers and ranges, e.g. '1,7-12,15'."""
    if not text.strip():
        return []

    numbers = []
    for number_range in text.split(RANGE_SEPARATOR):
        bounds = [b.strip() for b in number_range.split(RANGE_SPECIFIER)]
        if len(bounds) > 2 or not all(re.fullmatch(r'[0-9]+', b) for b in bounds):
            raise InputError("number ranges must only contain positive integers")

        start = int(bounds[0])
        end = int(bounds[-1])
        numbers.extend(range(start, end + 1))

    return numbers
