"""
Shell-style exclude patterns with recursive `**` wildcards.

A pattern starting with "/" is anchored at the scan root; any other pattern
may match at any depth. Either way, everything beneath a matching directory
is matched too.
"""
import logging
import re
from pathlib import Path, PurePath
from typing import Iterable, List, Optional

from wcmatch import glob

from . import config
from .exceptions import InputError

# `**` spans whole directories, wildcards match dotfiles, {a,b} alternates
GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE


class ExcludeMatcher:
    def __init__(self, patterns: Optional[Iterable[str]] = None):
        self.patterns: List[str] = list(patterns or [])

    @classmethod
    def from_file(cls, path: Path) -> "ExcludeMatcher":
        """Reads one pattern per line, skipping blanks and # comments."""
        comment = re.compile(config.COMMENT_PATTERN)
        patterns = []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if line and not comment.match(line):
                        patterns.append(line)
        except OSError as e:
            raise InputError(f"Cannot read exclude file {path}: {e}") from e
        return cls(patterns)

    def add(self, pattern: str):
        self.patterns.append(pattern)

    def matches(self, path, root) -> bool:
        """True if path matches any pattern relative to root."""
        check = PurePath(path).as_posix()
        root_str = glob.escape(PurePath(root).as_posix().rstrip('/'))

        for pattern in self.patterns:
            rel = pattern.strip('/')
            if not rel:
                continue

            if pattern.startswith('/'):
                base = f"{root_str}/{rel}"
            elif check.startswith('/'):
                base = f"/**/{rel}"
            else:
                base = f"**/{rel}"

            try:
                if glob.globmatch(check, [base, f"{base}/**"], flags=GLOB_FLAGS):
                    return True
            except ValueError as e:
                logging.warning(f"Ignoring invalid exclude pattern {pattern!r}: {e}")
        return False
