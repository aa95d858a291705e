"""
Statistics and file helpers for the fingerprint cache.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from typing import Iterator, TextIO

from ..config import FILE_ENCODING, FILE_ENCODING_ERRORS


@dataclass
class SyncStats:
    """Statistics from one folder sync."""
    total_files: int = 0
    reused: int = 0
    computed: int = 0
    failed: int = 0

    @property
    def hit_rate(self) -> float:
        """Percentage of files whose cached fingerprint was still valid."""
        if self.total_files == 0:
            return 0.0
        return (self.reused / self.total_files) * 100


def open_text(path: str, mode: str = 'r') -> TextIO:
    """Open a cache, registry or report file with the shared encoding settings."""
    return open(path, mode, encoding=FILE_ENCODING, errors=FILE_ENCODING_ERRORS)


@contextmanager
def atomic_write(path: str) -> Iterator[TextIO]:
    """
    Write a text file through a temp file in the same directory.

    The target is replaced only after the block completes; on any error the
    temp file is removed and the target keeps its previous contents.

    Usage:
        with atomic_write("/cache/dupimg.cache.json") as f:
            f.write("{}")
    """
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)

    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding=FILE_ENCODING,
            errors=FILE_ENCODING_ERRORS,
            newline='\n',
            dir=parent,
            prefix='.' + os.path.basename(path) + '.',
            suffix='.tmp',
            delete=False,
        ) as handle:
            temp_name = handle.name
            yield handle
    except BaseException:
        if temp_name:
            with suppress(FileNotFoundError):
                os.remove(temp_name)
        raise

    os.replace(temp_name, path)


__all__ = ['SyncStats', 'atomic_write', 'open_text']
