"""
Report formatting and display for the CLI interface.

Provides the cache list table, the fingerprint error notice and the run
summary.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable

from ..models import FingerprintEntry
from ..utils.exporters import export_error_report
from ..utils.formatters import display_path

CACHE_NAME_HEADER = "CacheName"
CACHE_FILE_HEADER = "CacheFile"
SEPARATOR = "-"


def format_cache_list(pairs: Iterable[tuple[str, str]]) -> list[str]:
    """
    Render registered caches as two padded columns.

    The header row is followed by a dashed row; each column is as wide as its
    widest value or header.

    Examples:
        >>> format_cache_list([('/photos', 'ab.txt')])
        ['CacheName CacheFile', '--------- ---------', '/photos   ab.txt   ']
    """
    pairs = [(display_path(key), value) for key, value in pairs]
    key_width = max([len(CACHE_NAME_HEADER)] + [len(key) for key, _ in pairs])
    value_width = max([len(CACHE_FILE_HEADER)] + [len(value) for _, value in pairs])

    rows = [
        (CACHE_NAME_HEADER, CACHE_FILE_HEADER),
        (SEPARATOR * key_width, SEPARATOR * value_width),
    ] + pairs
    return [f"{key.ljust(key_width)} {value.ljust(value_width)}" for key, value in rows]


def print_cache_list(pairs: Iterable[tuple[str, str]]) -> None:
    """Print the cache list table to stdout."""
    for line in format_cache_list(pairs):
        print(line)


def notice_errors(
    errors: list[FingerprintEntry],
    errors_file: str | Path,
    logger: logging.Logger,
) -> int:
    """
    Write the error report and tell the operator about it.

    Args:
        errors: Entries with a failed fingerprint
        errors_file: Report file path
        logger: Logger for write failures

    Returns:
        Number of entries with errors (0 writes nothing)
    """
    if not errors:
        return 0

    try:
        export_error_report(errors, errors_file)
    except (OSError, UnicodeError) as e:
        logger.error(f"Cannot write error report {errors_file}: {e}")
        print(f"{len(errors)} file(s) has error.", file=sys.stderr)
        return len(errors)

    print(f"{len(errors)} file(s) has error. See '{errors_file}'", file=sys.stderr)
    return len(errors)


__all__ = [
    'format_cache_list',
    'print_cache_list',
    'notice_errors',
]
