"""
Formatting utilities for dupimg log and console output.
"""

from __future__ import annotations

from ..cache.utils import SyncStats
from ..config import FILE_ENCODING, FILE_ENCODING_ERRORS
from ..models import DuplicateMatch


def format_number(n: int) -> str:
    """
    Format a count with thousands separators.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def display_path(path: str) -> str:
    """
    Make a path safe to print: undecodable bytes are shown as \\xNN escapes.

    Examples:
        >>> display_path('/photos/\\udcff.png')
        '/photos/\\\\xff.png'
    """
    return path.encode(FILE_ENCODING, FILE_ENCODING_ERRORS).decode(FILE_ENCODING, 'backslashreplace')


def format_sync_stats(stats: SyncStats) -> str:
    """
    One-line summary of a folder sync.

    Examples:
        >>> format_sync_stats(SyncStats(total_files=1200, reused=1000, computed=195, failed=5))
        'Files: 1,200 (cached 1,000, hashed 195, failed 5, hit rate 83.3%)'
    """
    return (
        f"Files: {format_number(stats.total_files)} "
        f"(cached {format_number(stats.reused)}, hashed {format_number(stats.computed)}, "
        f"failed {format_number(stats.failed)}, hit rate {stats.hit_rate:.1f}%)"
    )


def format_match(match: DuplicateMatch) -> str:
    """Describe a matching pair as 'duplicate ~ kept (similarity%)'."""
    duplicate = display_path(match.duplicate.identity)
    kept = display_path(match.kept.identity)
    return f"{duplicate} ~ {kept} ({match.similarity:.1f}%)"


__all__ = ['display_path', 'format_number', 'format_sync_stats', 'format_match']
