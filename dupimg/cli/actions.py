"""
Duplicate file action handlers for the CLI interface.

Provides the two actions applied to resolved duplicates: report the path, or
move the file under a destination root keeping its path relative to the
source root. Move failures are returned as messages and never stop the batch.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..models import FingerprintEntry
from ..utils.formatters import display_path

ACTION_REPORT = 'report'
ACTION_MOVE = 'move'


def destination_path(identity: str, source_root: str | Path, move_root: str | Path) -> str:
    """
    Map a file under ``source_root`` to the same relative path under ``move_root``.

    Examples:
        >>> destination_path('/photos/2020/a.jpg', '/photos', '/similar')
        '/similar/2020/a.jpg'
    """
    relative = os.path.relpath(identity, os.path.abspath(str(source_root)))
    return os.path.join(os.path.abspath(str(move_root)), relative)


def move_file(src: str, dst: str) -> None:
    """
    Move ``src`` to ``dst``, creating parent directories and replacing an
    existing destination. A missing source is skipped silently.

    Raises:
        OSError: If the destination tree cannot be created or the move fails
    """
    if not os.path.isfile(src):
        return
    os.makedirs(os.path.dirname(dst), exist_ok=True)
    if os.path.lexists(dst):
        os.remove(dst)
    shutil.move(src, dst)


def handle_duplicates(
    duplicates: Iterable[FingerprintEntry],
    action: str = ACTION_REPORT,
    source_root: Optional[str | Path] = None,
    move_root: Optional[str | Path] = None,
    output: Callable[[str], None] = print,
    logger: Optional[logging.Logger] = None,
) -> dict:
    """
    Apply an action to every duplicate and emit one line per duplicate.

    Args:
        duplicates: Resolved duplicate entries
        action: 'report' (print path) or 'move'
        source_root: Root the duplicates were found under (for 'move')
        move_root: Destination root (for 'move')
        output: Line sink (default: print)
        logger: Optional logger instance

    Returns:
        Statistics dictionary with keys:
        - processed: Number of duplicates handled successfully
        - errors: Number of failed moves
        - error_details: List of dictionaries with 'path' and 'error' keys

    Raises:
        ValueError: If the action is unknown or 'move' lacks its roots
    """
    if action not in (ACTION_REPORT, ACTION_MOVE):
        raise ValueError(f"Unsupported action: {action}. Use 'report' or 'move'.")
    if action == ACTION_MOVE and (source_root is None or move_root is None):
        raise ValueError("'move' requires source_root and move_root")

    stats = {
        'processed': 0,
        'errors': 0,
        'error_details': [],
    }

    for dupe in duplicates:
        if action == ACTION_REPORT:
            output(display_path(dupe.identity))
            stats['processed'] += 1
            continue

        dst = destination_path(dupe.identity, source_root, move_root)
        try:
            move_file(dupe.identity, dst)
        except OSError as e:
            message = f"Cannot move {display_path(dupe.identity)}: {e.strerror or e}"
            stats['errors'] += 1
            stats['error_details'].append({
                'path': dupe.identity,
                'error': message,
            })
            if logger:
                logger.debug(f"Move failed for {dupe.identity} -> {dst}: {e}")
            output(message)
            continue

        stats['processed'] += 1
        if logger:
            logger.debug(f"Moved: {dupe.identity} -> {dst}")
        output(display_path(dst))

    return stats


__all__ = [
    'ACTION_REPORT',
    'ACTION_MOVE',
    'destination_path',
    'move_file',
    'handle_duplicates',
]
