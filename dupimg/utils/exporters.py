"""
Export functionality for dupimg.

Writes the fingerprint error report: one ``errorMessage;identity`` line per
entry whose fingerprint could not be computed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

from ..cache.utils import open_text
from ..config import DELIMITER
from ..models import FingerprintEntry


def _export_errors(entries: Iterable[FingerprintEntry], file_handle: TextIO) -> int:
    count = 0
    for entry in entries:
        file_handle.write(f"{entry.error_message}{DELIMITER}{entry.identity}\n")
        count += 1
    return count


def export_error_report(entries: Iterable[FingerprintEntry], output_path: str | Path) -> int:
    """
    Write the error report, overwriting any previous one.

    Args:
        entries: Entries with a failed fingerprint
        output_path: Report file path

    Returns:
        Number of lines written

    Raises:
        OSError: If the file cannot be written
        UnicodeError: If a path holds characters that cannot be encoded
    """
    with open_text(str(output_path), 'w') as f:
        return _export_errors(entries, f)


__all__ = ['export_error_report']
