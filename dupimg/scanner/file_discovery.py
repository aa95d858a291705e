"""
File discovery module for the scanner package.

Provides recursive enumeration of the regular files under a source folder,
filtered by a filename pattern and optionally by image extension.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterator, Optional

from ..config import DEFAULT_PATTERN, IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT


class DirectoryNotFoundError(FileNotFoundError):
    """Raised when the folder to enumerate does not exist or is not a directory."""


def image_extensions() -> set[str]:
    """Image extensions usable with the installed decoders."""
    if HAS_HEIF_SUPPORT:
        return set(IMAGE_EXTENSIONS)
    return {ext for ext in IMAGE_EXTENSIONS if ext not in {'.heic', '.heif'}}


def find_files(
    root_path: str | Path,
    pattern: str = DEFAULT_PATTERN,
    extensions: Optional[set[str]] = None,
) -> Iterator[str]:
    """
    Enumerate regular files under a directory, recursively.

    Args:
        root_path: Directory to search
        pattern: fnmatch-style filename pattern (default: all files)
        extensions: Optional set of lower-case extensions to keep

    Yields:
        Absolute file paths as strings

    Raises:
        DirectoryNotFoundError: If root_path is missing or not a directory

    Notes:
        - Unreadable subdirectories and entries are skipped silently
        - Symlinked directories are not followed
    """
    root = os.path.abspath(str(root_path))
    if not os.path.isdir(root):
        raise DirectoryNotFoundError(f"{root_path} not found.")

    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            if not fnmatch.fnmatch(name, pattern):
                continue
            if extensions is not None and os.path.splitext(name)[1].lower() not in extensions:
                continue
            filepath = os.path.join(dirpath, name)
            if os.path.isfile(filepath):
                yield filepath


__all__ = ['DirectoryNotFoundError', 'find_files', 'image_extensions']
