"""
Validation of command-line folders and thresholds for dupimg.
"""

from __future__ import annotations

import os

from ..config import MAX_THRESHOLD, MIN_THRESHOLD


def validate_directory(directory: str) -> tuple[bool, str]:
    """
    Check that ``directory`` is an existing, readable folder.

    Returns:
        Tuple of (is_valid, error_message)

    Examples:
        >>> validate_directory('/nonexistent/photos')
        (False, '/nonexistent/photos not found.')
    """
    if not directory:
        return False, "A folder path is required"
    if not os.path.exists(directory):
        return False, f"{directory} not found."
    if not os.path.isdir(directory):
        return False, f"{directory} is not a directory"
    if not os.access(directory, os.R_OK | os.X_OK):
        return False, f"{directory} is not readable"
    return True, ""


def validate_threshold(threshold: float) -> tuple[bool, str]:
    """
    Check that a similarity threshold lies in 0-100.

    Out-of-range numbers are still usable since the comparer clamps them;
    a False result only means clamping will happen.

    Examples:
        >>> validate_threshold(90)
        (True, '')
        >>> validate_threshold(150)
        (False, 'Threshold 150.0 is outside 0-100')
    """
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        return False, f"Threshold {threshold!r} is not a number"
    if not MIN_THRESHOLD <= value <= MAX_THRESHOLD:
        return False, f"Threshold {value} is outside 0-100"
    return True, ""


__all__ = ['validate_directory', 'validate_threshold']
