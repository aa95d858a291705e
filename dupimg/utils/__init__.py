"""
Helpers shared by the dupimg command line.

- formatters: counts, sync summaries and match descriptions for log output
- validators: folder and threshold checks
- exporters: the fingerprint error report
"""

from __future__ import annotations

from . import exporters, formatters, validators
from .exporters import export_error_report
from .formatters import display_path, format_match, format_number, format_sync_stats
from .validators import validate_directory, validate_threshold

__all__ = [
    'exporters',
    'formatters',
    'validators',
    'export_error_report',
    'display_path',
    'format_match',
    'format_number',
    'format_sync_stats',
    'validate_directory',
    'validate_threshold',
]
