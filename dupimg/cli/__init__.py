"""
Command-line interface for dupimg.

``dupimg FOLDER`` fingerprints the folder (reusing its cache), prints the
newer file of every similar pair or moves it with ``--move``, and saves the
cache. ``--cache-list`` and ``--cache-delete`` manage the cache registry.
"""

from __future__ import annotations

from typing import Optional

from .actions import handle_duplicates
from .arg_parser import create_parser, parse_arguments
from .orchestrator import CLIOrchestrator, setup_logging
from .reporting import format_cache_list, notice_errors, print_cache_list


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI and return its exit code (0 success, 1 error).

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])
    """
    return CLIOrchestrator(argv).run()


__all__ = [
    'main',
    'CLIOrchestrator',
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'handle_duplicates',
    'format_cache_list',
    'notice_errors',
    'print_cache_list',
]
