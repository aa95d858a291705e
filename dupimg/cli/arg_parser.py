"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
dupimg command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from ..user_config import get_user_config


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Defaults come from the user configuration (env vars, config file).

    Returns:
        Configured ArgumentParser instance
    """
    config = get_user_config()

    parser = argparse.ArgumentParser(
        prog='dupimg',
        description='Find visually similar images in a folder tree',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /path/to/photos
      List similar images (newer file of each similar pair)

  %(prog)s /path/to/photos --threshold 90
      Treat images with 90%% or more matching fingerprint bits as similar

  %(prog)s /path/to/photos --move ./similar
      Move similar images under ./similar, keeping their relative paths

  %(prog)s --cache-list
      Show cached folders and their cache files

  %(prog)s --cache-delete /path/to/photos
      Delete the cache for a folder
        """
    )

    # Positional argument
    parser.add_argument(
        'directory',
        type=Path,
        nargs='?',
        default=None,
        help='Folder containing the image files'
    )

    # Comparison options
    parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=config.default_threshold,
        help='Similarity threshold in percent (0-100, out-of-range values are clamped). '
             f'Default: {config.default_threshold}'
    )

    parser.add_argument(
        '-p', '--pattern',
        default=config.file_pattern,
        help=f'Filename pattern of files to fingerprint. Default: {config.file_pattern}'
    )

    parser.add_argument(
        '--images-only',
        action='store_true',
        help='Only fingerprint files with a known image extension'
    )

    # Action options
    parser.add_argument(
        '-m', '--move',
        type=Path,
        metavar='DIR',
        help='Move similar images to this existing folder, preserving relative paths'
    )

    # Cache management (mutually exclusive with each other)
    cache_group = parser.add_mutually_exclusive_group()
    cache_group.add_argument(
        '-cl', '--cache-list',
        action='store_true',
        help='List cached folders and their cache files'
    )
    cache_group.add_argument(
        '-cd', '--cache-delete',
        metavar='KEY',
        help='Delete the cache of the given folder'
    )

    parser.add_argument(
        '--cache-dir',
        type=Path,
        default=Path(config.cache_dir),
        help='Directory holding the cache registry and cache files'
    )

    parser.add_argument(
        '--errors-file',
        type=Path,
        default=Path(config.errors_file),
        help=f'Where to write the fingerprint error report. Default: {config.errors_file}'
    )

    # Performance options
    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=config.default_workers,
        help=f'Number of parallel workers. Default: {config.default_workers}'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars and per-file progress lines'
    )

    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['/path/to/photos', '--threshold', '90'])
        >>> args.directory
        PosixPath('/path/to/photos')
        >>> args.threshold
        90.0
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
