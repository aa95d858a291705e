"""
Scanner package for dupimg.

Provides file enumeration, image decoding, fingerprint calculation, bounded
parallel execution and duplicate resolution.

Public API:
- find_files: Enumerate files under a directory
- load_image: Decode an image, raising ImageDecodeError on failure
- compute_fingerprint: 64-bit perceptual hash of a decoded image
- run_parallel: Bounded thread-pool execution with a progress sink
- iter_matches / find_duplicates: Anchor-sweep duplicate resolution
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .file_discovery import DirectoryNotFoundError, find_files, image_extensions
from .hashing import ImageDecodeError, compute_fingerprint, hash_to_int, load_image
from .parallel import ProgressSink, bounded_workers, run_parallel
from .deduplication import comparison_order, find_duplicates, iter_matches

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # File discovery
    'DirectoryNotFoundError',
    'find_files',
    'image_extensions',
    # Hashing
    'ImageDecodeError',
    'compute_fingerprint',
    'hash_to_int',
    'load_image',
    # Parallel execution
    'ProgressSink',
    'bounded_workers',
    'run_parallel',
    # Duplicate detection
    'comparison_order',
    'find_duplicates',
    'iter_matches',
    # Feature detection
    'has_heif_support',
]
