"""
dupimg
======
Find visually similar images in a folder tree.

Features:
- 64-bit perceptual fingerprints (pHash) for every file
- Per-folder fingerprint cache reused across runs
- Parallel fingerprinting of new and changed files
- Threshold-based similarity (percent of matching bits)
- Report or move the newer image of each similar pair
"""

__version__ = "1.0.0"

from .models import FingerprintEntry, DuplicateMatch
from .config import DEFAULT_THRESHOLD, DELIMITER
from .similarity import SimilarityComparer, similarity
from .scanner import (
    DirectoryNotFoundError,
    ImageDecodeError,
    compute_fingerprint,
    find_duplicates,
    find_files,
    iter_matches,
    load_image,
)
from .cache import CacheRegistry, CacheRegistryError, FingerprintStore, SyncStats

__all__ = [
    "FingerprintEntry",
    "DuplicateMatch",
    "DEFAULT_THRESHOLD",
    "DELIMITER",
    "SimilarityComparer",
    "similarity",
    "DirectoryNotFoundError",
    "ImageDecodeError",
    "compute_fingerprint",
    "find_duplicates",
    "find_files",
    "iter_matches",
    "load_image",
    "CacheRegistry",
    "CacheRegistryError",
    "FingerprintStore",
    "SyncStats",
]
