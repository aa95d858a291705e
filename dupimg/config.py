"""
Configuration constants for dupimg.

This module contains all configurable settings including:
- Fingerprint cache file formats and locations
- Similarity threshold and worker defaults
- Supported image extensions for the optional extension filter
"""

import os

# Field delimiter of a per-folder cache file line: identity;timestamp;fingerprint
# Not escaped inside the identity, so paths containing ';' do not round-trip.
DELIMITER = ';'

# Similarity threshold in percent of matching fingerprint bits (0-100).
# 100 = only identical fingerprints match.
DEFAULT_THRESHOLD = 100
MIN_THRESHOLD = 0.0
MAX_THRESHOLD = 100.0

# Width of a fingerprint in bits (imagehash hash_size=8 -> 8x8 bits)
FINGERPRINT_BITS = 64
HASH_SIZE = 8

# Fingerprint value reserved for "hashing failed"
FAILED_FINGERPRINT = 0

# Parallel workers for the sync pipeline
CPU_COUNT = os.cpu_count() or 1
DEFAULT_WORKERS = CPU_COUNT
MAX_WORKERS = CPU_COUNT * 4

# Default filename pattern for folder enumeration (all files)
DEFAULT_PATTERN = '*'

# Cache registry (folder path -> cache file name) and per-folder cache files
REGISTRY_FILE_NAME = 'dupimg.cache.json'
CACHE_FILE_SUFFIX = '.txt'

# Paths from os.walk may carry undecodable bytes as lone surrogates; every
# cache, registry and report file is read and written with this handler so
# those bytes round-trip unchanged.
FILE_ENCODING = 'utf-8'
FILE_ENCODING_ERRORS = 'surrogateescape'
DEFAULT_CACHE_DIR = os.path.join(os.path.expanduser('~'), '.dupimg')

# Report of entries whose fingerprint could not be computed
ERRORS_FILE = 'errors.txt'

# Decompression bomb limit applied to Pillow
MAX_IMAGE_PIXELS = 500_000_000

# Show a comparison progress bar above this many pairwise comparisons
COMPARE_PROGRESS_MIN = 1000

# Image extensions accepted by --images-only
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # Other formats
    '.ico', '.icns', '.psd',
    '.heic', '.heif', '.avif',
    '.pbm', '.pgm', '.ppm', '.pnm',
    '.tga', '.dds',
    '.jp2', '.j2k', '.jpf', '.jpx',
    '.pcx', '.sgi',
}
