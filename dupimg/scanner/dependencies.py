"""
Third-party imports for fingerprinting.

Pillow, imagehash and numpy are required. pillow-heif (HEIC/HEIF decoding)
and tqdm (progress bars) are picked up when installed.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

from ..config import MAX_IMAGE_PIXELS

_logger = logging.getLogger(__name__)

try:
    from PIL import Image
    import imagehash
    import numpy as np
except ImportError as e:
    raise ImportError(
        f"dupimg needs Pillow, imagehash and numpy ({e}).\n"
        "Install with: pip install Pillow imagehash numpy"
    ) from e

# Must run before any HEIC file is opened
HAS_HEIF_SUPPORT = False
try:
    from pillow_heif import register_heif_opener
    register_heif_opener()
    HAS_HEIF_SUPPORT = True
except ImportError:
    _logger.debug("pillow-heif not installed, .heic/.heif files will be reported as errors")

# Scans and panoramas exceed PIL's default bomb limit
Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

HAS_TQDM = False
_tqdm_class: Optional[Any] = None
try:
    from tqdm import tqdm as _tqdm_import
    HAS_TQDM = True
    _tqdm_class = _tqdm_import
except ImportError:
    pass


def progress_bar(total: Optional[int], desc: str, unit: str) -> Optional[Any]:
    """A tqdm bar writing to stderr, or None when tqdm is unavailable."""
    if not HAS_TQDM or _tqdm_class is None:
        return None
    return _tqdm_class(total=total, desc=desc, unit=unit, ncols=80)


__all__ = [
    'Image',
    'imagehash',
    'np',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'progress_bar',
]
