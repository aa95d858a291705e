"""
Hashing module for the scanner package.

Provides image decoding with typed failures and 64-bit perceptual
fingerprint calculation.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import FINGERPRINT_BITS, HASH_SIZE
from .dependencies import Image, imagehash, np

logger = logging.getLogger(__name__)

DECODE_UNKNOWN_FORMAT = 'unknown_format'
DECODE_INVALID_CONTENT = 'invalid_content'
DECODE_OTHER = 'other'


class ImageDecodeError(Exception):
    """
    Raised when an image file cannot be decoded.

    Attributes:
        reason: Human-readable failure reason (recorded as the entry's error)
        kind: One of 'unknown_format', 'invalid_content', 'other'
    """

    def __init__(self, reason: str, kind: str = DECODE_OTHER):
        super().__init__(reason)
        self.reason = reason
        self.kind = kind


def load_image(filepath: str | Path) -> Image.Image:
    """
    Decode an image file into memory.

    Args:
        filepath: Path to the image

    Returns:
        Fully loaded PIL image (detached from the file handle)

    Raises:
        ImageDecodeError: If the file is not a recognised image, is corrupt
            or truncated, or cannot be read
    """
    try:
        with Image.open(filepath) as img:
            # Force load to detect truncated/corrupt images early
            try:
                img.load()
            except Exception as load_err:
                raise ImageDecodeError(
                    f"Contains invalid content: {load_err}", DECODE_INVALID_CONTENT
                ) from load_err
            return img.copy()
    except ImageDecodeError:
        raise
    except Image.UnidentifiedImageError as e:
        raise ImageDecodeError("Unknown format", DECODE_UNKNOWN_FORMAT) from e
    except Exception as e:
        raise ImageDecodeError(str(e) or type(e).__name__, DECODE_OTHER) from e


def hash_to_int(image_hash: imagehash.ImageHash) -> int:
    """Pack an ImageHash bit matrix into an integer, most significant bit first."""
    bits = np.asarray(image_hash.hash, dtype=bool).flatten()
    return int.from_bytes(np.packbits(bits).tobytes(), byteorder='big')


def compute_fingerprint(img: Image.Image) -> int:
    """
    Calculate the 64-bit perceptual fingerprint of a decoded image.

    Uses the pHash algorithm with an 8x8 hash.

    Args:
        img: Decoded PIL image

    Returns:
        Fingerprint as an unsigned 64-bit integer
    """
    # Convert to RGB if necessary (handles transparency, palettes, etc.)
    if img.mode not in ('RGB', 'L'):
        img = img.convert('RGB')
    phash = imagehash.phash(img, hash_size=HASH_SIZE)
    value = hash_to_int(phash)
    if value.bit_length() > FINGERPRINT_BITS:
        logger.debug(f"Fingerprint wider than {FINGERPRINT_BITS} bits, truncating")
        value &= (1 << FINGERPRINT_BITS) - 1
    return value


__all__ = [
    'ImageDecodeError',
    'DECODE_UNKNOWN_FORMAT',
    'DECODE_INVALID_CONTENT',
    'DECODE_OTHER',
    'load_image',
    'hash_to_int',
    'compute_fingerprint',
]
