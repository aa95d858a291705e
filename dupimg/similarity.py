"""
Fingerprint similarity scoring.

Similarity is the percentage of matching bits between two 64-bit
fingerprints. A SimilarityComparer is a plain configuration value holding a
threshold that is clamped into [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import FINGERPRINT_BITS, MAX_THRESHOLD, MIN_THRESHOLD
from .models import FingerprintEntry

_MASK = (1 << FINGERPRINT_BITS) - 1


def hamming_distance(a: int, b: int) -> int:
    """Number of differing bits between two fingerprints."""
    return bin((a ^ b) & _MASK).count('1')


def similarity(a: int, b: int) -> float:
    """
    Percentage of matching bits between two fingerprints.

    Examples:
        >>> similarity(0xFF, 0xFF)
        100.0
        >>> similarity(0, 2 ** 64 - 1)
        0.0
    """
    return 100.0 * (FINGERPRINT_BITS - hamming_distance(a, b)) / FINGERPRINT_BITS


def clamp_threshold(threshold: float) -> float:
    """Clamp a threshold into [0, 100]."""
    return max(MIN_THRESHOLD, min(MAX_THRESHOLD, float(threshold)))


@dataclass(frozen=True)
class SimilarityComparer:
    """
    Threshold-based fingerprint matcher.

    Out-of-range thresholds are clamped, not rejected. Entries with a failed
    fingerprint (0) must be filtered out by the caller.
    """
    threshold: float = MAX_THRESHOLD

    def __post_init__(self):
        object.__setattr__(self, 'threshold', clamp_threshold(self.threshold))

    def similarity(self, a: int, b: int) -> float:
        return similarity(a, b)

    def is_match(self, a: FingerprintEntry, b: FingerprintEntry) -> bool:
        """True if the two entries' fingerprints are at least ``threshold`` percent alike."""
        return similarity(a.fingerprint, b.fingerprint) >= self.threshold


__all__ = [
    'SimilarityComparer',
    'clamp_threshold',
    'hamming_distance',
    'similarity',
]
