"""
Data models for dupimg.

Contains the FingerprintEntry value type and the match record produced by
duplicate resolution.
"""

from dataclasses import dataclass
import os
from typing import Optional

from .config import DELIMITER, FAILED_FINGERPRINT, FINGERPRINT_BITS

_MAX_TIMESTAMP = 2 ** 63 - 1
_MIN_TIMESTAMP = -(2 ** 63)
_MAX_FINGERPRINT = 2 ** FINGERPRINT_BITS - 1


def _parse_int(text: str, lower: int, upper: int) -> int:
    """Parse an integer field, falling back to 0 on malformed or out-of-range text."""
    try:
        value = int(text.strip())
    except ValueError:
        return 0
    if not lower <= value <= upper:
        return 0
    return value


def file_timestamp(stat_result: os.stat_result) -> int:
    """
    File timestamp in nanoseconds, used to detect changed files.

    This is the creation time where the platform records one
    (``st_birthtime``, e.g. macOS and Windows). Elsewhere, Linux included,
    it is ``st_ctime_ns``, the inode change time: a chmod, chown or rename
    also changes it, which only costs a recompute.
    """
    birthtime_ns = getattr(stat_result, 'st_birthtime_ns', None)
    if birthtime_ns is not None:
        return birthtime_ns
    birthtime = getattr(stat_result, 'st_birthtime', None)
    if birthtime is not None:
        return int(birthtime * 1_000_000_000)
    return stat_result.st_ctime_ns


@dataclass(eq=False)
class FingerprintEntry:
    """
    One file's fingerprint record.

    Equality and hashing use ``identity`` only, so an entry can act as a
    set/map key while its timestamp and fingerprint evolve.

    Attributes:
        identity: Canonical absolute path of the file
        timestamp: File creation time (ns), used for ordering only
        fingerprint: 64-bit perceptual hash; 0 means hashing failed
        error_message: Why the fingerprint is 0 (empty when valid)
    """
    identity: str
    timestamp: int = 0
    fingerprint: int = FAILED_FINGERPRINT
    error_message: str = ""

    def __hash__(self):
        return hash(self.identity)

    def __eq__(self, other):
        if not isinstance(other, FingerprintEntry):
            return False
        return self.identity == other.identity

    def __lt__(self, other: 'FingerprintEntry') -> bool:
        return self.timestamp < other.timestamp

    def compare_to(self, other: 'FingerprintEntry') -> int:
        """Order by timestamp: -1 if older, 1 if newer, 0 if equal."""
        if self.timestamp < other.timestamp:
            return -1
        if self.timestamp > other.timestamp:
            return 1
        return 0

    @property
    def is_valid(self) -> bool:
        """True when the entry carries a usable fingerprint."""
        return self.fingerprint != FAILED_FINGERPRINT

    @property
    def filename(self) -> str:
        return os.path.basename(self.identity)

    def serialize(self) -> str:
        """Render as ``identity;timestamp;fingerprint``."""
        return f"{self.identity}{DELIMITER}{self.timestamp}{DELIMITER}{self.fingerprint}"

    @classmethod
    def deserialize(cls, line: str) -> 'FingerprintEntry':
        """
        Parse a cache file line.

        Never raises: a malformed line becomes an entry with fingerprint 0
        and the parse failure recorded in ``error_message``.
        """
        entry = cls(identity="")
        try:
            fields = line.split(DELIMITER)
            entry.identity = fields[0]
            entry.timestamp = _parse_int(fields[1], _MIN_TIMESTAMP, _MAX_TIMESTAMP)
            entry.fingerprint = _parse_int(fields[2], 0, _MAX_FINGERPRINT)
        except Exception as e:
            entry.fingerprint = FAILED_FINGERPRINT
            entry.error_message = f"Malformed cache line: {e}"
        return entry

    @classmethod
    def from_path(cls, path: str, stat_result: Optional[os.stat_result] = None) -> 'FingerprintEntry':
        """Build a candidate entry (fingerprint unset) from a file on disk."""
        if stat_result is None:
            stat_result = os.stat(path)
        return cls(identity=path, timestamp=file_timestamp(stat_result))


@dataclass
class DuplicateMatch:
    """
    A matching pair found by the anchor sweep.

    Attributes:
        kept: Entry judged to be the original (older, or earlier-iterated on tie)
        duplicate: Entry judged redundant (newer)
        similarity: Percentage of matching fingerprint bits
    """
    kept: FingerprintEntry
    duplicate: FingerprintEntry
    similarity: float
