"""
Per-folder fingerprint store.

A FingerprintStore is a thread-safe identity -> FingerprintEntry map backed by
one flat text file (one ``identity;timestamp;fingerprint`` line per entry).
``sync_folder`` reconciles the map with a folder's current contents,
computing fingerprints for new or changed files on a bounded thread pool.

Staleness is detected by creation timestamp only: a file replaced by
different content with the same timestamp keeps its old fingerprint.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..config import DEFAULT_PATTERN, FAILED_FINGERPRINT
from ..models import FingerprintEntry
from ..scanner.file_discovery import find_files
from ..scanner.hashing import ImageDecodeError, compute_fingerprint, load_image
from ..scanner.parallel import run_parallel
from .utils import SyncStats, atomic_write, open_text

logger = logging.getLogger(__name__)

HashFunction = Callable[[object], int]
ImageLoader = Callable[[str], object]


def fingerprint_entry(
    entry: FingerprintEntry,
    hash_fn: HashFunction = compute_fingerprint,
    loader: ImageLoader = load_image,
) -> FingerprintEntry:
    """
    Decode and hash the file behind ``entry``, recording failures on the entry.

    Never raises for decode or hash failures: they leave fingerprint 0 and
    set ``error_message``.
    """
    entry.error_message = ""
    try:
        img = loader(entry.identity)
    except ImageDecodeError as e:
        entry.fingerprint = FAILED_FINGERPRINT
        entry.error_message = e.reason
        return entry
    except Exception as e:
        entry.fingerprint = FAILED_FINGERPRINT
        entry.error_message = str(e) or type(e).__name__
        return entry

    try:
        entry.fingerprint = int(hash_fn(img))
    except Exception as e:
        logger.debug(f"Fingerprint calculation failed for {entry.identity}: {e}")
        entry.fingerprint = FAILED_FINGERPRINT
        entry.error_message = f"Hash failed: {e}"
    finally:
        close = getattr(img, 'close', None)
        if callable(close):
            close()

    if entry.fingerprint == FAILED_FINGERPRINT and not entry.error_message:
        entry.error_message = "Fingerprint is zero"
    return entry


class FingerprintStore:
    """
    Thread-safe fingerprint entries for one source folder.

    At most one fingerprint computation runs per identity at a time:
    ``add_or_update`` holds a per-identity lock across the lookup, the
    computation and the replacement.

    Usage:
        store = FingerprintStore("/cache/0f3c...txt")
        store.load()
        store.sync_folder("/photos")
        store.save()
    """

    def __init__(self, path: str | Path, pattern: str = DEFAULT_PATTERN):
        """
        Args:
            path: Backing cache file
            pattern: Filename pattern used by sync_folder
        """
        self.path = str(path)
        self.pattern = pattern
        self._entries: dict[str, FingerprintEntry] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}
        self._synced: Optional[set[str]] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        if isinstance(identity, FingerprintEntry):
            identity = identity.identity
        with self._lock:
            return identity in self._entries

    def __iter__(self) -> Iterator[FingerprintEntry]:
        return iter(self.values())

    def get(self, identity: str) -> Optional[FingerprintEntry]:
        with self._lock:
            return self._entries.get(identity)

    def values(self) -> list[FingerprintEntry]:
        """Snapshot of the current entries."""
        with self._lock:
            return list(self._entries.values())

    def errors(self) -> list[FingerprintEntry]:
        """Entries whose fingerprint could not be computed, ordered by identity."""
        return sorted(
            (e for e in self.values() if not e.is_valid),
            key=lambda e: e.identity,
        )

    def current_entries(self) -> list[FingerprintEntry]:
        """
        Entries for the files found by the last ``sync_folder`` pass.

        Cached entries for files that have since been deleted, or that no
        longer match the pattern, are left out until ``save`` prunes them.
        Before any sync this is every entry.
        """
        entries = self.values()
        if self._synced is None:
            return entries
        return [e for e in entries if e.identity in self._synced]

    def _key_lock(self, identity: str) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(identity)
            if lock is None:
                lock = self._key_locks[identity] = threading.Lock()
            return lock

    def add_or_update(
        self,
        candidate: FingerprintEntry,
        factory: Callable[[FingerprintEntry], FingerprintEntry],
    ) -> tuple[FingerprintEntry, bool]:
        """
        Atomically insert or refresh the entry for ``candidate.identity``.

        If no entry exists, ``factory(candidate)`` is stored. If one exists
        with the same timestamp it is kept as is; otherwise it is replaced by
        ``factory(candidate)``.

        Returns:
            Tuple of (resulting entry, whether factory was called)
        """
        with self._key_lock(candidate.identity):
            with self._lock:
                current = self._entries.get(candidate.identity)
            if current is not None and current.compare_to(candidate) == 0:
                return current, False

            entry = factory(candidate)
            with self._lock:
                self._entries[entry.identity] = entry
            return entry, True

    def sync_folder(
        self,
        path: str | Path,
        hash_fn: HashFunction = compute_fingerprint,
        progress_callback: Optional[Callable[[FingerprintEntry], None]] = None,
        max_workers: Optional[int] = None,
        extensions: Optional[set[str]] = None,
        loader: ImageLoader = load_image,
    ) -> SyncStats:
        """
        Reconcile the store with the files currently under ``path``.

        Args:
            path: Source folder (enumerated recursively)
            hash_fn: Fingerprint function applied to each decoded image
            progress_callback: Optional callback(entry), invoked off the
                worker threads once per file after its entry is settled
            max_workers: Requested worker count (bounded by CPU count)
            extensions: Optional extension filter on top of ``pattern``
            loader: Image decoder

        Returns:
            SyncStats for this pass

        Raises:
            DirectoryNotFoundError: If ``path`` is not an existing directory
        """
        stats = SyncStats()
        stats_lock = threading.Lock()

        def factory(candidate: FingerprintEntry) -> FingerprintEntry:
            return fingerprint_entry(candidate, hash_fn, loader)

        def worker(candidate: FingerprintEntry) -> FingerprintEntry:
            entry, computed = self.add_or_update(candidate, factory)
            with stats_lock:
                if not computed:
                    stats.reused += 1
                elif entry.is_valid:
                    stats.computed += 1
                else:
                    stats.failed += 1
            return entry

        candidates = list(self._candidates(path, extensions))
        stats.total_files = len(candidates)
        self._synced = {c.identity for c in candidates}
        logger.debug(f"Found {stats.total_files:,} files under {path}")

        run_parallel(candidates, worker, max_workers=max_workers, progress_callback=progress_callback)

        logger.debug(
            f"Sync of {path}: {stats.reused:,} reused, {stats.computed:,} computed, "
            f"{stats.failed:,} failed"
        )
        return stats

    def _candidates(self, path: str | Path, extensions: Optional[set[str]]) -> Iterator[FingerprintEntry]:
        for filepath in find_files(path, self.pattern, extensions):
            try:
                yield FingerprintEntry.from_path(filepath)
            except OSError as e:
                logger.debug(f"Skipping {filepath}: {e}")

    def load(self) -> int:
        """
        Read entries from the backing file, if it exists.

        Lines never raise: malformed ones become error entries. When an
        identity appears on several lines, the last one wins.

        Returns:
            Number of lines read
        """
        if not os.path.exists(self.path):
            return 0

        count = 0
        with open_text(self.path) as f:
            for line in f:
                line = line.rstrip('\r\n')
                if not line:
                    continue
                entry = FingerprintEntry.deserialize(line)
                with self._lock:
                    self._entries[entry.identity] = entry
                count += 1

        logger.debug(f"Loaded {count:,} cache lines from {self.path}")
        return count

    def save(self) -> int:
        """
        Replace the backing file with the entries worth keeping.

        Entries whose file no longer exists or whose fingerprint failed are
        left out. Lines are written in ascending identity order to a temp file
        that then replaces the backing file, so a failed save leaves the
        previous contents in place.

        Returns:
            Number of entries written
        """
        keep = sorted(
            (e for e in self.values() if e.is_valid and os.path.isfile(e.identity)),
            key=lambda e: e.identity,
        )

        with atomic_write(self.path) as f:
            for entry in keep:
                f.write(entry.serialize())
                f.write('\n')

        logger.debug(f"Saved {len(keep):,} entries to {self.path}")
        return len(keep)


__all__ = ['FingerprintStore', 'fingerprint_entry']
