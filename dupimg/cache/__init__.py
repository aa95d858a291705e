"""
Fingerprint cache for dupimg.

Provides persistent per-folder fingerprint caching to enable:
- Incremental re-scans (only hash new or changed files)
- One reusable cache file per source folder

Public API:
- CacheRegistry: folder key -> cache file registry (JSON)
- CacheRegistryError: unreadable registry file
- FingerprintStore: per-folder entries, load/save/sync
- SyncStats: statistics for one folder sync
"""

from __future__ import annotations

from .registry import CacheRegistry, CacheRegistryError
from .store import FingerprintStore, fingerprint_entry
from .utils import SyncStats


__all__ = [
    'CacheRegistry',
    'CacheRegistryError',
    'FingerprintStore',
    'fingerprint_entry',
    'SyncStats',
]
