"""
Cache registry: source folder -> per-folder cache file.

The registry is a JSON object mapping a logical key (normally the absolute
source folder path) to an opaque cache file name (random 128-bit hex id plus
``.txt``). Cache files live next to the registry file. The registry is loaded
once at construction and rewritten in full on every add or delete.
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from ..config import CACHE_FILE_SUFFIX, DEFAULT_PATTERN, REGISTRY_FILE_NAME
from .store import FingerprintStore
from .utils import atomic_write, open_text

logger = logging.getLogger(__name__)


class CacheRegistryError(Exception):
    """Raised when the registry file cannot be read or is not a string map."""


class CacheRegistry:
    """
    Maps folder keys to FingerprintStore cache files.

    Not safe for concurrent mutation; one registry instance owns its file for
    the duration of a run.

    Usage:
        registry = CacheRegistry("~/.dupimg/dupimg.cache.json")
        store, created = registry.get_or_create("/photos")
    """

    def __init__(self, path: str | Path):
        """
        Args:
            path: Registry JSON file

        Raises:
            CacheRegistryError: If an existing registry file is unreadable
        """
        self.path = os.path.abspath(os.path.expanduser(str(path)))
        self._settings: dict[str, str] = {}
        self.load()

    @classmethod
    def in_directory(cls, cache_dir: str | Path) -> 'CacheRegistry':
        """Open the registry file kept in ``cache_dir``."""
        return cls(os.path.join(os.path.expanduser(str(cache_dir)), REGISTRY_FILE_NAME))

    @property
    def cache_dir(self) -> str:
        """Directory holding the registry and its cache files."""
        return os.path.dirname(self.path)

    def cache_file_path(self, identifier: str) -> str:
        """Absolute path of the cache file for an identifier."""
        return os.path.join(self.cache_dir, identifier)

    def __contains__(self, key: object) -> bool:
        return key in self._settings

    def __len__(self) -> int:
        return len(self._settings)

    def get(self, key: str) -> Optional[str]:
        """Cache file identifier for a key, if registered."""
        return self._settings.get(key)

    def load(self) -> None:
        """Read the registry file, if it exists. Nothing is written on failure."""
        if not os.path.exists(self.path):
            self._settings = {}
            return

        try:
            with open_text(self.path) as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CacheRegistryError(f"Cannot read cache registry {self.path}: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise CacheRegistryError(
                f"Cache registry {self.path} is not a JSON object of strings"
            )

        self._settings = data
        logger.debug(f"Loaded {len(data):,} cache registrations from {self.path}")

    def save(self) -> None:
        """
        Rewrite the registry file in full.

        The file is replaced atomically: a failed write leaves the previous
        registry on disk.
        """
        with atomic_write(self.path) as f:
            json.dump(self._settings, f, ensure_ascii=False, indent=2)

    def _new_identifier(self) -> str:
        used = set(self._settings.values())
        while True:
            identifier = f"{uuid.uuid4().hex}{CACHE_FILE_SUFFIX}"
            if identifier not in used and not os.path.exists(self.cache_file_path(identifier)):
                return identifier

    def get_or_create(self, key: str, pattern: str = DEFAULT_PATTERN) -> tuple[FingerprintStore, bool]:
        """
        Get the store registered for ``key``, registering a new one if needed.

        A new key gets a fresh identifier and the registry file is rewritten
        immediately. An existing key's store is loaded from its cache file.

        Args:
            key: Logical key (source folder path)
            pattern: Filename pattern for the store's folder sync

        Returns:
            Tuple of (store, created)
        """
        identifier = self._settings.get(key)
        created = identifier is None
        if created:
            identifier = self._new_identifier()
            self._settings[key] = identifier
            try:
                self.save()
            except BaseException:
                del self._settings[key]
                raise
            logger.info(f"Created cache {identifier} for {key}")

        store = FingerprintStore(self.cache_file_path(identifier), pattern=pattern)
        if not created:
            store.load()
        return store, created

    def delete(self, key: str) -> bool:
        """
        Unregister ``key`` and delete its cache file.

        Returns:
            True if the key was registered, False (no side effects) otherwise
        """
        identifier = self._settings.pop(key, None)
        if identifier is None:
            return False

        cache_file = self.cache_file_path(identifier)
        try:
            os.remove(cache_file)
        except FileNotFoundError:
            logger.debug(f"Cache file already gone: {cache_file}")
        self.save()
        logger.info(f"Deleted cache {identifier} for {key}")
        return True

    def list(self) -> list[tuple[str, str]]:
        """Registered (key, identifier) pairs in registration order."""
        return list(self._settings.items())


__all__ = ['CacheRegistry', 'CacheRegistryError']
