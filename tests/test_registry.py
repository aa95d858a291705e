"""
Unit tests for the cache registry.
"""

import json
import os
import sys

import pytest
from dupimg.cache import CacheRegistry, CacheRegistryError
from dupimg.config import REGISTRY_FILE_NAME
from dupimg.models import FingerprintEntry


@pytest.fixture
def registry_path(temp_dir):
    return temp_dir / "cache" / "dupimg.cache.json"


class TestGetOrCreate:
    """Test registering and reopening caches."""

    def test_missing_registry_is_empty(self, registry_path):
        registry = CacheRegistry(registry_path)
        assert len(registry) == 0
        assert not registry_path.exists()

    def test_create_writes_registry_immediately(self, registry_path):
        registry = CacheRegistry(registry_path)
        store, created = registry.get_or_create("/photos")

        assert created
        assert len(store) == 0
        data = json.loads(registry_path.read_text(encoding='utf-8'))
        identifier = data["/photos"]
        assert identifier.endswith(".txt")
        assert len(identifier) == 32 + len(".txt")
        assert store.path == os.path.join(str(registry_path.parent), identifier)

    def test_existing_key_reuses_cache(self, registry_path, number_files):
        registry = CacheRegistry(registry_path)
        store, _ = registry.get_or_create("/photos")
        one = str(number_files / "one.txt")
        store.add_or_update(FingerprintEntry(one, 5, 77), lambda c: c)
        store.save()

        reopened = CacheRegistry(registry_path)
        again, created = reopened.get_or_create("/photos")
        assert not created
        assert again.path == store.path
        assert again.get(one).fingerprint == 77

    def test_pattern_passed_to_store(self, registry_path):
        store, _ = CacheRegistry(registry_path).get_or_create("/photos", pattern="*.jpg")
        assert store.pattern == "*.jpg"

    def test_identifiers_are_unique(self, registry_path):
        registry = CacheRegistry(registry_path)
        for i in range(20):
            registry.get_or_create(f"/folder{i}")
        identifiers = [identifier for _, identifier in registry.list()]
        assert len(set(identifiers)) == 20

    def test_registry_is_pretty_utf8_json(self, registry_path):
        registry = CacheRegistry(registry_path)
        registry.get_or_create("/фото/写真")

        text = registry_path.read_text(encoding='utf-8')
        assert "/фото/写真" in text
        assert "\n  " in text

    def test_in_directory(self, temp_dir):
        registry = CacheRegistry.in_directory(temp_dir / "cache")
        assert registry.path == str(temp_dir / "cache" / REGISTRY_FILE_NAME)
        assert registry.cache_dir == str(temp_dir / "cache")

    def test_list_in_registration_order(self, registry_path):
        registry = CacheRegistry(registry_path)
        for key in ("/b", "/a", "/c"):
            registry.get_or_create(key)
        assert [key for key, _ in CacheRegistry(registry_path).list()] == ["/b", "/a", "/c"]


class TestDelete:
    """Test cache deletion."""

    def test_delete_removes_only_its_cache(self, registry_path, number_files):
        registry = CacheRegistry(registry_path)
        first, _ = registry.get_or_create("/k1")
        second, _ = registry.get_or_create("/k2")
        one = str(number_files / "one.txt")
        for store in (first, second):
            store.add_or_update(FingerprintEntry(one, 1, 1), lambda c: c)
            store.save()

        assert registry.delete("/k1")

        assert not os.path.exists(first.path)
        assert os.path.exists(second.path)
        reloaded = CacheRegistry(registry_path)
        assert "/k1" not in reloaded
        assert reloaded.get("/k2") == os.path.basename(second.path)

    def test_delete_without_cache_file(self, registry_path):
        registry = CacheRegistry(registry_path)
        registry.get_or_create("/k1")
        assert registry.delete("/k1")
        assert len(CacheRegistry(registry_path)) == 0

    def test_delete_unknown_key_has_no_side_effects(self, registry_path):
        registry = CacheRegistry(registry_path)
        registry.get_or_create("/k1")
        before = registry_path.read_bytes()

        assert not registry.delete("/unknown")
        assert registry_path.read_bytes() == before


class TestCorruptRegistry:
    """Test handling of unreadable registry files."""

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"/a": 5}'])
    def test_raises_without_writing(self, registry_path, content):
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(content, encoding='utf-8')

        with pytest.raises(CacheRegistryError):
            CacheRegistry(registry_path)
        assert registry_path.read_text(encoding='utf-8') == content


class TestUndecodableKeys:
    """Test keys carrying bytes that are not valid UTF-8."""

    @pytest.mark.skipif(sys.platform == 'win32', reason="POSIX byte paths")
    def test_key_round_trips(self, registry_path):
        key = os.fsdecode(b"/photos/\xff")
        registry = CacheRegistry(registry_path)
        registry.get_or_create("/photos/good")
        registry.get_or_create(key)

        assert b'"/photos/\xff"' in registry_path.read_bytes()
        reloaded = CacheRegistry(registry_path)
        assert reloaded.get(key) == registry.get(key)
        assert "/photos/good" in reloaded

    def test_unwritable_key_leaves_registry_intact(self, registry_path):
        registry = CacheRegistry(registry_path)
        registry.get_or_create("/photos/good")
        before = registry_path.read_bytes()

        with pytest.raises(UnicodeEncodeError):
            registry.get_or_create("/photos/\ud800")

        assert registry_path.read_bytes() == before
        assert "/photos/\ud800" not in registry
        assert os.listdir(registry_path.parent) == [registry_path.name]
        assert [key for key, _ in CacheRegistry(registry_path).list()] == ["/photos/good"]
