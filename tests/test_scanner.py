"""
Unit tests for scanner module functions.
"""

import threading
import time

import pytest
from pathlib import Path
from dupimg.scanner import (
    DirectoryNotFoundError,
    ImageDecodeError,
    bounded_workers,
    compute_fingerprint,
    find_files,
    image_extensions,
    load_image,
    run_parallel,
)
from dupimg.scanner.hashing import DECODE_UNKNOWN_FORMAT, DECODE_INVALID_CONTENT
from dupimg.config import MAX_WORKERS
from dupimg.similarity import similarity


class TestFindFiles:
    """Test find_files function."""

    def test_finds_all_files_recursively(self, sample_images):
        files = sorted(find_files(sample_images['root']))
        assert files == sorted([
            sample_images['original'],
            sample_images['distinct'],
            sample_images['copy'],
            sample_images['corrupted'],
        ])

    def test_pattern(self, sample_images):
        files = list(find_files(sample_images['root'], pattern='*.png'))
        assert len(files) == 3
        assert all(f.endswith('.png') for f in files)

    def test_extension_filter(self, sample_images):
        files = list(find_files(sample_images['root'], extensions=image_extensions()))
        assert sample_images['corrupted'] not in files
        assert len(files) == 3

    def test_returns_absolute_paths(self, sample_images, monkeypatch):
        monkeypatch.chdir(Path(sample_images['root']).parent)
        files = list(find_files("photos"))
        assert files
        assert all(Path(f).is_absolute() for f in files)

    def test_empty_directory(self, temp_dir):
        empty_dir = temp_dir / "empty"
        empty_dir.mkdir()
        assert list(find_files(empty_dir)) == []

    def test_missing_directory(self, temp_dir):
        with pytest.raises(DirectoryNotFoundError):
            list(find_files(temp_dir / "missing"))

    def test_file_is_not_a_directory(self, sample_images):
        with pytest.raises(DirectoryNotFoundError):
            list(find_files(sample_images['original']))


class TestLoadImage:
    """Test load_image function."""

    def test_load_valid_image(self, sample_images):
        img = load_image(sample_images['original'])
        assert img.size == (64, 64)

    def test_unknown_format(self, sample_images):
        with pytest.raises(ImageDecodeError) as exc_info:
            load_image(sample_images['corrupted'])
        assert exc_info.value.kind == DECODE_UNKNOWN_FORMAT
        assert exc_info.value.reason == "Unknown format"

    def test_truncated_image(self, sample_images, temp_dir):
        data = Path(sample_images['original']).read_bytes()
        truncated = temp_dir / "truncated.png"
        truncated.write_bytes(data[:len(data) // 2])

        with pytest.raises(ImageDecodeError) as exc_info:
            load_image(truncated)
        assert exc_info.value.kind == DECODE_INVALID_CONTENT

    def test_missing_file(self, temp_dir):
        with pytest.raises(ImageDecodeError):
            load_image(temp_dir / "missing.png")


class TestComputeFingerprint:
    """Test compute_fingerprint function."""

    def test_fits_in_64_bits(self, noise_image):
        value = compute_fingerprint(noise_image(1))
        assert 0 < value < 2 ** 64

    def test_identical_pixels_identical_fingerprint(self, noise_image):
        assert compute_fingerprint(noise_image(1)) == compute_fingerprint(noise_image(1))

    def test_different_images_differ(self, noise_image):
        a = compute_fingerprint(noise_image(1))
        b = compute_fingerprint(noise_image(2))
        assert similarity(a, b) < 90

    def test_handles_non_rgb_modes(self, noise_image):
        rgba = noise_image(3).convert('RGBA')
        assert compute_fingerprint(rgba) == compute_fingerprint(noise_image(3))

    def test_same_pixels_from_files(self, sample_images):
        a = compute_fingerprint(load_image(sample_images['original']))
        b = compute_fingerprint(load_image(sample_images['copy']))
        assert a == b


class TestRunParallel:
    """Test run_parallel function."""

    def test_returns_all_results(self):
        results = run_parallel(range(20), lambda x: x * 2, max_workers=4)
        assert sorted(results) == [x * 2 for x in range(20)]

    def test_empty_input(self):
        assert run_parallel([], lambda x: x) == []

    def test_progress_called_once_per_item(self):
        seen = []
        lock = threading.Lock()

        def callback(result):
            with lock:
                seen.append(result)

        run_parallel(range(10), lambda x: x + 1, max_workers=3, progress_callback=callback)
        assert sorted(seen) == list(range(1, 11))

    def test_slow_callback_does_not_block_workers(self):
        """Workers finish while the progress sink is still draining."""
        finished = []
        release = threading.Event()

        def worker(x):
            finished.append(x)
            return x

        def callback(result):
            release.wait(timeout=5)

        thread = threading.Thread(
            target=run_parallel, args=(range(5), worker), kwargs={'max_workers': 1, 'progress_callback': callback}
        )
        thread.start()
        deadline = time.time() + 5
        while len(finished) < 5 and time.time() < deadline:
            time.sleep(0.01)
        assert len(finished) == 5
        assert thread.is_alive()  # still joining the sink
        release.set()
        thread.join(timeout=5)
        assert not thread.is_alive()

    def test_callback_errors_are_swallowed(self):
        def callback(result):
            raise RuntimeError("boom")

        results = run_parallel(range(3), lambda x: x, progress_callback=callback)
        assert sorted(results) == [0, 1, 2]

    def test_bounded_workers(self):
        assert bounded_workers(0) == 1
        assert bounded_workers(-3) == 1
        assert bounded_workers(10 ** 6) == MAX_WORKERS
        assert 1 <= bounded_workers(None) <= MAX_WORKERS
