"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import random
import tempfile
import shutil
import time
from pathlib import Path
from PIL import Image


def make_noise_image(seed: int, size: int = 64) -> Image.Image:
    """Deterministic grayscale noise image; different seeds give unrelated fingerprints."""
    rng = random.Random(seed)
    return Image.frombytes('L', (size, size), rng.randbytes(size * size)).convert('RGB')


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.dupimg configuration."""
    from dupimg.user_config import get_user_config

    monkeypatch.setenv('DUPIMG_CONFIG_DIR', str(tmp_path / 'config'))
    for var in ('DUPIMG_THRESHOLD', 'DUPIMG_WORKERS', 'DUPIMG_PATTERN',
                'DUPIMG_CACHE_DIR', 'DUPIMG_ERRORS_FILE'):
        monkeypatch.delenv(var, raising=False)
    get_user_config().reload()
    yield
    get_user_config().reload()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a source folder with sample images for testing.

    Returns:
        dict with paths to:
        - root: the source folder
        - original: original.png (noise, seed 1), created first
        - copy: sub/copy.png (same pixels as original), created later
        - distinct: distinct.png (noise, seed 2)
        - corrupted: notes.txt (not an image)
    """
    root = temp_dir / "photos"
    (root / "sub").mkdir(parents=True)
    images = {'root': str(root)}

    original = make_noise_image(1)
    path1 = root / "original.png"
    original.save(path1, 'PNG')
    images['original'] = str(path1)

    distinct = make_noise_image(2)
    path2 = root / "distinct.png"
    distinct.save(path2, 'PNG')
    images['distinct'] = str(path2)

    # Make sure the copy is strictly newer on coarse-grained filesystems
    time.sleep(0.05)
    path3 = root / "sub" / "copy.png"
    original.save(path3, 'PNG', compress_level=9)
    images['copy'] = str(path3)

    path4 = root / "notes.txt"
    path4.write_text("not an image")
    images['corrupted'] = str(path4)

    return images


@pytest.fixture
def number_files(temp_dir):
    """
    Create a folder of text files holding integers, for fake hashing.

    Returns:
        Path to the folder containing one.txt (1), two.txt (2), deep/three.txt (3)
    """
    root = temp_dir / "numbers"
    (root / "deep").mkdir(parents=True)
    (root / "one.txt").write_text("1")
    (root / "two.txt").write_text("2")
    (root / "deep" / "three.txt").write_text("3")
    return root


@pytest.fixture
def fake_hashing():
    """
    Loader and hash function standing in for image decoding and pHash.

    The loader returns a file's text; the hash parses it as an integer, so
    a file containing "x" fails to hash.
    """
    def loader(path):
        with open(path, encoding='utf-8') as f:
            return f.read()

    def hash_fn(content):
        return int(content)

    return loader, hash_fn


@pytest.fixture
def noise_image():
    """Factory for deterministic noise images."""
    return make_noise_image
